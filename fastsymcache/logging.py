"""Package logger shared by every module."""

import logging
import sys

from fastsymcache.config import LOG_LEVEL

logger = logging.getLogger("fastsymcache")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(_handler)

logger.setLevel(LOG_LEVEL)
