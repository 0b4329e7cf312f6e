"""Application configuration loaded from environment variables.

Single Responsibility: This module is solely responsible for defining
and loading configuration values used across the application.
"""

import os

CHUNK_SIZE = int(os.environ.get("FASTSYM_CHUNK_SIZE", 1024 * 1024 * 2))

# Unset means no timeout: a hung symbol server stalls the lookup.
_timeout = os.environ.get("FASTSYM_REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None

LOG_LEVEL = os.environ.get("FASTSYM_LOG_LEVEL", "INFO").upper()

# Per-user symbol path file, relative to the home directory unless overridden.
CONFIG_FILE = os.environ.get("FASTSYM_CONFIG_FILE")
CONFIG_RELATIVE_PATH = os.path.join(".dump_syms", "config")

# Symbol path used by the HTTP proxy when set.
SYMBOL_PATH = os.environ.get("FASTSYM_SYMBOL_PATH")

DEFAULT_STORE = "https://msdl.microsoft.com/download/symbols"

NOT_FOUND_SENTINEL = b"Symbol Not Found"

CABINET_MAGIC = b"MSCF"
