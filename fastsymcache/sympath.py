"""Symbol path parsing.

A symbol path is a list of ``srv*[cache*]url`` entries separated by
semicolons or newlines, e.g.::

    srv*~/symcache*https://symbols.mozilla.org;srv*https://msdl.microsoft.com/download/symbols

Entries that are not ``srv`` entries are ignored. The home directory and
the configuration file are reached through injectable callables so that
callers (and tests) decide where they come from.
"""

import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from fastsymcache.config import CONFIG_FILE, CONFIG_RELATIVE_PATH, DEFAULT_STORE
from fastsymcache.errors import ConfigError
from fastsymcache.logging import logger

HomeResolver = Callable[[], str | None]
TextReader = Callable[[str], str]

_SEPARATORS = re.compile(r"[;\n]")


@dataclass(frozen=True)
class ServerDescriptor:
    """A symbol server and the local cache directory paired with it."""

    server: str
    cache: str | None = None


def default_home_dir() -> str | None:
    """Return the current user's home directory, or None if it cannot be resolved."""
    try:
        return str(Path.home())
    except RuntimeError:
        return None


def read_text_file(path: str) -> str:
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _resolve_home(home_dir: HomeResolver) -> str | None:
    try:
        return home_dir()
    except RuntimeError:
        return None


def expand_home(path: str, home_dir: HomeResolver = default_home_dir) -> str:
    """Replace a leading ``~`` with the home directory, if one can be found."""
    if not path.startswith("~"):
        return path

    home = _resolve_home(home_dir)
    if not home:
        return path
    return f"{home}{path[1:]}"


def parse_srv(segment: str, home_dir: HomeResolver = default_home_dir) -> ServerDescriptor | None:
    """Parse ``srv``, ``srv*server`` or ``srv*cache*server``."""
    parts = [part.strip() for part in segment.split("*")]
    if parts[0].lower() != "srv":
        return None

    if len(parts) == 1:
        return ServerDescriptor(server=DEFAULT_STORE)
    if len(parts) == 2:
        return ServerDescriptor(server=parts[1])
    if len(parts) == 3:
        return ServerDescriptor(server=parts[2], cache=expand_home(parts[1], home_dir))
    return None


def parse_sympath(text: str, home_dir: HomeResolver = default_home_dir) -> list[ServerDescriptor]:
    """Parse every usable entry of a symbol path, keeping their order."""
    servers = []
    for segment in _SEPARATORS.split(text):
        segment = segment.strip()
        if not segment:
            continue

        server = parse_srv(segment, home_dir)
        if server is None:
            logger.debug(f"Ignoring symbol path entry: {segment}")
            continue
        servers.append(server)

    return servers


def read_config_from_str(text: str, home_dir: HomeResolver = default_home_dir) -> list[ServerDescriptor] | None:
    """Parse a symbol path, returning None when it configures no server at all."""
    servers = parse_sympath(text, home_dir)
    return servers or None


def config_file_path(home_dir: HomeResolver = default_home_dir) -> str | None:
    if CONFIG_FILE:
        return expand_home(CONFIG_FILE, home_dir)

    home = _resolve_home(home_dir)
    if not home:
        return None
    return os.path.join(home, CONFIG_RELATIVE_PATH)


def read_config(
    home_dir: HomeResolver = default_home_dir,
    read_text: TextReader = read_text_file,
) -> list[ServerDescriptor] | None:
    """Load the symbol path from the per-user configuration file."""
    path = config_file_path(home_dir)
    if path is None or not os.path.exists(path):
        logger.debug(f"No symbol path configuration file at {path}")
        return None

    try:
        content = read_text(path)
    except UnicodeDecodeError as e:
        raise ConfigError(f"Not utf-8 data in the file {path}", path=path) from e
    except OSError as e:
        raise ConfigError(f"Unable to read the file {path}: {e}", path=path) from e

    return read_config_from_str(content, home_dir)


def load_servers(
    symbol_server: str | None = None,
    home_dir: HomeResolver = default_home_dir,
    read_text: TextReader = read_text_file,
) -> list[ServerDescriptor] | None:
    """Use the explicit symbol path if given, the configuration file otherwise."""
    if symbol_server is None:
        return read_config(home_dir, read_text)
    return read_config_from_str(symbol_server, home_dir)
