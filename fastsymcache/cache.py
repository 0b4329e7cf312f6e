"""On-disk symbol cache.

Entries live at ``<cache dir>/<debug id>/<file name>`` and are stored
exactly as they were received from the symbol server. The cache only
grows: nothing here ever removes an entry.
"""

import contextlib
import os
import tempfile
import threading
import weakref
from collections.abc import Iterable

from fastsymcache.config import NOT_FOUND_SENTINEL
from fastsymcache.errors import CacheReadError
from fastsymcache.logging import logger
from fastsymcache.sympath import ServerDescriptor
from fastsymcache.validation import check_path_safe, sanitize_path_component

# Entries disappear once no writer holds the lock any more.
_write_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_locks_lock = threading.Lock()


def get_file_lock(file_path: str) -> threading.Lock:
    """Get or create a lock for a specific file path."""
    with _locks_lock:
        lock = _write_locks.get(file_path)
        if lock is None:
            lock = threading.Lock()
            _write_locks[file_path] = lock
        return lock


def cache_path(cache_dir: str, debug_id: str, file_name: str) -> str:
    return os.path.join(cache_dir, check_path_safe(debug_id), sanitize_path_component(file_name))


def search_in_cache(servers: Iterable[ServerDescriptor], debug_id: str, file_name: str) -> str | None:
    """Return the first cached copy of the file, in server order."""
    for server in servers:
        if server.cache is None:
            continue

        path = cache_path(server.cache, debug_id, file_name)
        if os.path.isfile(path):
            logger.debug(f"Cache hit: {path}")
            return path

    return None


def read_cached(path: str) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as e:
        raise CacheReadError(f"Unable to read cached symbol {path}: {e}", path=path) from e


def is_usable(data: bytes) -> bool:
    """Whether a response body holds an artifact rather than a miss."""
    return bool(data) and not data.startswith(NOT_FOUND_SENTINEL)


def copy_in_cache(path: str | None, data: bytes) -> bool:
    """Store a response body in the cache.

    Returns False when the body is not a usable artifact, in which case
    nothing is written. A body for a job without a cache is usable as is.
    Write failures are logged and do not make the body unusable.
    """
    if not is_usable(data):
        return False

    if path is None:
        return True

    with get_file_lock(path):
        try:
            _write_atomically(path, data)
        except OSError as e:
            logger.warning(f"Unable to write cache entry {path}, continuing without it: {e}")
        else:
            logger.info(f"Cached {len(data)} bytes in {path}")

    return True


def _write_atomically(path: str, data: bytes) -> None:
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, mode=0o755, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=f"tmp_{os.path.basename(path)}.", dir=parent or None)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except OSError:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise
