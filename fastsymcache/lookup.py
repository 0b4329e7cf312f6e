"""Symbol lookup: caches first, then every symbol server at once."""

import requests

from fastsymcache.archive import extract_symbol
from fastsymcache.cache import read_cached, search_in_cache
from fastsymcache.download import PREFER_PRIORITY, retrieve_data, select_result
from fastsymcache.jobs import get_jobs
from fastsymcache.logging import logger
from fastsymcache.sympath import HomeResolver, TextReader, default_home_dir, load_servers, read_text_file
from fastsymcache.validation import validate_artifact_key


def search_symbol_file(
    file_name: str,
    debug_id: str,
    symbol_server: str | None = None,
    *,
    prefer: str = PREFER_PRIORITY,
    session: requests.Session | None = None,
    home_dir: HomeResolver = default_home_dir,
    read_text: TextReader = read_text_file,
) -> tuple[bytes | None, str]:
    """Find the symbol file ``file_name`` built with ``debug_id``.

    ``symbol_server`` is a symbol path such as ``srv*~/cache*https://host/sym``;
    when omitted the per-user configuration file is used. The file name is
    returned alongside the content so that callers looking up several names
    can match results to requests. A content of None means not found.
    """
    if not file_name:
        return None, file_name

    validate_artifact_key(file_name, debug_id)

    servers = load_servers(symbol_server, home_dir, read_text)
    if servers is None:
        logger.warning(f"No symbol server configured, cannot look up {file_name}")
        return None, file_name

    path = search_in_cache(servers, debug_id, file_name)
    if path is not None:
        return read_cached(path), file_name

    # Each job holds the query url and the cache path (if any) for its response
    jobs = get_jobs(servers, debug_id, file_name)
    outcomes = retrieve_data(jobs, session)

    data = select_result(outcomes, prefer)
    if data is None:
        logger.info(f"Symbol not found on any server: {file_name}/{debug_id}")
        return None, file_name

    return extract_symbol(data, file_name), file_name


def search_symbol_files(
    file_names: list[str], debug_id: str, symbol_server: str | None = None, **kwargs
) -> list[tuple[bytes | None, str]]:
    """Look up several file names sharing a debug id, one after another."""
    return [search_symbol_file(name, debug_id, symbol_server, **kwargs) for name in file_names]
