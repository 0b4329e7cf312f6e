"""Construction of the remote queries for one lookup."""

from dataclasses import dataclass
from urllib.parse import quote, urlparse

from fastsymcache.cache import cache_path
from fastsymcache.errors import InvalidJobUrlError
from fastsymcache.sympath import ServerDescriptor


@dataclass(frozen=True)
class FetchJob:
    """A query URL and the cache file its response should be stored in."""

    url: str
    cache: str | None = None

    def __post_init__(self):
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidJobUrlError(f"Invalid url: {self.url}", url=self.url)


def compressed_name(file_name: str) -> str:
    """``xul.pdb`` is served compressed as ``xul.pd_``."""
    return f"{file_name[:-1]}_"


def get_jobs(servers: list[ServerDescriptor], debug_id: str, file_name: str) -> list[FetchJob]:
    """Build the queries for every server, in server order.

    The query urls look like https://symbols.mozilla.org/xul.pdb/DEBUG_ID/xul.pd_
    """
    jobs = []
    for server in servers:
        path = cache_path(server.cache, debug_id, file_name) if server.cache is not None else None
        base = f"{server.server.rstrip('/')}/{quote(file_name)}/{quote(debug_id)}"

        jobs.append(FetchJob(url=f"{base}/{quote(file_name)}", cache=path))
        if file_name.endswith(".pdb"):
            jobs.append(FetchJob(url=f"{base}/{quote(compressed_name(file_name))}", cache=path))

    return jobs
