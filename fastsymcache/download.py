"""Concurrent symbol download and result selection.

Single Responsibility: This module queries every symbol server job at
once, stores usable responses in their cache and picks the response a
lookup returns.

Each job runs in its own worker thread and reports a JobOutcome; the
calling thread is the only one collecting outcomes. A transport failure
only affects the job it happened in.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter

from fastsymcache.cache import copy_in_cache
from fastsymcache.config import CHUNK_SIZE, REQUEST_TIMEOUT
from fastsymcache.errors import TransportError
from fastsymcache.jobs import FetchJob
from fastsymcache.logging import logger

PREFER_PRIORITY = "priority"
PREFER_COMPLETION = "completion"
SELECTION_POLICIES = (PREFER_PRIORITY, PREFER_COMPLETION)


@dataclass
class JobOutcome:
    """What one fetch job produced: a usable body, nothing, or an error."""

    index: int
    job: FetchJob
    body: bytes | None = None
    error: Exception | None = None


def create_requests_session(pool_size: int = 10) -> requests.Session:
    """Create a requests session able to keep ``pool_size`` requests in flight per host."""
    session = requests.Session()

    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def read_body(resp: requests.Response) -> bytes:
    return b"".join(chunk for chunk in resp.iter_content(chunk_size=CHUNK_SIZE) if chunk)


def fetch_job(session: requests.Session, job: FetchJob, index: int) -> JobOutcome:
    """Query one symbol server URL and cache the response if it is usable."""
    outcome = JobOutcome(index=index, job=job)

    logger.debug(f"Trying to download from: {job.url}")
    try:
        resp = session.get(job.url, stream=True, timeout=REQUEST_TIMEOUT)
        try:
            if resp.status_code != 200:
                logger.debug(f"Could not find symbol: {job.url} {resp.status_code}")
                return outcome
            body = read_body(resp)
        finally:
            resp.close()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Network error while downloading from {job.url}: {e}")
        outcome.error = e
        return outcome

    if copy_in_cache(job.cache, body):
        logger.info(f"Successfully downloaded... {job.url} ({len(body)} bytes)")
        outcome.body = body
    else:
        logger.debug(f"Symbol server has no such symbol: {job.url}")

    return outcome


def retrieve_data(jobs: list[FetchJob], session: requests.Session | None = None) -> list[JobOutcome]:
    """Run every job concurrently and return their outcomes in completion order.

    Raises TransportError when not a single job got an HTTP response.
    """
    if not jobs:
        return []

    owns_session = session is None
    if owns_session:
        session = create_requests_session(len(jobs))

    outcomes = []
    try:
        with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="fastsym-fetch") as pool:
            futures = [pool.submit(fetch_job, session, job, index) for index, job in enumerate(jobs)]
            for future in as_completed(futures):
                outcomes.append(future.result())
    finally:
        if owns_session:
            session.close()

    failed = sorted((outcome for outcome in outcomes if outcome.error is not None), key=lambda o: o.index)
    if len(failed) == len(outcomes):
        raise TransportError(
            f"All {len(failed)} symbol server queries failed",
            errors=[outcome.error for outcome in failed],
            urls=[outcome.job.url for outcome in failed],
        )

    return outcomes


def select_result(outcomes: list[JobOutcome], prefer: str = PREFER_PRIORITY) -> bytes | None:
    """Pick the body a lookup returns.

    ``priority`` takes the first usable job in server order; ``completion``
    takes the last usable job to finish.
    """
    if prefer not in SELECTION_POLICIES:
        raise ValueError(f"Unknown selection policy: {prefer}")

    successes = [outcome for outcome in outcomes if outcome.body is not None]
    if not successes:
        return None

    if prefer == PREFER_COMPLETION:
        chosen = successes[-1]
    else:
        chosen = min(successes, key=lambda outcome: outcome.index)

    logger.debug(f"Selected response from {chosen.job.url} ({len(successes)} usable)")
    return chosen.body
