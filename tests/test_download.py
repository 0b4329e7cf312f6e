"""Tests for concurrent downloads, HTTP session setup and result selection."""

import threading
from unittest.mock import MagicMock, patch

import pytest
import requests
from conftest import make_response

from fastsymcache.download import (
    JobOutcome,
    create_requests_session,
    fetch_job,
    retrieve_data,
    select_result,
)
from fastsymcache.errors import TransportError
from fastsymcache.jobs import FetchJob


class TestRequestsSession:
    def test_create_requests_session(self):
        """Test that requests session mounts adapters without retries."""
        session = create_requests_session(8)
        assert "http://" in session.adapters
        assert "https://" in session.adapters
        assert session.adapters["https://"].max_retries.total == 0


class TestFetchJob:
    def test_usable_body_is_cached(self, tmp_path, fake_session):
        path = tmp_path / "ID" / "a.pdb"
        job = FetchJob(url="https://a/a.pdb/ID/a.pdb", cache=str(path))
        session = fake_session({job.url: b"payload"})

        outcome = fetch_job(session, job, 0)

        assert outcome.body == b"payload"
        assert outcome.error is None
        assert path.read_bytes() == b"payload"

    def test_sentinel_body(self, tmp_path, fake_session):
        path = tmp_path / "ID" / "a.pdb"
        job = FetchJob(url="https://a/a.pdb/ID/a.pdb", cache=str(path))
        session = fake_session({job.url: b"Symbol Not Found"})

        outcome = fetch_job(session, job, 0)

        assert outcome.body is None
        assert outcome.error is None
        assert not path.exists()

    def test_http_error_status(self, tmp_path, fake_session):
        path = tmp_path / "ID" / "a.pdb"
        job = FetchJob(url="https://a/a.pdb/ID/a.pdb", cache=str(path))
        session = fake_session({job.url: make_response(b"<html>gone</html>", status_code=404)})

        outcome = fetch_job(session, job, 0)

        assert outcome.body is None
        assert not path.exists()

    def test_network_error_is_captured(self, fake_session):
        job = FetchJob(url="https://a/a.pdb/ID/a.pdb")
        error = requests.ConnectionError("Network error")

        outcome = fetch_job(fake_session({job.url: error}), job, 3)

        assert outcome.index == 3
        assert outcome.body is None
        assert outcome.error is error

    def test_response_is_closed(self):
        job = FetchJob(url="https://a/a.pdb/ID/a.pdb")
        resp = make_response(b"payload")
        session = MagicMock()
        session.get.return_value = resp

        fetch_job(session, job, 0)

        resp.close.assert_called_once()
        session.get.assert_called_once_with(job.url, stream=True, timeout=None)


class TestRetrieveData:
    def test_empty_job_list(self):
        assert retrieve_data([]) == []

    def test_all_jobs_in_flight_together(self):
        """Every job must be started before any of them is allowed to finish."""
        jobs = [FetchJob(url=f"https://s{i}/a.pdb/ID/a.pdb") for i in range(6)]
        barrier = threading.Barrier(len(jobs), timeout=5)

        def get(url, **kwargs):
            barrier.wait()
            return make_response(url.encode())

        session = MagicMock()
        session.get.side_effect = get

        outcomes = retrieve_data(jobs, session)

        assert sorted(outcome.index for outcome in outcomes) == list(range(6))
        assert all(outcome.body for outcome in outcomes)

    def test_one_failure_is_isolated(self, fake_session):
        jobs = [FetchJob(url="https://a/a.pdb/ID/a.pdb"), FetchJob(url="https://a/a.pdb/ID/a.pd_")]
        session = fake_session({jobs[0].url: b"payload", jobs[1].url: requests.ConnectionError("refused")})

        outcomes = retrieve_data(jobs, session)

        by_index = {outcome.index: outcome for outcome in outcomes}
        assert by_index[0].body == b"payload"
        assert isinstance(by_index[1].error, requests.ConnectionError)

    def test_all_failures_raise(self, fake_session):
        jobs = [FetchJob(url="https://a/x/ID/x"), FetchJob(url="https://b/x/ID/x")]
        session = fake_session({job.url: requests.ConnectionError(job.url) for job in jobs})

        with pytest.raises(TransportError) as excinfo:
            retrieve_data(jobs, session)

        assert len(excinfo.value.errors) == 2
        assert excinfo.value.details["urls"] == [jobs[0].url, jobs[1].url]

    def test_failures_with_a_miss_are_not_found(self, fake_session):
        jobs = [FetchJob(url="https://a/x/ID/x"), FetchJob(url="https://b/x/ID/x")]
        session = fake_session({jobs[0].url: requests.Timeout("slow")})

        outcomes = retrieve_data(jobs, session)

        assert select_result(outcomes) is None

    @patch("fastsymcache.download.create_requests_session")
    def test_owned_session_is_closed(self, mock_create, fake_session):
        job = FetchJob(url="https://a/x/ID/x")
        session = fake_session({job.url: b"payload"})
        mock_create.return_value = session

        retrieve_data([job])

        mock_create.assert_called_once_with(1)
        session.close.assert_called_once()

    def test_given_session_is_not_closed(self, fake_session):
        job = FetchJob(url="https://a/x/ID/x")
        session = fake_session({job.url: b"payload"})

        retrieve_data([job], session)

        session.close.assert_not_called()


class TestSelectResult:
    def outcomes(self):
        job = FetchJob(url="https://a/x/ID/x")
        # Completion order: index 2, then 0, then 1 (a miss), then 3
        return [
            JobOutcome(index=2, job=job, body=b"third"),
            JobOutcome(index=0, job=job, body=b"first"),
            JobOutcome(index=1, job=job),
            JobOutcome(index=3, job=job, body=b"fourth"),
        ]

    def test_priority(self):
        assert select_result(self.outcomes()) == b"first"

    def test_completion(self):
        assert select_result(self.outcomes(), prefer="completion") == b"fourth"

    def test_nothing_usable(self):
        job = FetchJob(url="https://a/x/ID/x")
        assert select_result([JobOutcome(index=0, job=job)]) is None
        assert select_result([]) is None

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            select_result(self.outcomes(), prefer="fastest")
