from unittest.mock import MagicMock

import pytest


def make_response(body: bytes = b"", status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.iter_content.return_value = [body]
    return resp


@pytest.fixture
def fake_session():
    """Build a session whose GETs are answered from a url -> response/exception map.

    Unknown urls get a 404.
    """

    def factory(routes: dict) -> MagicMock:
        session = MagicMock()

        def get(url, **kwargs):
            result = routes.get(url)
            if result is None:
                return make_response(status_code=404)
            if isinstance(result, Exception):
                raise result
            if isinstance(result, bytes):
                return make_response(result)
            return result

        session.get.side_effect = get
        return session

    return factory
