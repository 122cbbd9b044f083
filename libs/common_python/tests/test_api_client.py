"""Tests for `common.api_client` with a stubbed `requests.Session`."""

import pytest
import requests

from common.api_client import ProfileFetchError, fetch_current_user_profile


class StubResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload

    def json(self):
        return self._payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers, timeout))
        if self.error:
            raise self.error
        return self.response


def test_fetch_profile_sends_bearer_token() -> None:
    session = StubSession(StubResponse(200, {"user": {"id": "u1", "pseudo": "alice"}}))

    profile = fetch_current_user_profile("http://api.local/", "tok", session=session)

    assert profile == {"user": {"id": "u1", "pseudo": "alice"}}
    url, headers, timeout = session.requests[0]
    assert url == "http://api.local/api/profile"
    assert headers == {"Authorization": "Bearer tok"}
    assert timeout == 10


def test_fetch_profile_non_ok_status() -> None:
    session = StubSession(StubResponse(401, {"detail": "Unauthorized"}))

    with pytest.raises(ProfileFetchError, match="HTTP 401"):
        fetch_current_user_profile("http://api.local", "expired", session=session)


def test_fetch_profile_transport_error() -> None:
    session = StubSession(error=requests.ConnectionError("refused"))

    with pytest.raises(ProfileFetchError) as excinfo:
        fetch_current_user_profile("http://api.local", "tok", session=session)

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
