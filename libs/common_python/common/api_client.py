"""Thin HTTP client helpers for talking to the platform API.

Used by scripts and internal tooling that act on behalf of a logged-in user.
"""

import requests

DEFAULT_TIMEOUT = 10


class ProfileFetchError(Exception):
    """Raised when the current user's profile cannot be retrieved."""


def fetch_current_user_profile(base_url: str, token: str, session=None, timeout=DEFAULT_TIMEOUT) -> dict:
    """Fetch the profile of the user identified by `token`.

    Args:
        base_url: API root, e.g. "http://localhost:8000".
        token: Bearer token returned by `/api/auth/login`.
        session: Optional `requests.Session` to reuse connections.
        timeout: Request timeout in seconds.

    Returns:
        dict: The decoded response body, `{"user": {...}}`.

    Raises:
        ProfileFetchError: On transport failure or any non-2xx response.
    """
    http = session or requests.Session()
    url = f"{base_url.rstrip('/')}/api/profile"
    try:
        resp = http.get(url, headers={"Authorization": f"Bearer {token}"}, timeout=timeout)
    except requests.RequestException as exc:
        raise ProfileFetchError("Unable to fetch profile") from exc

    if not resp.ok:
        raise ProfileFetchError(f"Unable to fetch profile (HTTP {resp.status_code})")
    return resp.json()
