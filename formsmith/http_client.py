"""Shared HTTP client for the form storage API."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session that never retries.

    A failed call surfaces to the caller immediately; re-triggering the
    action is left to the user.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        retry = Retry(total=0, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
        _session.headers.update({"Accept": "application/json"})
    return _session
