"""
Thin HTTP layer shared by the search, fetch and map modules.

All requests go through one `requests.Session` so the User-Agent header and
timeout are set in a single place. Status codes with a meaning on OWID's
grapher endpoints are turned into owidpy exceptions; everything else is left
to `raise_for_status()`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .config import HTTP_TIMEOUT, USER_AGENT
from .exceptions import ChartNotFoundError, LicenseError

_SESSION: Optional[requests.Session] = None


def _stage(msg: str) -> None:
    print(f"[owidpy] {msg}", flush=True)


def _requests_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        s = requests.Session()
        s.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json,text/csv,*/*"})
        _SESSION = s
    return _SESSION


def _license_message(resp: requests.Response) -> str:
    try:
        return resp.json().get("error", "This chart contains non-redistributable data")
    except ValueError:
        return "This chart contains non-redistributable data that cannot be downloaded"


def get(url: str, params: Optional[Dict[str, Any]] = None, *, what: Optional[str] = None) -> requests.Response:
    """
    Issue a GET request and return the response if it succeeded.

    Parameters
    ----------
    url : str
        Fully-qualified URL.
    params : dict, optional
        Query parameters.
    what : str, optional
        Short description used in progress messages and error text.

    Raises
    ------
    ChartNotFoundError
        On HTTP 404.
    LicenseError
        On HTTP 403 (non-redistributable data).
    requests.HTTPError
        On any other error status.
    """
    what = what or url
    _stage(f"Fetching {what} ...")
    resp = _requests_session().get(url, params=params, timeout=HTTP_TIMEOUT)

    if resp.status_code == 404:
        raise ChartNotFoundError(f"No such chart found: {what}")
    if resp.status_code == 403:
        raise LicenseError(_license_message(resp))

    resp.raise_for_status()
    return resp


def get_json(url: str, params: Optional[Dict[str, Any]] = None, *, what: Optional[str] = None) -> Dict[str, Any]:
    """GET `url` and decode the JSON body."""
    return get(url, params=params, what=what).json()
