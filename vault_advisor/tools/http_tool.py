# PURPOSE: Fetch JSON from an HTTP endpoint with retries on transient failures.
# CONTEXT: Used by vault_source to pull the DeFindex vault universe when
#          VAULTS_API_URL is configured.

from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vault_advisor.config import get_settings
from vault_advisor.errors import VaultSourceError


def _session(retries: int) -> requests.Session:
    """Session that retries GETs on connection errors and 429/5xx responses."""
    retry = Retry(
        total=retries,
        backoff_factor=0.3,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
    )
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    return s


def fetch_json(url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Any:
    """
    GET a URL and decode its JSON body.

    parameters:
    - url: str – full URL to request.
    - params: dict (optional) – query string parameters.
    - timeout: float (optional) – seconds; defaults to HTTP_TIMEOUT_S.

    returns:
    - Any – decoded JSON.

    raises:
    - VaultSourceError – on any request failure, HTTP error status or non-JSON body.
    """
    settings = get_settings()
    try:
        with _session(settings.http_retries) as s:
            r = s.get(url, params=params, timeout=timeout or settings.http_timeout_s)
            r.raise_for_status()
            return r.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise VaultSourceError(f"GET {url} failed: {e}") from e
