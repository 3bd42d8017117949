"""HTTP liveness checks for a started bench.

A check only tells whether something answered; status codes are logged
but any response counts as alive.
"""

from __future__ import annotations

import logging
from typing import Iterable

import requests

from config import HTTP_TIMEOUT
from modules.utils import log, status_pass, status_warn


def site_url(site: str, port: int, path: str = "") -> str:
    return f"http://{site}:{port}{path}"


def check_http(
    url: str, timeout: float = HTTP_TIMEOUT, session: requests.Session | None = None
) -> bool:
    http = session or requests.Session()
    try:
        res = http.get(url, timeout=timeout)
    except requests.RequestException as err:
        logging.debug("GET %s failed: %s", url, err)
        return False
    log(f"GET {url} -> {res.status_code}")
    return True


def verify_deployment(
    site: str,
    port: int,
    paths: Iterable[str],
    session: requests.Session | None = None,
) -> dict[str, bool]:
    results: dict[str, bool] = {}
    for path in paths:
        url = site_url(site, port, path)
        ok = check_http(url, session=session)
        results[url] = ok
        if ok:
            status_pass(f"{url} is responding")
        else:
            status_warn(f"{url} is not responding")
    return results
