"""HTTP session factory for map matching calls."""

from __future__ import annotations

import requests
from requests import Session
from requests.adapters import HTTPAdapter

from ..config import HTTP_POOL_CONNECTIONS, HTTP_POOL_MAXSIZE

__all__ = ["create_default_session"]


def create_default_session() -> Session:
    """Return a pooled session that never retries on its own.

    Failures are surfaced to the caller once; retry policy lives above the
    pipeline.
    """
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=0,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Accept-Encoding": "gzip, deflate",
            "Accept": "application/json",
        }
    )
    return session
