"""Pooled ``httpx`` clients for catalogue requests.

A client is created on first use for each ``(base_url, purpose, timeout)``
and then shared, so listing models repeatedly reuses one connection pool.
Every pooled client is closed at interpreter exit; tests call
``close_all_clients`` directly.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import suppress
from typing import Dict, Optional, Tuple

import httpx

from ...config.defaults import HTTP_TIMEOUT_SECONDS

_PoolKey = Tuple[Optional[str], str, float]

_pool: Dict[_PoolKey, httpx.Client] = {}
_pool_lock = threading.Lock()


def get_httpx_client(base_url: Optional[str], purpose: str, timeout: float = HTTP_TIMEOUT_SECONDS) -> httpx.Client:
    """Return the shared client for ``base_url``/``purpose``/``timeout``."""
    key: _PoolKey = (base_url, purpose, float(timeout))
    with _pool_lock:
        client = _pool.get(key)
        if client is None or client.is_closed:
            options = {"timeout": timeout}
            if base_url:
                options["base_url"] = base_url
            client = httpx.Client(**options)
            _pool[key] = client
        return client


def close_all_clients() -> None:
    """Close every pooled client and empty the pool."""
    with _pool_lock:
        clients = list(_pool.values())
        _pool.clear()
    for client in clients:
        with suppress(Exception):  # nosec B110 - shutdown path
            client.close()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
