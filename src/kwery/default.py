"""Process-wide default client behind the ``query``/``mutate`` functions.

The default client is created empty on first use. ``configure()`` replaces
it with a client for the given queries and mutations; clients made with
``create_kwery()`` are independent of it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from kwery.client import Client, ConfigLike, resolve_config
from kwery.dispatch import Capabilities
from kwery.types import Operation

logger = logging.getLogger(__name__)

_default_client: Client | None = None
_lock = threading.Lock()


def get_default_client() -> Client:
    """Return the default client, creating an empty one on first use."""
    global _default_client
    with _lock:
        if _default_client is None:
            logger.debug("Creating default client")
            _default_client = Client()
        return _default_client


def configure(
    config: ConfigLike = None,
    /,
    *,
    queries: Mapping[str, Operation] | None = None,
    mutations: Mapping[str, Operation] | None = None,
) -> Client:
    """Replace the default client with one for this configuration.

    The new client starts with an empty cache.
    """
    global _default_client
    client = Client(resolve_config(config, queries=queries, mutations=mutations))
    with _lock:
        if _default_client is not None:
            logger.debug(
                "Replacing default client (%d cached queries dropped)",
                len(_default_client.store),
            )
        _default_client = client
    return client


def reset_default_client() -> None:
    """Drop the default client; the next use creates a fresh empty one."""
    global _default_client
    with _lock:
        _default_client = None


def query(selector: Callable[[Capabilities], Any]) -> Any:
    """``Client.query`` on the default client."""
    return get_default_client().query(selector)


def mutate(selector: Callable[[Capabilities], Any]) -> Any:
    """``Client.mutate`` on the default client."""
    return get_default_client().mutate(selector)


__all__ = [
    "configure",
    "get_default_client",
    "mutate",
    "query",
    "reset_default_client",
]
