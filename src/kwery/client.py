"""Kwery client: one cache store plus query and mutation dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from kwery.dispatch import Capabilities, MutationDispatcher, QueryDispatcher
from kwery.store import CacheStore
from kwery.types import KweryConfig, Operation

logger = logging.getLogger(__name__)

ConfigLike = KweryConfig | Mapping[str, Any] | None


class Client:
    """An isolated query cache bound to one configuration.

    Usage:
        client = create_kwery(queries={"user": fetch_user})
        user = client.query(lambda k: k.user("42"))
        user.status   # "pending" until fetch_user("42") settles
    """

    def __init__(self, config: KweryConfig | None = None) -> None:
        self._config = config if config is not None else KweryConfig()
        self._store = CacheStore()
        self._queries = QueryDispatcher(self._config.queries, self._store)
        self._mutations = MutationDispatcher(self._config.mutations)

    @property
    def config(self) -> KweryConfig:
        return self._config

    @property
    def store(self) -> CacheStore:
        """The cache store backing this client's queries."""
        return self._store

    def query(self, selector: Callable[[Capabilities], Any]) -> Any:
        """Select a query kwery, calling the query on first use.

        The selector's return value is passed back as-is, except that a bare
        handle (``lambda k: k.users``) becomes its zero-argument kwery.
        """
        return self._queries.select(selector)

    def mutate(self, selector: Callable[[Capabilities], Any]) -> Any:
        """Select and run a mutation; every call yields a new kwery."""
        return self._mutations.select(selector)

    def clear(self) -> None:
        """Forget every cached query. Kweries already handed out stay valid."""
        logger.debug("Clearing %d cached queries", len(self._store))
        self._store.clear()

    def __repr__(self) -> str:
        return (
            f"Client(queries={list(self._config.queries)}, "
            f"mutations={list(self._config.mutations)}, cached={len(self._store)})"
        )


def resolve_config(
    config: ConfigLike = None,
    *,
    queries: Mapping[str, Operation] | None = None,
    mutations: Mapping[str, Operation] | None = None,
) -> KweryConfig:
    """Normalize the accepted configuration forms into a KweryConfig."""
    if config is not None and (queries is not None or mutations is not None):
        raise TypeError("Pass either a config or queries/mutations, not both")
    if isinstance(config, KweryConfig):
        return config
    if config is not None:
        if not isinstance(config, Mapping):
            raise TypeError(
                f"config must be a KweryConfig or mapping, got {type(config).__name__}"
            )
        return KweryConfig.from_mapping(config)
    return KweryConfig(queries=queries or {}, mutations=mutations or {})


def create_kwery(
    config: ConfigLike = None,
    /,
    *,
    queries: Mapping[str, Operation] | None = None,
    mutations: Mapping[str, Operation] | None = None,
) -> Client:
    """Create an isolated client.

    Args:
        config: A KweryConfig or a ``{"queries": ..., "mutations": ...}`` mapping
        queries: Query functions by name (instead of ``config``)
        mutations: Mutation functions by name (instead of ``config``)

    Returns:
        Client with its own empty cache
    """
    return Client(resolve_config(config, queries=queries, mutations=mutations))


__all__ = ["Client", "create_kwery", "resolve_config"]
