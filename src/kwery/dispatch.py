"""Dispatchers - turn configured functions into kweries.

Selectors receive a ``Capabilities`` object exposing one handle per
configured name. A query handle is both readable and callable:

    client.query(lambda k: k.users)         # kwery for users()
    client.query(lambda k: k.user("42"))    # kwery for user("42")

Queries are looked up in the client's ``CacheStore`` by signature, so the
same call returns the same kwery. Mutations always produce a new kwery.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator, Iterator, Mapping
from typing import Any, ClassVar

from kwery.entry import Kwery, QueryKwery
from kwery.errors import UnknownOperationError
from kwery.signature import make_signature
from kwery.store import CacheStore
from kwery.types import Operation, Status

logger = logging.getLogger(__name__)


class OperationHandle:
    """A configured operation; ``get()`` or a call yields its kwery.

    Bare mutation handles returned by a selector run once, when the
    selector result is resolved.
    """

    __slots__ = ("_dispatcher", "_name")

    def __init__(self, dispatcher: Dispatcher, name: str) -> None:
        self._dispatcher = dispatcher
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get(self) -> Kwery:
        """Kwery for calling the operation without arguments."""
        return self._dispatcher.resolve(self._name, (), {})

    def __call__(self, *args: Any, **kwargs: Any) -> Kwery:
        return self._dispatcher.resolve(self._name, args, kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class QueryHandle(OperationHandle):
    """Handle for a query; bare reads share the cached zero-argument kwery."""

    __slots__ = ()

    def get(self) -> QueryKwery:
        return self._dispatcher.resolve(self._name, (), {})  # type: ignore[return-value]

    @property
    def status(self) -> Status:
        return self.get().status

    @property
    def data(self) -> Any:
        return self.get().data

    def __await__(self) -> Generator[Any, None, QueryKwery]:
        return self.get().wait().__await__()  # type: ignore[return-value]

    def refetch(self, *args: Any, **kwargs: Any) -> QueryKwery:
        return self.get().refetch(*args, **kwargs)

    def raise_for_status(self) -> Kwery:
        return self.get().raise_for_status()


class Capabilities:
    """Named handles passed to query and mutation selectors."""

    __slots__ = ("_kind", "_handles")

    def __init__(self, kind: str, handles: Mapping[str, OperationHandle]) -> None:
        self._kind = kind
        self._handles = dict(handles)

    def _lookup(self, name: str) -> OperationHandle:
        try:
            return self._handles[name]
        except KeyError:
            raise UnknownOperationError(
                self._kind, name, sorted(self._handles)
            ) from None

    def __getattr__(self, name: str) -> OperationHandle:
        # Dunder probes and unset slots must see a plain AttributeError
        if name in Capabilities.__slots__ or (
            name.startswith("__") and name.endswith("__")
        ):
            raise AttributeError(name)
        return self._lookup(name)

    def __getitem__(self, name: str) -> OperationHandle:
        return self._lookup(name)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __dir__(self) -> list[str]:
        return sorted(self._handles)

    def __repr__(self) -> str:
        return f"Capabilities({self._kind}: {', '.join(self._handles)})"


def _resolve_selection(selection: Any) -> Any:
    """Turn bare handles returned by a selector into their kweries."""
    if isinstance(selection, OperationHandle):
        return selection.get()
    if type(selection) in (tuple, list):
        return type(selection)(
            item.get() if isinstance(item, OperationHandle) else item
            for item in selection
        )
    return selection


class Dispatcher(ABC):
    """Shared plumbing for query and mutation dispatch."""

    kind: ClassVar[str]
    handle_type: ClassVar[type[OperationHandle]] = OperationHandle

    def __init__(self, operations: Mapping[str, Operation]) -> None:
        self._operations = operations
        self._capabilities = Capabilities(
            self.kind,
            {name: self.handle_type(self, name) for name in operations},
        )

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def select(self, selector: Callable[[Capabilities], Any]) -> Any:
        """Run a selector against the capabilities and return what it picks."""
        return _resolve_selection(selector(self._capabilities))

    @abstractmethod
    def resolve(
        self, name: str, args: tuple[Any, ...], kwargs: Mapping[str, Any]
    ) -> Kwery:
        """Return the kwery for calling ``name`` with these arguments."""

    def _operation(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise UnknownOperationError(
                self.kind, name, sorted(self._operations)
            ) from None


class QueryDispatcher(Dispatcher):
    """Resolves query calls through the cache store."""

    kind = "query"
    handle_type = QueryHandle

    def __init__(self, queries: Mapping[str, Operation], store: CacheStore) -> None:
        self._store = store
        super().__init__(queries)

    def resolve(
        self, name: str, args: tuple[Any, ...], kwargs: Mapping[str, Any]
    ) -> QueryKwery:
        fn = self._operation(name)
        signature = make_signature(name, args, kwargs)

        entry = self._store.get(signature)
        if entry is not None:
            logger.debug("Cache hit for %r", signature)
            return entry

        logger.debug("Cache miss for %r", signature)
        entry = QueryKwery(name, fn, args, kwargs, signature=signature)
        # Stored before running so re-entrant lookups see the pending kwery
        self._store.set(signature, entry)
        entry.run()
        return entry


class MutationDispatcher(Dispatcher):
    """Runs every mutation call as a fresh kwery."""

    kind = "mutation"

    def resolve(
        self, name: str, args: tuple[Any, ...], kwargs: Mapping[str, Any]
    ) -> Kwery:
        fn = self._operation(name)
        return Kwery(name, fn, args, kwargs).run()


__all__ = [
    "Capabilities",
    "Dispatcher",
    "MutationDispatcher",
    "OperationHandle",
    "QueryDispatcher",
    "QueryHandle",
]
