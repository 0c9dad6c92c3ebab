"""Kweries - status-tracked results of query and mutation calls.

A kwery is created ``pending`` and is updated in place when its call
settles, so any reference handed out earlier observes the new ``status``
and ``data``:

- synchronous results settle before the kwery is returned
- awaitable results are scheduled on the running event loop and settle
  when the awaitable completes
- exceptions are captured as ``data`` with ``status == "error"``
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Generator, Mapping
from typing import Any

from kwery.errors import InvocationError
from kwery.signature import Signature
from kwery.types import STATUSES, Status

logger = logging.getLogger(__name__)


class Kwery:
    """Mutable, status-tracked result of a query or mutation call."""

    STATUSES = STATUSES

    __slots__ = ("name", "status", "data", "_fn", "_args", "_kwargs", "_in_flight")

    def __init__(
        self,
        name: str,
        fn: Callable[..., Any],
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.status: Status = Status.pending
        self.data: Any = None
        self._fn = fn
        self._args = args
        self._kwargs = dict(kwargs or {})
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def is_pending(self) -> bool:
        return self.status is Status.pending

    @property
    def is_success(self) -> bool:
        return self.status is Status.success

    @property
    def is_error(self) -> bool:
        return self.status is Status.error

    @property
    def in_flight(self) -> int:
        """Number of issued calls that have not settled yet."""
        return len(self._in_flight)

    def run(self) -> Kwery:
        """Issue the call with the arguments this kwery was created with."""
        self._invoke(self._args, self._kwargs)
        return self

    async def wait(self) -> Kwery:
        """Wait until every in-flight call has settled, then return self."""
        while self._in_flight:
            await asyncio.wait(set(self._in_flight))
        return self

    def __await__(self) -> Generator[Any, None, Kwery]:
        return self.wait().__await__()

    def raise_for_status(self) -> Kwery:
        """Raise InvocationError if the last settled call failed."""
        if self.status is Status.error:
            reason = self.data
            if not isinstance(reason, BaseException):
                reason = RuntimeError(reason)
            raise InvocationError(self.name, reason) from reason
        return self

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.name!r}, "
            f"status={self.status.value}, data={self.data!r})"
        )

    # -------------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------------

    def _invoke(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> None:
        self.status = Status.pending
        logger.debug("Invoking %s args=%r kwargs=%r", self.name, args, kwargs)
        try:
            result = self._fn(*args, **kwargs)
        except Exception as e:
            self._reject(e)
            return

        if not inspect.isawaitable(result):
            self._resolve(result)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            if inspect.iscoroutine(result):
                result.close()
            logger.warning(
                "%s returned an awaitable but no event loop is running", self.name
            )
            self._reject(e)
            return

        task = loop.create_task(self._settle(result))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _settle(self, awaitable: Awaitable[Any]) -> None:
        # No generation check: whichever call settles last decides the state
        try:
            value = await awaitable
        except Exception as e:
            self._reject(e)
        else:
            self._resolve(value)

    def _resolve(self, value: Any) -> None:
        self.status = Status.success
        self.data = value
        logger.debug("%s succeeded", self.name)

    def _reject(self, reason: Exception) -> None:
        self.status = Status.error
        self.data = reason
        logger.debug("%s failed: %r", self.name, reason)


class QueryKwery(Kwery):
    """A cached query result that can be refetched in place."""

    __slots__ = ("signature",)

    def __init__(
        self,
        name: str,
        fn: Callable[..., Any],
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        signature: Signature | None = None,
    ) -> None:
        super().__init__(name, fn, args, kwargs)
        self.signature = signature

    def refetch(self, *args: Any, **kwargs: Any) -> QueryKwery:
        """Call the query again and update this kwery in place.

        Arguments, when given, replace the original ones for this call only;
        the cache signature is unchanged. ``data`` keeps its previous value
        until the new call settles.
        """
        logger.debug("Refetching %s", self.name)
        if args or kwargs:
            self._invoke(args, kwargs)
        else:
            self._invoke(self._args, self._kwargs)
        return self


__all__ = ["Kwery", "QueryKwery"]
