"""Core types for kwery."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

# An operation returns a value directly or an awaitable resolving to one
Operation = Callable[..., Any]


class Status(str, Enum):
    """Settlement state of a kwery."""

    pending = "pending"
    success = "success"
    error = "error"

    def __str__(self) -> str:
        return self.value


STATUSES = Status


def _freeze_operations(kind: str, operations: Mapping[str, Any]) -> Mapping[str, Any]:
    """Validate and copy an operation mapping into a read-only view."""
    if not isinstance(operations, Mapping):
        raise TypeError(f"{kind} must be a mapping, got {type(operations).__name__}")
    frozen: dict[str, Any] = {}
    for name, fn in operations.items():
        if not isinstance(name, str):
            raise TypeError(f"{kind} names must be str, got {name!r}")
        if not name:
            raise ValueError(f"{kind} names must not be empty")
        if not callable(fn):
            raise TypeError(f"{kind} {name!r} is not callable: {fn!r}")
        frozen[name] = fn
    return MappingProxyType(frozen)


@dataclass(frozen=True, slots=True)
class KweryConfig:
    """Queries and mutations a client dispatches to."""

    queries: Mapping[str, Operation] = field(default_factory=dict)
    mutations: Mapping[str, Operation] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ to store the validated copies
        object.__setattr__(self, "queries", _freeze_operations("query", self.queries))
        object.__setattr__(
            self, "mutations", _freeze_operations("mutation", self.mutations)
        )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "KweryConfig":
        """Build a config from a ``{"queries": ..., "mutations": ...}`` mapping."""
        unknown = set(config) - {"queries", "mutations"}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(
            queries=config.get("queries") or {},
            mutations=config.get("mutations") or {},
        )
