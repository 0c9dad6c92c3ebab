"""Cache signatures for query calls.

A signature is equal for equal ``(name, args, kwargs)`` calls and distinct
otherwise. Plain data compares structurally; any other object compares the
way its type defines equality (identity by default).
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from kwery.errors import KeyDerivationError

_SCALARS = (type(None), bool, int, float, complex, str, bytes)


@dataclass(frozen=True, slots=True)
class Signature:
    """Hashable identity of a query call."""

    name: str
    args: tuple[Any, ...]
    kwargs: tuple[tuple[str, Any], ...] = ()

    def __repr__(self) -> str:
        return f"Signature({self.name}, args={self.args!r}, kwargs={self.kwargs!r})"


def _canonical_nan(value: Any) -> Any:
    """Replace NaN, which never equals itself, with a fixed marker."""
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    if isinstance(value, complex) and (math.isnan(value.real) or math.isnan(value.imag)):
        return (_canonical_nan(value.real), _canonical_nan(value.imag))
    return value


def _freeze(value: Any, seen: frozenset[int]) -> Any:
    """Convert a call argument into a hashable, comparable form."""
    if isinstance(value, _SCALARS):
        # Tag with the type so 1, 1.0 and True stay distinct
        return (type(value).__name__, _canonical_nan(value))

    if isinstance(value, (list, tuple, dict, set, frozenset)):
        if id(value) in seen:
            raise KeyDerivationError(
                f"Cannot derive a cache key from a cyclic {type(value).__name__}"
            )
        seen = seen | {id(value)}

        if isinstance(value, dict):
            # Keys are unique, so a set of pairs ignores insertion order exactly
            return (
                "dict",
                frozenset((_freeze(k, seen), _freeze(v, seen)) for k, v in value.items()),
            )
        if isinstance(value, (set, frozenset)):
            return ("set", frozenset(_freeze(item, seen) for item in value))
        # The class itself, so same-named namedtuples from different modules differ
        return (type(value), tuple(_freeze(item, seen) for item in value))

    if isinstance(value, Hashable):
        try:
            hash(value)
        except TypeError as e:
            raise KeyDerivationError(
                f"Cannot derive a cache key from {type(value).__name__}: {e}"
            ) from e
        return value

    raise KeyDerivationError(
        f"Cannot derive a cache key from unhashable {type(value).__name__}"
    )


def make_signature(
    name: str,
    args: tuple[Any, ...] = (),
    kwargs: Mapping[str, Any] | None = None,
) -> Signature:
    """Derive the cache signature for calling ``name`` with ``args``/``kwargs``.

    Raises:
        KeyDerivationError: if an argument is cyclic or cannot be compared.
    """
    frozen_args = tuple(_freeze(arg, frozenset()) for arg in args)
    frozen_kwargs = tuple(
        sorted((key, _freeze(value, frozenset())) for key, value in (kwargs or {}).items())
    )
    return Signature(name=name, args=frozen_args, kwargs=frozen_kwargs)


__all__ = ["Signature", "make_signature"]
