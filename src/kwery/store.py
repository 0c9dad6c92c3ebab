"""Per-client cache of query kweries."""

from collections.abc import Iterator

from kwery.entry import QueryKwery
from kwery.signature import Signature


class CacheStore:
    """Maps query signatures to their kweries. No eviction or expiry."""

    def __init__(self) -> None:
        self._entries: dict[Signature, QueryKwery] = {}

    def get(self, signature: Signature) -> QueryKwery | None:
        """Get the kwery stored for a signature."""
        return self._entries.get(signature)

    def set(self, signature: Signature, entry: QueryKwery) -> None:
        """Store a kwery under a signature."""
        self._entries[signature] = entry

    def clear(self) -> None:
        """Drop every stored kwery."""
        self._entries.clear()

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries

    def __iter__(self) -> Iterator[Signature]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
