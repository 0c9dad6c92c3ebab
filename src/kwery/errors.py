"""Exceptions raised by kwery."""


class KweryError(Exception):
    """Base class for kwery errors."""


class KeyDerivationError(KweryError, TypeError):
    """A cache signature could not be derived from call arguments."""


class UnknownOperationError(KweryError, AttributeError):
    """A selector asked for a query or mutation that is not configured."""

    def __init__(self, kind: str, name: str, available: list[str]) -> None:
        self.kind = kind
        self.name = name
        self.available = available
        known = ", ".join(available) if available else "none configured"
        super().__init__(f"Unknown {kind} {name!r} (available: {known})")


class InvocationError(KweryError):
    """A query or mutation failed; the original exception is the ``__cause__``."""

    def __init__(self, name: str, reason: BaseException) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"{name} failed: {reason!r}")
