"""kwery - deduplicated, status-tracked queries and mutations."""

# Client API
from kwery.client import Client, create_kwery

# Default client
from kwery.default import (
    configure,
    get_default_client,
    mutate,
    query,
    reset_default_client,
)
from kwery.dispatch import Capabilities, OperationHandle, QueryHandle
from kwery.entry import Kwery, QueryKwery

# Errors
from kwery.errors import (
    InvocationError,
    KeyDerivationError,
    KweryError,
    UnknownOperationError,
)
from kwery.signature import Signature, make_signature
from kwery.store import CacheStore

# Core types
from kwery.types import STATUSES, KweryConfig, Operation, Status

__version__ = "0.1.0"

__all__ = [
    "STATUSES",
    "CacheStore",
    "Capabilities",
    "Client",
    "InvocationError",
    "KeyDerivationError",
    "Kwery",
    "KweryConfig",
    "KweryError",
    "Operation",
    "OperationHandle",
    "QueryHandle",
    "QueryKwery",
    "Signature",
    "Status",
    "UnknownOperationError",
    "configure",
    "create_kwery",
    "get_default_client",
    "make_signature",
    "mutate",
    "query",
    "reset_default_client",
]
