"""Backend collaborators: tables, object storage and auth."""

from ecredit.store.base import (
    ACTIVITY_LOG,
    LOANS,
    PROFILES,
    AuthClient,
    AuthSession,
    Backend,
    ObjectStorage,
    TableClient,
)
from ecredit.store.factory import build_backend
from ecredit.store.memory import InMemoryAuthClient, InMemoryTableClient
from ecredit.store.storage import LocalObjectStorage

__all__ = [
    "ACTIVITY_LOG",
    "LOANS",
    "PROFILES",
    "AuthClient",
    "AuthSession",
    "Backend",
    "InMemoryAuthClient",
    "InMemoryTableClient",
    "LocalObjectStorage",
    "ObjectStorage",
    "TableClient",
    "build_backend",
]
