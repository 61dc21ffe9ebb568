"""Backend collaborator interfaces: tables, object storage and auth."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

PROFILES = "profiles"
LOANS = "loans"
ACTIVITY_LOG = "activity_log"

TABLES = (PROFILES, LOANS, ACTIVITY_LOG)

Row = dict[str, Any]
Filters = dict[str, Any]


class TableClient(ABC):
    """Row access to the backend's relational tables.

    Filters are equality matches on column values; a list, tuple or set
    value matches any of its members. All methods raise
    ``BackendUnavailableError`` when the backend cannot serve the request.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        """Return matching rows."""

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return it as stored (with generated id)."""

    @abstractmethod
    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        """Update matching rows and return them; an empty list means nothing matched."""

    @abstractmethod
    def count(self, table: str, filters: Filters | None = None) -> int:
        """Count matching rows."""

    def get(self, table: str, row_id: str) -> Row | None:
        """Return the row with the given id, if any."""
        rows = self.select(table, filters={"id": row_id}, limit=1)
        return rows[0] if rows else None


class ObjectStorage(ABC):
    """Blob storage organized in named buckets."""

    @abstractmethod
    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Store a blob and return its key."""

    @abstractmethod
    def public_url(self, bucket: str, key: str) -> str:
        """Public URL of a previously uploaded key."""


@dataclass(frozen=True)
class AuthSession:
    """Authenticated user session."""

    user_id: str
    email: str
    issued_at: datetime


SessionListener = Callable[[AuthSession | None], None]


class AuthClient(ABC):
    """Session primitives of the hosted auth service."""

    @abstractmethod
    def current_session(self) -> AuthSession | None:
        """The active session, or None when signed out."""

    @abstractmethod
    def sign_in(self, user_id: str, email: str) -> AuthSession:
        """Start a session for the user."""

    @abstractmethod
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session-change listener; returns an unsubscribe callable."""

    @abstractmethod
    def sign_out(self) -> None:
        """End the active session."""


@dataclass
class Backend:
    """The three backend collaborators bundled together."""

    tables: TableClient
    storage: ObjectStorage
    auth: AuthClient
