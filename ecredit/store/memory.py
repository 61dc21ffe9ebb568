"""In-memory backend for tests, demos and local development."""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from ecredit.exceptions import BackendUnavailableError
from ecredit.serialization import utcnow
from ecredit.store.base import (
    ACTIVITY_LOG,
    TABLES,
    AuthClient,
    AuthSession,
    Filters,
    Row,
    SessionListener,
    TableClient,
)

logger = logging.getLogger(__name__)


def _matches(row: Row, filters: Filters | None) -> bool:
    if not filters:
        return True
    for column, expected in filters.items():
        value = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


def _sort_key(column: str) -> Callable[[Row], tuple[bool, Any]]:
    # Rows missing the column sort after the rest in ascending order.
    def key(row: Row) -> tuple[bool, Any]:
        value = row.get(column)
        return (value is None, value if value is not None else 0)

    return key


@dataclass
class InMemoryTableClient(TableClient):
    """Dictionary-backed tables keyed by row id.

    ``unavailable`` holds table names that should fail every request,
    for exercising degraded read paths.
    """

    tables: dict[str, dict[str, Row]] = field(
        default_factory=lambda: {name: {} for name in TABLES}
    )
    unavailable: set[str] = field(default_factory=set)

    def _table(self, table: str) -> dict[str, Row]:
        if table in self.unavailable:
            raise BackendUnavailableError(f"Table {table} is unavailable")
        if table not in self.tables:
            raise BackendUnavailableError(f"Unknown table {table}")
        return self.tables[table]

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        rows = [row for row in self._table(table).values() if _matches(row, filters)]
        if order_by:
            rows.sort(key=_sort_key(order_by), reverse=descending)
        end = None if limit is None else offset + limit
        return [copy.deepcopy(row) for row in rows[offset:end]]

    def insert(self, table: str, row: Row) -> Row:
        rows = self._table(table)
        stored = dict(row)
        stored.setdefault("id", uuid.uuid4().hex)
        if table == ACTIVITY_LOG:
            stored.setdefault("created_at", utcnow())
        if stored["id"] in rows:
            raise BackendUnavailableError(f"Duplicate id {stored['id']} in {table}")
        rows[stored["id"]] = stored
        logger.debug("Inserted %s into %s", stored["id"], table)
        return copy.deepcopy(stored)

    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        if not filters:
            raise ValueError("update requires at least one filter")
        updated = []
        for row in self._table(table).values():
            if _matches(row, filters):
                row.update(values)
                updated.append(copy.deepcopy(row))
        logger.debug("Updated %d row(s) in %s", len(updated), table)
        return updated

    def count(self, table: str, filters: Filters | None = None) -> int:
        return sum(1 for row in self._table(table).values() if _matches(row, filters))

    def summary(self) -> dict[str, int]:
        """Return row counts per table."""
        return {name: len(rows) for name, rows in self.tables.items()}


@dataclass
class InMemoryAuthClient(AuthClient):
    """Single-device session holder with change notifications."""

    clock: Callable[[], datetime] = utcnow
    _session: AuthSession | None = None
    _listeners: list[SessionListener] = field(default_factory=list)

    def current_session(self) -> AuthSession | None:
        return self._session

    def sign_in(self, user_id: str, email: str) -> AuthSession:
        self._session = AuthSession(user_id=user_id, email=email, issued_at=self.clock())
        logger.info("Signed in %s", user_id)
        self._notify()
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_out(self) -> None:
        if self._session is None:
            return
        logger.info("Signed out %s", self._session.user_id)
        self._session = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)
