"""Activity log models for lending domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ecredit.exceptions import BackendUnavailableError
from ecredit.serialization import parse_amount, parse_timestamp


@dataclass(frozen=True)
class ActivityLogEntry:
    """Append-only audit record (one ``activity_log`` row)."""

    id: str
    user_id: str
    activity_type: str  # Free-form tag (e.g., loan_application, loan_approved)
    description: str
    amount: float | None
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ActivityLogEntry:
        """Build an entry from a backend row."""
        try:
            created_at = parse_timestamp(row["created_at"])
            if created_at is None:
                raise ValueError("created_at is required")
            return cls(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                activity_type=str(row["activity_type"]),
                description=row.get("description") or "",
                amount=parse_amount(row.get("amount")),
                created_at=created_at,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BackendUnavailableError(f"Malformed activity row {row.get('id')}: {e}") from e


@dataclass(frozen=True)
class ActivityItem:
    """One row of a user's merged activity feed."""

    id: str
    activity_type: str
    description: str
    amount: float | None
    created_at: datetime
    status: str | None = None  # Loan status for projected loan rows
