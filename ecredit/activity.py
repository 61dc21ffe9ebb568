"""Per-user activity feed: audit entries merged with loan status rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from ecredit.config import LendingConfig
from ecredit.exceptions import BackendUnavailableError
from ecredit.models.lending import (
    ActivityItem,
    ActivityLogEntry,
    ActivityType,
    FeedStatus,
    Loan,
    LoanStatus,
)
from ecredit.serialization import utcnow
from ecredit.store.base import ACTIVITY_LOG, LOANS, TableClient

logger = logging.getLogger(__name__)

def entry_to_item(entry: ActivityLogEntry) -> ActivityItem:
    return ActivityItem(
        id=entry.id,
        activity_type=entry.activity_type,
        description=entry.description,
        amount=entry.amount,
        created_at=entry.created_at,
    )


def loan_to_item(loan: Loan) -> ActivityItem:
    """Present a loan row as a feed entry describing its current status."""
    return ActivityItem(
        id=f"loan-{loan.id}",
        activity_type=ActivityType.LOAN_STATUS.value,
        description=f"Loan application {loan.status.value}",
        amount=loan.amount,
        created_at=loan.application_date,
        status=loan.status.value,
    )


def project_activity(
    entries: Iterable[ActivityLogEntry],
    loans: Iterable[Loan],
    limit: int | None = None,
) -> list[ActivityItem]:
    """Merge audit entries and loans, newest first, keeping at most ``limit`` (all when None)."""
    items = [entry_to_item(e) for e in entries] + [loan_to_item(loan) for loan in loans]
    items.sort(key=lambda item: item.created_at, reverse=True)
    return items if limit is None else items[:limit]


def sample_activities(now: datetime | None = None) -> list[ActivityItem]:
    """Placeholder feed shown instead of an empty screen."""
    now = now or utcnow()
    return [
        ActivityItem(
            id="sample-1",
            activity_type=ActivityType.LOAN_APPROVED.value,
            description="Your loan application for ₱50,000 has been approved",
            amount=50000.0,
            created_at=now - timedelta(days=2),
            status=LoanStatus.APPROVED.value,
        ),
        ActivityItem(
            id="sample-2",
            activity_type=ActivityType.LOAN_APPLICATION.value,
            description="You submitted a new loan application",
            amount=25000.0,
            created_at=now - timedelta(days=5),
            status=LoanStatus.PENDING.value,
        ),
    ]


@dataclass(frozen=True)
class ActivityFeed:
    """Feed items plus whether they came back, came back empty, or failed."""

    items: list[ActivityItem]
    status: FeedStatus
    errors: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """At least one source failed even though the feed has a result."""
        return bool(self.errors) and self.status != FeedStatus.UNAVAILABLE

    def or_sample(self, now: datetime | None = None) -> list[ActivityItem]:
        """Items to display, substituting the placeholder feed when there are none."""
        if self.status == FeedStatus.OK:
            return self.items
        return sample_activities(now)


def fetch_activity_feed(
    tables: TableClient,
    user_id: str,
    limit: int | None = None,
    config: LendingConfig | None = None,
) -> ActivityFeed:
    """Load and merge a user's most recent activity.

    Each source is read independently; a failing source is logged and
    the other one is still projected. The feed is ``unavailable`` only
    when every source failed.

    Parameters
    ----------
    tables : TableClient
        Backend tables.
    user_id : str
        Feed owner.
    limit : int | None
        Maximum number of items; the configured activity feed cap when None.
    config : LendingConfig | None
        Product rules; defaults to the standard product.
    """
    config = config or LendingConfig()
    if limit is None:
        limit = config.activity_feed_limit
    errors: list[str] = []
    entries: list[ActivityLogEntry] = []
    loans: list[Loan] = []

    try:
        rows = tables.select(
            ACTIVITY_LOG,
            filters={"user_id": user_id},
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        entries = [ActivityLogEntry.from_row(row) for row in rows]
    except BackendUnavailableError as e:
        logger.warning("Activity log unavailable for %s: %s", user_id, e)
        errors.append(str(e))

    try:
        rows = tables.select(
            LOANS,
            filters={"user_id": user_id},
            order_by="application_date",
            descending=True,
            limit=limit,
        )
        loans = [Loan.from_row(row) for row in rows]
    except BackendUnavailableError as e:
        logger.warning("Loans unavailable for %s: %s", user_id, e)
        errors.append(str(e))

    if len(errors) == 2:
        return ActivityFeed(items=[], status=FeedStatus.UNAVAILABLE, errors=errors)

    items = project_activity(entries, loans, limit)
    status = FeedStatus.OK if items else FeedStatus.EMPTY
    return ActivityFeed(items=items, status=status, errors=errors)


def fetch_account_summary(
    tables: TableClient,
    user_id: str,
    config: LendingConfig | None = None,
) -> ActivityFeed:
    """The short feed shown on the account summary screen."""
    config = config or LendingConfig()
    return fetch_activity_feed(tables, user_id, limit=config.summary_feed_limit, config=config)
