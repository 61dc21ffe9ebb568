"""Borrower loan history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ecredit.exceptions import BackendUnavailableError
from ecredit.models.lending import FeedStatus, Loan, LoanStatus
from ecredit.serialization import utcnow
from ecredit.store.base import LOANS, TableClient

logger = logging.getLogger(__name__)


def sample_loan_history(user_id: str = "sample", now: datetime | None = None) -> list[Loan]:
    """Placeholder history shown to borrowers with no loans yet."""
    now = now or utcnow()
    completed_applied = now - timedelta(days=180)
    active_applied = now - timedelta(days=60)
    return [
        Loan(
            id="sample-1",
            user_id=user_id,
            amount=50000.0,
            interest_rate=0.15,
            term_months=12,
            monthly_payment=4500.0,
            status=LoanStatus.COMPLETED,
            application_date=completed_applied,
            approval_date=completed_applied + timedelta(days=2),
            disbursement_date=completed_applied + timedelta(days=3),
            completion_date=now - timedelta(days=5),
            purpose="Business expansion",
        ),
        Loan(
            id="sample-2",
            user_id=user_id,
            amount=25000.0,
            interest_rate=0.15,
            term_months=6,
            monthly_payment=4200.0,
            status=LoanStatus.ACTIVE,
            application_date=active_applied,
            approval_date=active_applied + timedelta(days=2),
            disbursement_date=active_applied + timedelta(days=3),
            purpose="Home improvement",
        ),
    ]


@dataclass(frozen=True)
class LoanHistory:
    """A borrower's loans, newest application first."""

    loans: list[Loan]
    status: FeedStatus
    errors: list[str] = field(default_factory=list)

    def or_sample(self, now: datetime | None = None) -> list[Loan]:
        if self.status == FeedStatus.OK:
            return self.loans
        return sample_loan_history(now=now)


def fetch_loan_history(tables: TableClient, user_id: str) -> LoanHistory:
    """Load every loan of a borrower.

    A backend failure is reported as an ``unavailable`` history rather
    than raised.
    """
    try:
        rows = tables.select(
            LOANS,
            filters={"user_id": user_id},
            order_by="application_date",
            descending=True,
        )
        loans = [Loan.from_row(row) for row in rows]
    except BackendUnavailableError as e:
        logger.warning("Loan history unavailable for %s: %s", user_id, e)
        return LoanHistory(loans=[], status=FeedStatus.UNAVAILABLE, errors=[str(e)])

    return LoanHistory(loans=loans, status=FeedStatus.OK if loans else FeedStatus.EMPTY)
