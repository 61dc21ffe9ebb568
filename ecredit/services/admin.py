"""Admin dashboard operations: portfolio stats, loan review and borrower limits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ecredit.config import LendingConfig
from ecredit.eligibility import Violation
from ecredit.exceptions import (
    BackendUnavailableError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ecredit.lifecycle import TransitionOutcome, transition_loan
from ecredit.logging import loan_context
from ecredit.models.lending import Loan, LoanAction, LoanStatus, UserProfile, VerificationStatus
from ecredit.services.history import fetch_loan_history
from ecredit.services.profiles import set_verification_status
from ecredit.store.base import LOANS, PROFILES, Backend

logger = logging.getLogger(__name__)

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850
USER_PAGE_SIZE = 50

UNKNOWN_EMAIL = "Unknown"
UNKNOWN_NAME = "Unknown User"

REVENUE_STATUSES = (LoanStatus.ACTIVE, LoanStatus.COMPLETED)


@dataclass(frozen=True)
class DashboardStats:
    """Portfolio totals for the admin overview."""

    total_users: int
    total_loans: int
    pending_loans: int
    approved_loans: int
    total_loan_amount: float
    total_revenue: float


@dataclass(frozen=True)
class LoanWithBorrower:
    """A loan row joined with its borrower's contact details."""

    loan: Loan
    borrower_email: str
    borrower_name: str


def compute_dashboard_stats(total_users: int, loans: list[Loan]) -> DashboardStats:
    """Aggregate portfolio totals.

    Revenue is the interest booked on loans that have been disbursed:
    ``monthly_payment * term_months - amount`` over active and completed loans.
    """
    return DashboardStats(
        total_users=total_users,
        total_loans=len(loans),
        pending_loans=sum(1 for loan in loans if loan.status == LoanStatus.PENDING),
        approved_loans=sum(1 for loan in loans if loan.status == LoanStatus.APPROVED),
        total_loan_amount=sum(loan.amount for loan in loans),
        total_revenue=sum(
            loan.interest_earned for loan in loans if loan.status in REVENUE_STATUSES
        ),
    )


class AdminService:
    """Operations available to an admin user.

    The acting user's profile must have ``is_admin`` set; this is checked
    once when the service is created.
    """

    def __init__(
        self,
        backend: Backend,
        admin_id: str,
        config: LendingConfig | None = None,
    ) -> None:
        """Initialize the service for an acting admin.

        Parameters
        ----------
        backend : Backend
            Backend collaborators.
        admin_id : str
            User id of the acting admin.
        config : LendingConfig | None
            Product rules (page sizes).

        Raises
        ------
        PermissionDeniedError
            If the user has no profile or is not an admin.
        """
        self.backend = backend
        self.admin_id = admin_id
        self.config = config or LendingConfig()

        row = backend.tables.get(PROFILES, admin_id)
        if row is None or not row.get("is_admin"):
            logger.warning("Admin access denied for %s", admin_id)
            raise PermissionDeniedError(f"User {admin_id} does not have admin access")

    @property
    def tables(self):
        return self.backend.tables

    def dashboard_stats(self) -> DashboardStats:
        total_users = self.tables.count(PROFILES)
        loans = [Loan.from_row(row) for row in self.tables.select(LOANS)]
        return compute_dashboard_stats(total_users, loans)

    def recent_loans(
        self,
        limit: int | None = None,
        status: LoanStatus | str | None = None,
    ) -> list[LoanWithBorrower]:
        """Newest loan applications with borrower details.

        Parameters
        ----------
        limit : int | None
            Maximum number of loans (defaults to the admin page size).
        status : LoanStatus | str | None
            Only loans in this status; all loans when None. Unknown statuses
            raise ``ValidationError``.

        Returns
        -------
        list[LoanWithBorrower]
            Borrowers whose profile cannot be read are shown as unknown.
        """
        filters = None
        if status:
            try:
                filters = {"status": LoanStatus(status).value}
            except ValueError:
                raise ValidationError(
                    [Violation("status", "choice", f"Unknown loan status: {status}")]
                ) from None
        rows = self.tables.select(
            LOANS,
            filters=filters,
            order_by="application_date",
            descending=True,
            limit=limit or self.config.admin_page_size,
        )
        loans = [Loan.from_row(row) for row in rows]
        if not loans:
            return []

        borrowers: dict[str, dict] = {}
        try:
            profile_rows = self.tables.select(
                PROFILES, filters={"id": sorted({loan.user_id for loan in loans})}
            )
            borrowers = {row["id"]: row for row in profile_rows}
        except BackendUnavailableError as e:
            logger.warning("Borrower lookup failed, showing unknown borrowers: %s", e)

        return [
            LoanWithBorrower(
                loan=loan,
                borrower_email=borrowers.get(loan.user_id, {}).get("email") or UNKNOWN_EMAIL,
                borrower_name=borrowers.get(loan.user_id, {}).get("full_name") or UNKNOWN_NAME,
            )
            for loan in loans
        ]

    def users(self, search: str | None = None, limit: int = USER_PAGE_SIZE) -> list[UserProfile]:
        """Newest borrower profiles, optionally filtered by name or email."""
        rows = self.tables.select(PROFILES, order_by="created_at", descending=True, limit=limit)
        profiles = [UserProfile.from_row(row) for row in rows]
        if not search:
            return profiles
        needle = search.lower()
        return [
            p
            for p in profiles
            if needle in (p.full_name or "").lower() or needle in p.email.lower()
        ]

    def user_loans(self, user_id: str) -> list[Loan]:
        """Every loan of a borrower, newest first.

        Raises
        ------
        BackendUnavailableError
            If the loans cannot be read.
        """
        history = fetch_loan_history(self.tables, user_id)
        if history.errors:
            raise BackendUnavailableError(history.errors[0])
        return history.loans

    def transition(
        self,
        loan_id: str,
        action: LoanAction | str,
        now: datetime | None = None,
    ) -> TransitionOutcome:
        outcome = transition_loan(self.tables, loan_id, action, now=now)
        logger.info(
            "Admin %s applied %s to loan %s",
            self.admin_id,
            LoanAction(action).value,
            loan_id,
            extra=loan_context(admin_id=self.admin_id, loan_id=loan_id, action=LoanAction(action)),
        )
        return outcome

    def approve(self, loan_id: str, now: datetime | None = None) -> TransitionOutcome:
        return self.transition(loan_id, LoanAction.APPROVE, now)

    def reject(self, loan_id: str, now: datetime | None = None) -> TransitionOutcome:
        return self.transition(loan_id, LoanAction.REJECT, now)

    def disburse(self, loan_id: str, now: datetime | None = None) -> TransitionOutcome:
        return self.transition(loan_id, LoanAction.DISBURSE, now)

    def complete(self, loan_id: str, now: datetime | None = None) -> TransitionOutcome:
        return self.transition(loan_id, LoanAction.COMPLETE, now)

    def _update_profile_column(self, user_id: str, column: str, value) -> UserProfile:
        rows = self.tables.update(PROFILES, {column: value}, filters={"id": user_id})
        if not rows:
            raise NotFoundError(PROFILES, user_id)
        logger.info("Admin %s set %s=%s for %s", self.admin_id, column, value, user_id)
        return UserProfile.from_row(rows[0])

    def update_credit_score(self, user_id: str, score: int) -> UserProfile:
        """Set a borrower's credit score (300 to 850)."""
        if isinstance(score, bool) or not isinstance(score, int) or not (
            MIN_CREDIT_SCORE <= score <= MAX_CREDIT_SCORE
        ):
            raise ValidationError(
                [
                    Violation(
                        "credit_score",
                        "range",
                        f"Credit score must be between {MIN_CREDIT_SCORE} "
                        f"and {MAX_CREDIT_SCORE}.",
                    )
                ]
            )
        return self._update_profile_column(user_id, "credit_score", score)

    def update_loan_limit(self, user_id: str, limit: float) -> UserProfile:
        """Set a borrower's loan limit (zero or more)."""
        if isinstance(limit, bool) or not isinstance(limit, (int, float)) or not limit >= 0:
            raise ValidationError(
                [Violation("loan_limit", "range", "Loan limit cannot be negative.")]
            )
        return self._update_profile_column(user_id, "loan_limit", float(limit))

    def review_id_document(
        self,
        user_id: str,
        status: VerificationStatus | str,
        now: datetime | None = None,
    ) -> UserProfile:
        """Mark a borrower's uploaded ID as verified or rejected."""
        profile = set_verification_status(self.tables, user_id, status, now=now)
        logger.info(
            "Admin %s reviewed ID of %s: %s",
            self.admin_id,
            user_id,
            profile.id_verification_status.value,
        )
        return profile
