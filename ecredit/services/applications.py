"""Borrower loan application submission."""

from __future__ import annotations

import logging
from datetime import datetime

from ecredit.config import LendingConfig
from ecredit.eligibility import ensure_eligible, ensure_valid_application
from ecredit.logging import loan_context
from ecredit.models.lending import ActivityType, Loan, LoanApplication, LoanStatus
from ecredit.presentation import format_currency
from ecredit.serialization import utcnow
from ecredit.services.profiles import get_profile
from ecredit.store.base import ACTIVITY_LOG, LOANS, TableClient
from ecredit.terms import compute_flat_loan_terms

logger = logging.getLogger(__name__)


def submit_loan_application(
    tables: TableClient,
    user_id: str,
    application: LoanApplication,
    now: datetime | None = None,
    config: LendingConfig | None = None,
) -> Loan:
    """Create a pending loan from a borrower's application form.

    Parameters
    ----------
    tables : TableClient
        Backend tables.
    user_id : str
        Applying borrower.
    application : LoanApplication
        Raw form fields.
    now : datetime | None
        Application time (defaults to the current UTC time).
    config : LendingConfig | None
        Product rules; defaults to the standard product.

    Returns
    -------
    Loan
        The stored loan in ``pending`` status.

    Raises
    ------
    NotFoundError
        The borrower has no profile.
    IneligibleError
        The profile does not meet the requirements to apply.
    ValidationError
        One or more form fields are invalid.
    BackendUnavailableError
        The backend failed while storing the loan or its activity entry.
    """
    config = config or LendingConfig()
    profile = get_profile(tables, user_id)
    ensure_eligible(profile)
    parsed = ensure_valid_application(application, config)

    amount = parsed.amount
    term_months = parsed.term_months
    terms = compute_flat_loan_terms(amount, term_months, config.flat_monthly_rate)
    now = now or utcnow()

    row = tables.insert(
        LOANS,
        {
            "user_id": user_id,
            "amount": amount,
            "interest_rate": config.flat_monthly_rate,
            "term_months": term_months,
            "monthly_payment": terms.monthly_payment,
            "status": LoanStatus.PENDING.value,
            "application_date": now,
            "purpose": parsed.purpose,
            "employment_type": parsed.employment_type,
            "monthly_income": parsed.monthly_income,
        },
    )
    loan = Loan.from_row(row)

    tables.insert(
        ACTIVITY_LOG,
        {
            "user_id": user_id,
            "activity_type": ActivityType.LOAN_APPLICATION.value,
            "description": f"Applied for {format_currency(amount)} loan",
            "amount": amount,
            "created_at": now,
        },
    )

    logger.info(
        "Loan %s submitted by %s: %s over %d month(s)",
        loan.id,
        user_id,
        format_currency(amount),
        term_months,
        extra=loan_context(loan_id=loan.id, user_id=user_id, status=loan.status, amount=amount),
    )
    return loan
