"""Loan models for lending domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ecredit.exceptions import BackendUnavailableError
from ecredit.models.lending.enums import LoanStatus
from ecredit.serialization import parse_amount, parse_timestamp


@dataclass
class Loan:
    """Credit request owned by a single borrower (one ``loans`` row)."""

    id: str
    user_id: str
    amount: float
    interest_rate: float  # Monthly rate (e.g., 0.15 for 15%)
    term_months: int
    monthly_payment: float
    status: LoanStatus
    application_date: datetime
    approval_date: datetime | None = None
    disbursement_date: datetime | None = None
    completion_date: datetime | None = None
    purpose: str | None = None
    employment_type: str | None = None
    monthly_income: float | None = None  # Declared at application time

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Loan:
        """Build a loan from a backend row."""
        try:
            status = LoanStatus(row["status"])
            amount = parse_amount(row["amount"])
            application_date = parse_timestamp(row["application_date"])
            if amount is None or application_date is None:
                raise ValueError("amount and application_date are required")
            return cls(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                amount=amount,
                interest_rate=parse_amount(row.get("interest_rate"), 0.0),
                term_months=int(row["term_months"]),
                monthly_payment=parse_amount(row.get("monthly_payment"), 0.0),
                status=status,
                application_date=application_date,
                approval_date=parse_timestamp(row.get("approval_date")),
                disbursement_date=parse_timestamp(row.get("disbursement_date")),
                completion_date=parse_timestamp(row.get("completion_date")),
                purpose=row.get("purpose"),
                employment_type=row.get("employment_type"),
                monthly_income=parse_amount(row.get("monthly_income")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BackendUnavailableError(f"Malformed loan row {row.get('id')}: {e}") from e

    @property
    def total_repayment(self) -> float:
        return self.monthly_payment * self.term_months

    @property
    def interest_earned(self) -> float:
        """Interest over the full term, as booked by the admin dashboard."""
        return self.total_repayment - self.amount


@dataclass
class LoanApplication:
    """Literal loan application form fields as entered by the borrower.

    Numeric fields are kept as the raw strings the form produced so that
    validation can report "missing" and "not a number" separately.
    """

    amount: str
    purpose: str
    monthly_income: str
    employment_type: str
    term_months: str = "1"
    terms_accepted: bool = False
