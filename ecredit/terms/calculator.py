"""Loan pricing under the two rate conventions used by the product.

The flat monthly model prices real applications: interest accrues on the
full principal every month. The amortizing annuity model powers the
exploratory calculator and takes an annual percentage rate.

Neither function raises on degenerate input; they return all-zero terms.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ecredit.models.lending.terms import (
    ZERO_AMORTIZED_TERMS,
    ZERO_FLAT_TERMS,
    AmortizedTerms,
    CalculatorResult,
    FlatLoanTerms,
)

FLAT_MONTHLY_RATE = 0.15
CALCULATOR_TERM_OPTIONS = (1, 2, 3, 6, 12, 24, 36)


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def compute_flat_loan_terms(
    amount: float,
    term_months: int,
    monthly_rate: float = FLAT_MONTHLY_RATE,
) -> FlatLoanTerms:
    """Price a loan with a flat monthly interest rate.

    Parameters
    ----------
    amount : float
        Principal.
    term_months : int
        Number of monthly installments.
    monthly_rate : float
        Monthly rate as a fraction (default 0.15).

    Returns
    -------
    FlatLoanTerms
        Full-precision terms; zeros when ``amount <= 0`` or ``term_months <= 0``.
    """
    if not math.isfinite(amount) or amount <= 0 or term_months <= 0:
        return ZERO_FLAT_TERMS

    interest = amount * monthly_rate * term_months
    total = amount + interest
    monthly_payment = total / term_months

    return FlatLoanTerms(
        monthly_payment=_finite_or_zero(monthly_payment),
        total_amount=total,
        interest_amount=interest,
    )


def compute_amortized_terms(
    amount: float,
    term_months: int,
    annual_rate_percent: float,
) -> AmortizedTerms:
    """Price a loan as a standard declining-balance annuity.

    Parameters
    ----------
    amount : float
        Principal.
    term_months : int
        Number of monthly payments.
    annual_rate_percent : float
        Nominal annual rate in percent (12 means 12%).

    Returns
    -------
    AmortizedTerms
        Full-precision terms; zeros for non-positive amount or term, or a
        negative rate. NaN results are coerced to 0.
    """
    if (
        not math.isfinite(amount)
        or not math.isfinite(annual_rate_percent)
        or amount <= 0
        or term_months <= 0
        or annual_rate_percent < 0
    ):
        return ZERO_AMORTIZED_TERMS

    monthly_rate = annual_rate_percent / 100 / 12

    if monthly_rate == 0:
        monthly_payment = amount / term_months
        total_interest = 0.0
    else:
        try:
            growth = (1 + monthly_rate) ** term_months
            monthly_payment = amount * monthly_rate * growth / (growth - 1)
        except (OverflowError, ZeroDivisionError):
            monthly_payment = math.nan
        total_interest = monthly_payment * term_months - amount

    monthly_payment = _finite_or_zero(monthly_payment)
    total_interest = _finite_or_zero(total_interest)

    return AmortizedTerms(
        monthly_payment=monthly_payment,
        total_amount=amount + total_interest,
        interest_amount=total_interest,
        total_interest=total_interest,
    )


def _parse_number(raw: str | float | None, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


@dataclass
class CalculatorInputs:
    """Raw calculator form inputs.

    Unparseable values fall back to 0 for amount and rate and to a
    one-month term, mirroring how the calculator screen reads its fields.
    """

    amount: str = ""
    term_months: str = "1"
    interest_rate: str = "15"

    def result(self) -> CalculatorResult:
        """Compute the calculator output for the current inputs."""
        amount = _parse_number(self.amount, 0.0)
        term = int(_parse_number(self.term_months, 1.0)) or 1
        rate = _parse_number(self.interest_rate, 0.0)

        terms = compute_amortized_terms(amount, term, rate)
        return CalculatorResult(
            amount=amount,
            term_months=term,
            monthly_payment=terms.monthly_payment,
            total_interest=terms.total_interest,
            total_amount=terms.total_amount,
        )
