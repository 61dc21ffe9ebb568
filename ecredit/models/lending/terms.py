"""Pricing results for lending domain.

All amounts are full precision; round only when formatting for display.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FlatLoanTerms:
    """Flat monthly rate pricing (interest = principal x rate x months)."""

    monthly_payment: float
    total_amount: float
    interest_amount: float


@dataclass(frozen=True)
class AmortizedTerms:
    """Declining-balance annuity pricing."""

    monthly_payment: float
    total_amount: float
    interest_amount: float
    total_interest: float


@dataclass(frozen=True)
class CalculatorResult:
    """Ephemeral output of the loan calculator tool."""

    amount: float
    term_months: int
    monthly_payment: float
    total_interest: float
    total_amount: float


ZERO_FLAT_TERMS = FlatLoanTerms(monthly_payment=0.0, total_amount=0.0, interest_amount=0.0)
ZERO_AMORTIZED_TERMS = AmortizedTerms(
    monthly_payment=0.0, total_amount=0.0, interest_amount=0.0, total_interest=0.0
)
