"""Loan pricing."""

from ecredit.terms.calculator import (
    CALCULATOR_TERM_OPTIONS,
    FLAT_MONTHLY_RATE,
    CalculatorInputs,
    compute_amortized_terms,
    compute_flat_loan_terms,
)

__all__ = [
    "CALCULATOR_TERM_OPTIONS",
    "FLAT_MONTHLY_RATE",
    "CalculatorInputs",
    "compute_amortized_terms",
    "compute_flat_loan_terms",
]
