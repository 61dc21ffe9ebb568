"""Lending domain models."""

from ecredit.models.lending.activity import ActivityItem, ActivityLogEntry
from ecredit.models.lending.enums import (
    ActivityType,
    EmploymentType,
    FeedStatus,
    LoanAction,
    LoanStatus,
    VerificationStatus,
)
from ecredit.models.lending.loan import Loan, LoanApplication
from ecredit.models.lending.profile import UserProfile
from ecredit.models.lending.terms import AmortizedTerms, CalculatorResult, FlatLoanTerms

__all__ = [
    "ActivityItem",
    "ActivityLogEntry",
    "ActivityType",
    "AmortizedTerms",
    "CalculatorResult",
    "EmploymentType",
    "FeedStatus",
    "FlatLoanTerms",
    "Loan",
    "LoanAction",
    "LoanApplication",
    "LoanStatus",
    "UserProfile",
    "VerificationStatus",
]
