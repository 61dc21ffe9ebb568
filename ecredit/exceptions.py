"""Custom exception hierarchy for ecredit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ecredit.eligibility import Violation


class EcreditError(Exception):
    """Base exception for all ecredit errors."""


class LoanRejectedError(EcreditError):
    """A request was logically rejected; the message is safe to show to the user."""


class ValidationError(LoanRejectedError):
    """Raised when submitted fields fail one or more constraints.

    Carries every violation, not only the first one found.
    """

    def __init__(self, violations: Sequence[Violation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(v.message for v in self.violations) or "Invalid input")

    @property
    def fields(self) -> list[str]:
        """Names of the violated fields, in the order they were checked."""
        return [v.field for v in self.violations]


class IneligibleError(LoanRejectedError):
    """Raised when the borrower has not satisfied the eligibility gate."""

    def __init__(self, missing_requirements: Sequence[str]) -> None:
        self.missing_requirements = list(missing_requirements)
        super().__init__(
            "Loan application requirements not met: " + ", ".join(self.missing_requirements)
        )


class IllegalTransitionError(LoanRejectedError):
    """Raised when a lifecycle action is not valid from the loan's current status."""

    def __init__(self, loan_id: str, status: str, action: str) -> None:
        self.loan_id = loan_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} loan {loan_id} while it is {status}")


class PermissionDeniedError(LoanRejectedError):
    """Raised when the acting user may not perform an admin operation."""


class NotFoundError(EcreditError):
    """Raised when a referenced row does not exist."""

    def __init__(self, table: str, key: str) -> None:
        self.table = table
        self.key = key
        super().__init__(f"No row in {table} with id {key}")


class BackendUnavailableError(EcreditError):
    """Raised when the backend request failed or returned malformed data."""


class ConfigurationError(EcreditError):
    """Raised when configuration is invalid or missing."""
