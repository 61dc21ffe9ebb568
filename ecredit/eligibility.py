"""Borrower eligibility and loan application validation.

Eligibility answers "may this borrower apply at all" from the profile;
validation answers "is this particular application acceptable" from the
submitted form fields. Both report everything that is wrong at once so a
caller can render a complete checklist or error list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ecredit.config import LendingConfig
from ecredit.exceptions import IneligibleError, ValidationError
from ecredit.models.lending import EmploymentType, LoanApplication, UserProfile, VerificationStatus
from ecredit.presentation import format_currency

REQUIREMENT_PROFILE = "Complete profile information"
REQUIREMENT_ID_UPLOADED = "Upload valid ID document"
REQUIREMENT_ID_VERIFIED = "ID verification approved"

REQUIREMENTS = (REQUIREMENT_PROFILE, REQUIREMENT_ID_UPLOADED, REQUIREMENT_ID_VERIFIED)


@dataclass(frozen=True)
class Eligibility:
    """Result of the three-condition eligibility gate."""

    can_apply: bool
    requirements: tuple[str, ...]
    missing_requirements: tuple[str, ...]

    @property
    def completed(self) -> int:
        """Number of satisfied requirements, for progress display."""
        return len(self.requirements) - len(self.missing_requirements)

    def is_satisfied(self, requirement: str) -> bool:
        return requirement not in self.missing_requirements


def evaluate_eligibility(profile: UserProfile) -> Eligibility:
    """Check whether a borrower may submit a loan application.

    The full requirement list is always returned, in a fixed order, along
    with the subset that is still missing.
    """
    missing = []
    if not profile.profile_completed:
        missing.append(REQUIREMENT_PROFILE)
    if not profile.id_document_url:
        missing.append(REQUIREMENT_ID_UPLOADED)
    if profile.id_verification_status != VerificationStatus.VERIFIED:
        missing.append(REQUIREMENT_ID_VERIFIED)

    return Eligibility(
        can_apply=not missing,
        requirements=REQUIREMENTS,
        missing_requirements=tuple(missing),
    )


def ensure_eligible(profile: UserProfile) -> Eligibility:
    """Return the eligibility result, raising if the gate is not satisfied.

    Raises
    ------
    IneligibleError
        Carrying the missing requirements.
    """
    eligibility = evaluate_eligibility(profile)
    if not eligibility.can_apply:
        raise IneligibleError(eligibility.missing_requirements)
    return eligibility


@dataclass(frozen=True)
class Violation:
    """One failed constraint on a submitted field."""

    field: str
    rule: str
    message: str


def _parse_decimal_field(raw: str | None) -> tuple[bool, float | None]:
    """Return (present, value); value is None when present but not numeric."""
    text = (raw or "").strip()
    if not text:
        return False, None
    try:
        value = float(text.replace(",", ""))
    except ValueError:
        return True, None
    if not math.isfinite(value):
        return True, None
    return True, value


def validate_application(
    application: LoanApplication,
    config: LendingConfig | None = None,
) -> list[Violation]:
    """Check every submission rule and return all violations.

    Parameters
    ----------
    application : LoanApplication
        Raw form fields.
    config : LendingConfig | None
        Product limits; defaults to the standard product.

    Returns
    -------
    list[Violation]
        Empty when the application is acceptable.
    """
    config = config or LendingConfig()
    violations: list[Violation] = []

    amount_present, amount = _parse_decimal_field(application.amount)
    if not amount_present:
        violations.append(Violation("amount", "required", "Loan amount is required."))
    elif amount is None:
        violations.append(Violation("amount", "numeric", "Loan amount must be a number."))
    elif not config.min_amount <= amount <= config.max_amount:
        violations.append(
            Violation(
                "amount",
                "range",
                f"Loan amount must be between {format_currency(config.min_amount)} "
                f"and {format_currency(config.max_amount)}.",
            )
        )

    if not (application.purpose or "").strip():
        violations.append(Violation("purpose", "required", "Loan purpose is required."))

    income_present, income = _parse_decimal_field(application.monthly_income)
    if not income_present:
        violations.append(Violation("monthly_income", "required", "Monthly income is required."))
    elif income is None:
        violations.append(
            Violation("monthly_income", "numeric", "Monthly income must be a number.")
        )
    elif income <= 0:
        violations.append(
            Violation("monthly_income", "positive", "Monthly income must be greater than 0.")
        )
        income = None

    employment = (application.employment_type or "").strip()
    if not employment:
        violations.append(
            Violation("employment_type", "required", "Employment type is required.")
        )
    elif employment not in {e.value for e in EmploymentType}:
        violations.append(
            Violation("employment_type", "choice", f"Unknown employment type: {employment}.")
        )

    term_present, term = _parse_decimal_field(application.term_months)
    if not term_present or term is None or term not in config.term_options:
        options = ", ".join(str(t) for t in config.term_options)
        violations.append(
            Violation("term_months", "choice", f"Loan term must be one of: {options} months.")
        )

    if amount is not None and income is not None:
        if amount > income * config.max_income_multiple:
            violations.append(
                Violation(
                    "amount",
                    "income_multiple",
                    f"Loan amount cannot exceed {config.max_income_multiple:g} times "
                    "your monthly income.",
                )
            )

    if not application.terms_accepted:
        violations.append(
            Violation(
                "terms_accepted",
                "required",
                "You must accept the terms and conditions before submitting "
                "your loan application.",
            )
        )

    return violations


@dataclass(frozen=True)
class ParsedApplication:
    """Numeric and text fields of an accepted application."""

    amount: float
    monthly_income: float
    term_months: int
    purpose: str
    employment_type: str


def ensure_valid_application(
    application: LoanApplication,
    config: LendingConfig | None = None,
) -> ParsedApplication:
    """Validate an application and return its parsed fields.

    Fields are parsed with the same rules the validation applies, so
    anything accepted here can be stored as-is.

    Raises
    ------
    ValidationError
        Listing every violation, if there are any.
    """
    violations = validate_application(application, config)
    if violations:
        raise ValidationError(violations)
    _, amount = _parse_decimal_field(application.amount)
    _, income = _parse_decimal_field(application.monthly_income)
    _, term = _parse_decimal_field(application.term_months)
    return ParsedApplication(
        amount=amount,
        monthly_income=income,
        term_months=int(term),
        purpose=application.purpose.strip(),
        employment_type=application.employment_type.strip(),
    )
