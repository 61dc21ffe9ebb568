"""Enumeration types for lending domain entities."""

from __future__ import annotations

from enum import Enum


class LoanStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (LoanStatus.REJECTED, LoanStatus.COMPLETED)


class LoanAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    DISBURSE = "disburse"
    COMPLETE = "complete"


class ActivityType(str, Enum):
    LOAN_APPLICATION = "loan_application"
    LOAN_APPROVED = "loan_approved"
    LOAN_REJECTED = "loan_rejected"
    LOAN_DISBURSED = "loan_disbursed"
    LOAN_COMPLETED = "loan_completed"
    LOAN_STATUS = "loan_status"  # loan rows projected into the feed
    PAYMENT = "payment"
    PROFILE_UPDATE = "profile_update"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    @classmethod
    def parse(cls, tag: str | ActivityType | None) -> ActivityType | None:
        """Return the member for a free-form tag, or None when unknown."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None


class VerificationStatus(str, Enum):
    NOT_UPLOADED = "not_uploaded"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class EmploymentType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    SELF_EMPLOYED = "Self-employed"
    CONTRACT = "Contract"
    RETIRED = "Retired"


class FeedStatus(str, Enum):
    """Outcome of a read path that may be empty or unreachable."""

    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"
