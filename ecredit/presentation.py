"""Display formatting: the only place amounts are rounded.

Icon names are Ionicons glyphs as used by the mobile client; colors are
hex strings. Every lookup is total: unknown tags get a neutral style.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ecredit.models.lending.activity import ActivityItem
from ecredit.models.lending.enums import ActivityType, LoanStatus, VerificationStatus
from ecredit.serialization import utcnow

CURRENCY_SYMBOL = "₱"


@dataclass(frozen=True)
class Style:
    icon: str
    color: str
    label: str


NEUTRAL_ACTIVITY_STYLE = Style("information-circle", "#6c757d", "Activity")
NEUTRAL_STATUS_STYLE = Style("help-circle", "#6c757d", "Unknown")

ACTIVITY_STYLES: dict[ActivityType, Style] = {
    ActivityType.LOAN_APPLICATION: Style("document-text", "#007bff", "Loan Application"),
    ActivityType.LOAN_APPROVED: Style("checkmark-circle", "#28a745", "Loan Approved"),
    ActivityType.LOAN_REJECTED: Style("close-circle", "#dc3545", "Loan Rejected"),
    ActivityType.LOAN_DISBURSED: Style("cash", "#007bff", "Loan Disbursed"),
    ActivityType.LOAN_COMPLETED: Style("checkmark-done", "#ff751f", "Loan Completed"),
    ActivityType.LOAN_STATUS: Style("document-text", "#007bff", "Loan Application"),
    ActivityType.PAYMENT: Style("card", "#17a2b8", "Payment"),
    ActivityType.PROFILE_UPDATE: Style("person", "#ff751f", "Profile Update"),
    ActivityType.DEPOSIT: Style("add-circle", "#28a745", "Deposit"),
    ActivityType.WITHDRAWAL: Style("remove-circle", "#ff9800", "Withdrawal"),
}

LOAN_STATUS_STYLES: dict[LoanStatus, Style] = {
    LoanStatus.PENDING: Style("time", "#ff9800", "Pending"),
    LoanStatus.APPROVED: Style("checkmark-circle", "#28a745", "Approved"),
    LoanStatus.REJECTED: Style("close-circle", "#dc3545", "Rejected"),
    LoanStatus.ACTIVE: Style("play-circle", "#007bff", "Active"),
    LoanStatus.COMPLETED: Style("checkmark-done", "#ff751f", "Completed"),
}

VERIFICATION_STYLES: dict[VerificationStatus, Style] = {
    VerificationStatus.NOT_UPLOADED: Style("cloud-upload", "#ff751f", "Not Uploaded"),
    VerificationStatus.PENDING: Style("time", "#ff9800", "Under Review"),
    VerificationStatus.VERIFIED: Style("shield-checkmark", "#28a745", "Verified"),
    VerificationStatus.REJECTED: Style("close-circle", "#dc3545", "Rejected"),
}


def activity_style(activity_type: str | ActivityType | None) -> Style:
    """Style for an activity tag; neutral for unknown tags."""
    member = ActivityType.parse(activity_type)
    if member is None:
        return NEUTRAL_ACTIVITY_STYLE
    return ACTIVITY_STYLES[member]


def loan_status_style(status: str | LoanStatus | None) -> Style:
    """Style for a loan status; neutral for unknown values."""
    try:
        return LOAN_STATUS_STYLES[LoanStatus(status)]
    except ValueError:
        return NEUTRAL_STATUS_STYLE


def verification_style(status: str | VerificationStatus | None) -> Style:
    """Style for an ID verification status; missing or unknown reads as not uploaded."""
    try:
        return VERIFICATION_STYLES[VerificationStatus(status)]
    except ValueError:
        return VERIFICATION_STYLES[VerificationStatus.NOT_UPLOADED]


def item_style(item: ActivityItem) -> Style:
    """Style for a feed row: projected loans use their status, others their tag."""
    if item.activity_type == ActivityType.LOAN_STATUS.value:
        return loan_status_style(item.status)
    return activity_style(item.activity_type)


def format_currency(amount: float | None, decimals: int = 0) -> str:
    """Format a peso amount, e.g. ``₱13,000``."""
    value = amount or 0.0
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.{decimals}f}"


def format_time_ago(timestamp: datetime, now: datetime | None = None) -> str:
    """Relative time for feeds: "Just now", "5m ago", "3h ago", "2d ago" or "Mar 4"."""
    now = now or utcnow()
    seconds = int((now - timestamp).total_seconds())

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 2592000:
        return f"{seconds // 86400}d ago"
    return f"{timestamp:%b} {timestamp.day}"
