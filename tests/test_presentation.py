"""Tests for display formatting and style lookups."""

from datetime import datetime, timedelta, timezone

import pytest

from ecredit.models.lending import ActivityItem, ActivityType, LoanStatus, VerificationStatus
from ecredit.presentation import (
    ACTIVITY_STYLES,
    NEUTRAL_ACTIVITY_STYLE,
    NEUTRAL_STATUS_STYLE,
    VERIFICATION_STYLES,
    activity_style,
    format_currency,
    format_time_ago,
    item_style,
    loan_status_style,
    verification_style,
)

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (13000, "₱13,000"),
            (500000, "₱500,000"),
            (2416.6667, "₱2,417"),
            (0, "₱0"),
            (None, "₱0"),
            (-1500, "-₱1,500"),
        ],
    )
    def test_format(self, amount, expected) -> None:
        """Test peso formatting without decimals."""
        assert format_currency(amount) == expected

    def test_decimals(self) -> None:
        """Test formatting with decimals."""
        assert format_currency(1066.186, decimals=2) == "₱1,066.19"


class TestFormatTimeAgo:
    """Tests for format_time_ago."""

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=30), "Just now"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(hours=3, minutes=10), "3h ago"),
            (timedelta(days=2), "2d ago"),
            (timedelta(days=29), "29d ago"),
        ],
    )
    def test_relative(self, delta, expected) -> None:
        """Test relative formatting within a month."""
        assert format_time_ago(NOW - delta, now=NOW) == expected

    def test_older_than_a_month(self) -> None:
        """Test that older timestamps show the date."""
        assert format_time_ago(datetime(2026, 1, 4, tzinfo=timezone.utc), now=NOW) == "Jan 4"


class TestStyles:
    """Tests for style lookups."""

    def test_every_activity_type_has_a_style(self) -> None:
        """Test that the style table covers every known tag."""
        assert set(ACTIVITY_STYLES) == set(ActivityType)

    def test_known_activity(self) -> None:
        """Test a known activity tag."""
        style = activity_style("loan_approved")

        assert style.icon == "checkmark-circle"
        assert style.color == "#28a745"

    @pytest.mark.parametrize("tag", ["mystery", "", None, "loan_approve"])
    def test_unknown_activity_is_neutral(self, tag) -> None:
        """Test that unknown tags get the neutral style."""
        assert activity_style(tag) == NEUTRAL_ACTIVITY_STYLE

    def test_loan_status(self) -> None:
        """Test loan status styles."""
        assert loan_status_style(LoanStatus.PENDING).label == "Pending"
        assert loan_status_style("active").icon == "play-circle"
        assert loan_status_style("archived") == NEUTRAL_STATUS_STYLE

    def test_verification(self) -> None:
        """Test verification styles, with unknown values read as not uploaded."""
        assert verification_style("verified").label == "Verified"
        assert verification_style(VerificationStatus.PENDING).label == "Under Review"
        assert verification_style(None) == VERIFICATION_STYLES[VerificationStatus.NOT_UPLOADED]

    def test_item_style(self) -> None:
        """Test that projected loans are styled by status."""
        loan_item = ActivityItem("loan-1", "loan_status", "Loan application rejected", 1.0, NOW, "rejected")
        entry_item = ActivityItem("e1", "payment", "Payment received", 1.0, NOW)

        assert item_style(loan_item) == loan_status_style("rejected")
        assert item_style(entry_item) == activity_style("payment")
