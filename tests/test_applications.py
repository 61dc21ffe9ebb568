"""Tests for loan application submission."""

import pytest
from conftest import make_profile

from ecredit.config import LendingConfig
from ecredit.exceptions import BackendUnavailableError, IneligibleError, NotFoundError, ValidationError
from ecredit.models.lending import LoanApplication, LoanStatus, VerificationStatus
from ecredit.serialization import to_row
from ecredit.services import submit_loan_application
from ecredit.store.base import ACTIVITY_LOG, LOANS, PROFILES


def make_application(**overrides) -> LoanApplication:
    fields = {
        "amount": "10000",
        "purpose": "Business capital",
        "monthly_income": "30000",
        "employment_type": "Full-time",
        "term_months": "2",
        "terms_accepted": True,
    }
    fields.update(overrides)
    return LoanApplication(**fields)


class TestSubmitLoanApplication:
    """Tests for submit_loan_application."""

    def test_creates_pending_loan(self, tables, borrower, now) -> None:
        """Test a successful submission."""
        loan = submit_loan_application(tables, borrower.id, make_application(), now=now)

        assert loan.status == LoanStatus.PENDING
        assert loan.user_id == borrower.id
        assert loan.amount == 10000.0
        assert loan.term_months == 2
        assert loan.interest_rate == 0.15
        assert loan.monthly_payment == pytest.approx(6500.0)
        assert loan.application_date == now
        assert loan.approval_date is None
        assert loan.purpose == "Business capital"
        assert loan.employment_type == "Full-time"
        assert loan.monthly_income == 30000.0
        assert tables.get(LOANS, loan.id)["status"] == "pending"

    def test_formatted_fields(self, tables, borrower, now) -> None:
        """Test that fields accepted by validation are stored as parsed."""
        application = make_application(amount="1,000", monthly_income="5,000", term_months="2,")

        loan = submit_loan_application(tables, borrower.id, application, now=now)

        assert loan.amount == 1000.0
        assert loan.monthly_income == 5000.0
        assert loan.term_months == 2
        assert loan.monthly_payment == pytest.approx(650.0)

    def test_records_activity(self, tables, borrower, now) -> None:
        """Test that the submission is logged for the borrower."""
        submit_loan_application(tables, borrower.id, make_application(), now=now)

        [entry] = tables.select(ACTIVITY_LOG)
        assert entry["user_id"] == borrower.id
        assert entry["activity_type"] == "loan_application"
        assert entry["description"] == "Applied for ₱10,000 loan"
        assert entry["amount"] == 10000.0
        assert entry["created_at"] == now

    def test_configured_rate(self, tables, borrower, now) -> None:
        """Test pricing at a configured flat monthly rate."""
        config = LendingConfig(flat_monthly_rate=0.1)

        loan = submit_loan_application(
            tables, borrower.id, make_application(term_months="1"), now=now, config=config
        )

        assert loan.interest_rate == 0.1
        assert loan.monthly_payment == pytest.approx(11000.0)

    def test_missing_profile(self, tables, now) -> None:
        """Test submitting for a user without a profile."""
        with pytest.raises(NotFoundError):
            submit_loan_application(tables, "ghost", make_application(), now=now)

    def test_ineligible_borrower(self, tables, now) -> None:
        """Test that an unverified borrower cannot apply."""
        profile = make_profile(id_verification_status=VerificationStatus.PENDING)
        tables.insert(PROFILES, to_row(profile))

        with pytest.raises(IneligibleError) as exc_info:
            submit_loan_application(tables, profile.id, make_application(), now=now)

        assert exc_info.value.missing_requirements == ["ID verification approved"]
        assert tables.count(LOANS) == 0
        assert tables.count(ACTIVITY_LOG) == 0

    def test_eligibility_checked_before_fields(self, tables, now) -> None:
        """Test that an ineligible borrower hears about eligibility first."""
        profile = make_profile(profile_completed=False)
        tables.insert(PROFILES, to_row(profile))

        with pytest.raises(IneligibleError):
            submit_loan_application(tables, profile.id, make_application(amount=""), now=now)

    def test_invalid_application(self, tables, borrower, now) -> None:
        """Test that invalid fields are rejected without writing anything."""
        with pytest.raises(ValidationError) as exc_info:
            submit_loan_application(
                tables, borrower.id, make_application(amount="600000"), now=now
            )

        assert exc_info.value.fields == ["amount", "amount"]
        assert tables.count(LOANS) == 0
        assert tables.count(ACTIVITY_LOG) == 0

    def test_backend_unavailable(self, tables, borrower, now) -> None:
        """Test that a write failure propagates."""
        tables.unavailable.add(LOANS)

        with pytest.raises(BackendUnavailableError):
            submit_loan_application(tables, borrower.id, make_application(), now=now)
