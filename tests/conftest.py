"""Pytest configuration and fixtures."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ecredit.models.lending import UserProfile, VerificationStatus
from ecredit.serialization import to_row
from ecredit.store import InMemoryAuthClient, InMemoryTableClient, LocalObjectStorage
from ecredit.store.base import LOANS, PROFILES, Backend

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_profile(user_id: str = "user-001", **overrides) -> UserProfile:
    """A borrower who has finished setup and passed ID verification."""
    profile = UserProfile(
        id=user_id,
        email=f"{user_id}@example.com",
        full_name="Maria Santos",
        phone="09171234567",
        credit_score=700,
        loan_limit=50000.0,
        id_document_url=f"https://cdn.test/storage/id-documents/{user_id}-id-1.jpeg",
        id_verification_status=VerificationStatus.VERIFIED,
        house_number="12 Mabini St",
        province="Laguna",
        city="Santa Rosa",
        barangay="Brgy. Balibago",
        postal_code="4026",
        main_income_source="Employment",
        employment_company="Acme Corp",
        employment_position="Analyst",
        monthly_income=30000.0,
        profile_completion_step=5,
        profile_completed=True,
        created_at=NOW - timedelta(days=90),
    )
    return replace(profile, **overrides)


def make_loan_row(
    loan_id: str = "loan-001",
    user_id: str = "user-001",
    status: str = "pending",
    **overrides,
) -> dict:
    row = {
        "id": loan_id,
        "user_id": user_id,
        "amount": 10000.0,
        "interest_rate": 0.15,
        "term_months": 2,
        "monthly_payment": 6500.0,
        "status": status,
        "application_date": NOW - timedelta(days=3),
        "approval_date": None,
        "disbursement_date": None,
        "completion_date": None,
        "purpose": "Business capital",
        "employment_type": "Full-time",
        "monthly_income": 30000.0,
    }
    row.update(overrides)
    return row


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def tables() -> InMemoryTableClient:
    return InMemoryTableClient()


@pytest.fixture
def backend(tables: InMemoryTableClient, tmp_path: Path) -> Backend:
    """In-memory tables with filesystem storage under a temp dir."""
    storage = LocalObjectStorage(tmp_path / "storage", "https://cdn.test/storage")
    return Backend(tables=tables, storage=storage, auth=InMemoryAuthClient(clock=lambda: NOW))


@pytest.fixture
def borrower(tables: InMemoryTableClient) -> UserProfile:
    """An eligible borrower stored in the profiles table."""
    profile = make_profile()
    tables.insert(PROFILES, to_row(profile))
    return profile


@pytest.fixture
def admin(tables: InMemoryTableClient) -> UserProfile:
    """An admin user stored in the profiles table."""
    profile = make_profile("admin-001", full_name="Admin User", is_admin=True)
    tables.insert(PROFILES, to_row(profile))
    return profile


@pytest.fixture
def pending_loan(tables: InMemoryTableClient, borrower: UserProfile) -> dict:
    """A pending loan owned by ``borrower``."""
    return tables.insert(LOANS, make_loan_row(user_id=borrower.id))
