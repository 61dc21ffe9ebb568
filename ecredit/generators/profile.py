"""Borrower profile generator."""

from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime
from typing import Iterator

from ecredit.generators.base import BaseGenerator
from ecredit.models.base import Address
from ecredit.models.lending import EmploymentType, UserProfile, VerificationStatus
from ecredit.serialization import utcnow

PROVINCES = [
    "Metro Manila",
    "Cavite",
    "Laguna",
    "Bulacan",
    "Rizal",
    "Pampanga",
    "Batangas",
    "Cebu",
    "Iloilo",
    "Negros Occidental",
    "Davao del Sur",
    "Misamis Oriental",
]

INCOME_SOURCES = {
    EmploymentType.FULL_TIME: "Employment",
    EmploymentType.PART_TIME: "Employment",
    EmploymentType.SELF_EMPLOYED: "Business",
    EmploymentType.CONTRACT: "Employment",
    EmploymentType.RETIRED: "Pension",
}

PAYOUT_FREQUENCIES = ["Monthly", "Semi-monthly", "Weekly"]


class ProfileGenerator(BaseGenerator):
    """Generate borrower profiles at every stage of account setup.

    ``progress`` counts the leading setup sections a borrower has finished:
    0 nothing, 1 basic info, 2 address, 3 income, 4 ID uploaded, 5 ID verified.
    """

    EMPLOYMENT_TYPES = list(EmploymentType)
    EMPLOYMENT_WEIGHTS = [0.55, 0.12, 0.18, 0.10, 0.05]

    # Monthly income ranges by employment type (PHP)
    INCOME_RANGES = {
        EmploymentType.FULL_TIME: (15000, 150000),
        EmploymentType.PART_TIME: (8000, 40000),
        EmploymentType.SELF_EMPLOYED: (10000, 250000),
        EmploymentType.CONTRACT: (12000, 90000),
        EmploymentType.RETIRED: (8000, 60000),
    }

    PROGRESS_WEIGHTS = [0.05, 0.05, 0.05, 0.10, 0.15, 0.60]
    REJECTED_ID_RATE = 0.2

    def generate(self, progress: int | None = None, now: datetime | None = None) -> UserProfile:
        """Generate a single profile.

        Parameters
        ----------
        progress : int | None
            Number of finished setup sections (0-5); drawn from
            ``PROGRESS_WEIGHTS`` when None.
        now : datetime | None
            Reference time; sign-up happens up to two years before it.

        Returns
        -------
        UserProfile
            Profile with completion state derived from its fields.
        """
        if progress is None:
            progress = random.choices(range(6), weights=self.PROGRESS_WEIGHTS, k=1)[0]
        now = now or utcnow()
        return self._generate_one(progress, now)

    def generate_batch(self, count: int, now: datetime | None = None) -> Iterator[UserProfile]:
        """Generate multiple profiles.

        Parameters
        ----------
        count : int
            Number of profiles to generate.
        now : datetime | None
            Reference time for sign-up dates.

        Yields
        ------
        UserProfile
            Generated profiles.
        """
        for _ in range(count):
            yield self.generate(now=now)

    def generate_address(self) -> Address:
        return Address(
            house_number=f"{random.randint(1, 999)} {self.fake.street_name()}",
            province=random.choice(PROVINCES),
            city=self.fake.city(),
            barangay=f"Brgy. {self.fake.last_name()}",
            postal_code=f"{random.randint(1000, 9800):04d}",
            landline=random.choice(["", "", f"02-{random.randint(8000000, 8999999)}"]),
            work_from_home=random.random() < 0.15,
        )

    def _generate_one(self, progress: int, now: datetime) -> UserProfile:
        employment = random.choices(
            self.EMPLOYMENT_TYPES, weights=self.EMPLOYMENT_WEIGHTS, k=1
        )[0]
        low, high = self.INCOME_RANGES[employment]
        # Log-normal distribution for income (more realistic)
        income = max(low, min(random.lognormvariate(mu=10.3, sigma=0.6), high))

        # Credit score based on income and employment
        base_score = 520 + (60 if employment == EmploymentType.FULL_TIME else 20)
        income_factor = min(150, int(income / 1000))
        credit_score = min(850, max(300, base_score + income_factor + random.randint(-60, 60)))

        created_at = self.days_before(now, 30, 2 * 365)
        profile = UserProfile(
            id=self.fake.uuid4(),
            email=self.fake.email(),
            credit_score=credit_score,
            loan_limit=float(round(income * 5, -2)),
            created_at=created_at,
        )

        if progress >= 1:
            profile = replace(profile, full_name=self.fake.name(), phone=self.fake.phone_number())
        if progress >= 2:
            address = self.generate_address()
            profile = replace(
                profile,
                house_number=address.house_number,
                province=address.province,
                city=address.city,
                barangay=address.barangay,
                postal_code=address.postal_code,
                landline=address.landline,
                work_from_home=address.work_from_home,
            )
        if progress >= 3:
            profile = replace(
                profile,
                main_income_source=INCOME_SOURCES[employment],
                business_name=(
                    self.fake.company() if employment == EmploymentType.SELF_EMPLOYED else None
                ),
                payout_frequency=random.choice(PAYOUT_FREQUENCIES),
                payout_days=random.choice(["15, 30", "5, 20", "30"]),
                employment_company=self.fake.company(),
                employment_position=self.fake.job(),
                monthly_income=round(income, 2),
            )
        if progress >= 4:
            status = VerificationStatus.PENDING
            if progress == 4 and random.random() < self.REJECTED_ID_RATE:
                status = VerificationStatus.REJECTED
            profile = replace(
                profile,
                id_document_url=f"https://example.invalid/id-documents/{profile.id}-id.jpeg",
                id_verification_status=status,
            )
        if progress >= 5:
            profile = replace(profile, id_verification_status=VerificationStatus.VERIFIED)

        return replace(
            profile,
            profile_completed=profile.is_complete,
            profile_completion_step=profile.completion_step(),
            updated_at=self.days_after(created_at, 0, 20, limit=now),
        )
