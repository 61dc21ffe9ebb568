"""Loan application form generator."""

from __future__ import annotations

import math
import random

from ecredit.config import LendingConfig
from ecredit.generators.base import BaseGenerator
from ecredit.generators.profile import INCOME_SOURCES
from ecredit.models.lending import EmploymentType, LoanApplication, UserProfile

PURPOSES = [
    "Business capital",
    "Home improvement",
    "Tuition fees",
    "Medical expenses",
    "Debt consolidation",
    "Gadget purchase",
    "Travel",
    "Emergency expenses",
]


class ApplicationGenerator(BaseGenerator):
    """Generate loan application forms consistent with a borrower's profile."""

    def __init__(
        self,
        seed: int | None = None,
        config: LendingConfig | None = None,
    ) -> None:
        super().__init__(seed)
        self.config = config or LendingConfig()

    def generate(self, profile: UserProfile) -> LoanApplication:
        """Generate an application the borrower could submit.

        The amount stays within the product range and the income multiple
        cap for the profile's declared monthly income.

        Parameters
        ----------
        profile : UserProfile
            Applying borrower.

        Returns
        -------
        LoanApplication
            Form fields as the borrower would type them.
        """
        income = profile.monthly_income or float(random.randint(15, 60) * 1000)
        ceiling = min(self.config.max_amount, income * self.config.max_income_multiple)
        # Whole hundreds, never above the cap
        low = math.ceil(self.config.min_amount / 100)
        high = max(low, math.floor(ceiling / 100))
        amount = random.randint(low, high) * 100

        return LoanApplication(
            amount=str(amount),
            purpose=random.choice(PURPOSES),
            monthly_income=f"{income:.2f}",
            employment_type=self._employment_type(profile).value,
            term_months=str(random.choice(self.config.term_options)),
            terms_accepted=True,
        )

    def _employment_type(self, profile: UserProfile) -> EmploymentType:
        candidates = [
            employment
            for employment, source in INCOME_SOURCES.items()
            if source == profile.main_income_source
        ]
        return random.choice(candidates or list(EmploymentType))
