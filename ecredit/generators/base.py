"""Base generator class for lending data generators."""

from __future__ import annotations

import random
from abc import ABC
from datetime import datetime, timedelta

from faker import Faker

SECONDS_PER_DAY = 86_400


class BaseGenerator(ABC):
    """Base class for lending data generators.

    Holds a Faker instance for Philippine names, phone numbers and
    addresses, and seeds both Faker and ``random`` so a seeded run
    reproduces the same borrowers and loans.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_PH``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_PH") -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    def days_before(self, now: datetime, min_days: int, max_days: int) -> datetime:
        """Random moment between ``max_days`` and ``min_days`` days before ``now``."""
        seconds = random.randint(min_days * SECONDS_PER_DAY, max_days * SECONDS_PER_DAY)
        return now - timedelta(seconds=seconds)

    def days_after(
        self,
        start: datetime,
        min_days: int,
        max_days: int,
        limit: datetime | None = None,
    ) -> datetime:
        """Random moment ``min_days`` to ``max_days`` days after ``start``, capped at ``limit``."""
        moment = start + timedelta(
            seconds=random.randint(min_days * SECONDS_PER_DAY, max_days * SECONDS_PER_DAY)
        )
        if limit is not None and moment > limit:
            return limit
        return moment
