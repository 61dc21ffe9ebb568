"""Loan portfolio scenario: borrowers, applications and admin decisions."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Any

from ecredit.config import LendingConfig
from ecredit.eligibility import evaluate_eligibility
from ecredit.generators import ApplicationGenerator, ProfileGenerator
from ecredit.models.lending import LoanAction, LoanStatus, UserProfile
from ecredit.serialization import to_json_dict, to_row, utcnow
from ecredit.services import AdminService, submit_loan_application
from ecredit.store.base import ACTIVITY_LOG, LOANS, PROFILES, Backend

logger = logging.getLogger(__name__)

# Admin actions that take a pending loan to each status
ACTION_PATHS: dict[LoanStatus, list[LoanAction]] = {
    LoanStatus.PENDING: [],
    LoanStatus.REJECTED: [LoanAction.REJECT],
    LoanStatus.APPROVED: [LoanAction.APPROVE],
    LoanStatus.ACTIVE: [LoanAction.APPROVE, LoanAction.DISBURSE],
    LoanStatus.COMPLETED: [LoanAction.APPROVE, LoanAction.DISBURSE, LoanAction.COMPLETE],
}

# Days after the previous step at which each action happens
ACTION_DELAYS = {
    LoanAction.APPROVE: (1, 3),
    LoanAction.REJECT: (1, 3),
    LoanAction.DISBURSE: (1, 2),
}

DEFAULT_OUTCOME_WEIGHTS = {
    LoanStatus.PENDING: 0.15,
    LoanStatus.REJECTED: 0.10,
    LoanStatus.APPROVED: 0.10,
    LoanStatus.ACTIVE: 0.35,
    LoanStatus.COMPLETED: 0.30,
}


class LoanPortfolioScenario:
    """Populate a backend with a realistic lending portfolio.

    This scenario creates:
    - Borrower profiles at every stage of account setup
    - One admin profile that reviews applications
    - Loan applications from eligible borrowers, submitted through the
      regular application path
    - Admin decisions moving loans through the lifecycle, each leaving
      its activity log entry
    """

    def __init__(
        self,
        backend: Backend,
        num_borrowers: int = 100,
        application_rate: float = 0.8,
        max_loans_per_borrower: int = 3,
        outcome_weights: dict[LoanStatus, float] | None = None,
        seed: int | None = None,
        *,
        config: LendingConfig | None = None,
    ) -> None:
        """Initialize loan portfolio scenario.

        Parameters
        ----------
        backend : Backend
            Backend to populate.
        num_borrowers : int
            Number of borrower profiles to generate.
        application_rate : float
            Share of eligible borrowers who apply (0.0 to 1.0).
        max_loans_per_borrower : int
            Upper bound of applications per applying borrower.
        outcome_weights : dict[LoanStatus, float] | None
            Relative weights of each loan's final status.
        seed : int | None
            Random seed for reproducibility.
        config : LendingConfig | None
            Product rules used for applications.
        """
        self.backend = backend
        self.num_borrowers = num_borrowers
        self.application_rate = application_rate
        self.max_loans_per_borrower = max_loans_per_borrower
        self.outcome_weights = outcome_weights or DEFAULT_OUTCOME_WEIGHTS
        self.seed = seed
        self.config = config or LendingConfig()
        self.admin_id: str | None = None

        if seed is not None:
            random.seed(seed)

        self._profile_gen = ProfileGenerator(seed=seed)
        self._application_gen = ApplicationGenerator(seed=seed, config=self.config)

    def generate(self, now: datetime | None = None) -> dict[str, Any]:
        """Generate all data for the scenario.

        Parameters
        ----------
        now : datetime | None
            Reference time; every generated timestamp is at or before it.

        Returns
        -------
        dict[str, Any]
            Row counts per table and loan counts per status.
        """
        now = now or utcnow()
        tables = self.backend.tables
        logger.info(
            "Starting loan portfolio scenario: %d borrowers, %.0f%% applying",
            self.num_borrowers,
            self.application_rate * 100,
        )

        admin = self._profile_gen.generate(progress=3, now=now)
        admin.is_admin = True
        tables.insert(PROFILES, to_row(admin))
        self.admin_id = admin.id
        admin_service = AdminService(self.backend, admin.id, config=self.config)

        borrowers = []
        for profile in self._profile_gen.generate_batch(self.num_borrowers, now=now):
            tables.insert(PROFILES, to_row(profile))
            borrowers.append(profile)
        logger.info("Generated %d borrower profiles", len(borrowers))

        eligible = [p for p in borrowers if evaluate_eligibility(p).can_apply]
        for profile in eligible:
            if random.random() >= self.application_rate:
                continue
            for _ in range(random.randint(1, self.max_loans_per_borrower)):
                self._generate_loan(admin_service, profile, now)

        summary = {
            "profiles": tables.count(PROFILES),
            "loans": tables.count(LOANS),
            "activity_log": tables.count(ACTIVITY_LOG),
            "loans_by_status": {
                status.value: tables.count(LOANS, {"status": status.value})
                for status in LoanStatus
            },
        }
        logger.info(
            "Generated %d loans for %d eligible borrowers with %d activity entries",
            summary["loans"],
            len(eligible),
            summary["activity_log"],
        )
        return summary

    def report(
        self,
        summary: dict[str, Any],
        now: datetime | None = None,
        recent: int = 5,
    ) -> dict[str, Any]:
        """JSON-ready report of a generated portfolio.

        Parameters
        ----------
        summary : dict[str, Any]
            Result of :meth:`generate`.
        now : datetime | None
            Report time.
        recent : int
            Number of newest loans to include with their borrowers.

        Returns
        -------
        dict[str, Any]
            Generation counts, admin dashboard totals and recent loans.

        Raises
        ------
        RuntimeError
            If :meth:`generate` has not been run.
        """
        if self.admin_id is None:
            raise RuntimeError("Generate the portfolio before reporting on it")
        admin_service = AdminService(self.backend, self.admin_id, config=self.config)
        return to_json_dict(
            {
                "generated_at": now or utcnow(),
                "seed": self.seed,
                "summary": summary,
                "dashboard": admin_service.dashboard_stats(),
                "recent_loans": admin_service.recent_loans(limit=recent),
            }
        )

    def _generate_loan(
        self,
        admin_service: AdminService,
        profile: UserProfile,
        now: datetime,
    ) -> None:
        """Submit one application and drive it to a drawn final status."""
        statuses = list(self.outcome_weights)
        final = random.choices(
            statuses, weights=[self.outcome_weights[s] for s in statuses], k=1
        )[0]

        earliest = profile.created_at + timedelta(days=1)
        applied_at = max(earliest, self._profile_gen.days_before(now, 7, 365))
        applied_at = min(applied_at, now)

        application = self._application_gen.generate(profile)
        loan = submit_loan_application(
            self.backend.tables, profile.id, application, now=applied_at, config=self.config
        )

        at = applied_at
        for action in ACTION_PATHS[final]:
            if action == LoanAction.COMPLETE:
                at = at + timedelta(days=30 * loan.term_months)
            else:
                at = self._profile_gen.days_after(at, *ACTION_DELAYS[action])
            # Stop where the timeline would run past the reference time
            if at > now:
                break
            admin_service.transition(loan.id, action, now=at)
