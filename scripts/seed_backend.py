#!/usr/bin/env python3
"""Seed a lending backend with a synthetic loan portfolio.

Generates borrower profiles, submits loan applications for eligible
borrowers and applies admin decisions, writing everything through the
same services the app uses:
- memory: in-process tables, useful for a quick look at the data
- postgres: creates the schema (if needed) and loads the portfolio
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ecredit.config import BACKEND_KINDS, EcreditConfig
from ecredit.exceptions import EcreditError
from ecredit.logging import setup_logging
from ecredit.presentation import format_currency
from ecredit.scenarios import LoanPortfolioScenario
from ecredit.store import build_backend

logger = logging.getLogger(__name__)


def print_summary(report: dict, elapsed: float) -> None:
    """Print a summary of the seeded data."""
    summary = report["summary"]
    stats = report["dashboard"]
    print()
    print("=" * 60)
    print("SEED COMPLETE")
    print("=" * 60)
    print(f"  {'profiles':<20} {summary['profiles']:>10,}")
    print(f"  {'loans':<20} {summary['loans']:>10,}")
    print(f"  {'activity_log':<20} {summary['activity_log']:>10,}")
    print("-" * 60)
    for status, count in summary["loans_by_status"].items():
        print(f"  loans {status:<14} {count:>10,}")
    print("-" * 60)
    print(f"  {'total loan amount':<20} {format_currency(stats['total_loan_amount']):>14}")
    print(f"  {'total revenue':<20} {format_currency(stats['total_revenue']):>14}")
    print(f"  {'elapsed':<20} {elapsed:>13.1f}s")
    print("=" * 60)


def main() -> None:
    """Main entry point."""
    config = EcreditConfig.from_env()

    parser = argparse.ArgumentParser(description="Seed a lending backend with synthetic data")
    parser.add_argument(
        "--borrowers",
        type=int,
        default=100,
        help="Number of borrower profiles to generate (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed for reproducibility (default: SEED or 42)",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=BACKEND_KINDS,
        default=config.backend,
        help="Backend to seed (default: ECREDIT_BACKEND or memory)",
    )
    parser.add_argument(
        "--application-rate",
        type=float,
        default=0.8,
        help="Share of eligible borrowers who apply for a loan (default: 0.8)",
    )
    parser.add_argument(
        "--skip-schema",
        action="store_true",
        help="Do not create the PostgreSQL schema before loading",
    )
    parser.add_argument(
        "--output",
        type=str,
        choices=["table", "json"],
        default="table",
        help="Summary format printed when done (default: table)",
    )
    args = parser.parse_args()

    if not 0.0 <= args.application_rate <= 1.0:
        parser.error("--application-rate must be between 0 and 1")

    # Keep stdout clean for the JSON report
    log_stream = sys.stderr if args.output == "json" else None
    setup_logging(level=config.log_level, format_type=config.log_format, stream=log_stream)
    config.backend = args.backend

    logger.info("=" * 60)
    logger.info("Lending backend seed")
    logger.info("=" * 60)
    logger.info("Backend: %s", args.backend)
    logger.info("Borrowers: %d", args.borrowers)
    logger.info("Seed: %d", args.seed)

    start = time.perf_counter()
    try:
        backend = build_backend(config)
        if args.backend == "postgres" and not args.skip_schema:
            backend.tables.create_schema()

        scenario = LoanPortfolioScenario(
            backend,
            num_borrowers=args.borrowers,
            application_rate=args.application_rate,
            seed=args.seed,
            config=config.lending,
        )
        summary = scenario.generate()
        report = scenario.report(summary)
    except EcreditError as e:
        logger.error("Seeding failed: %s", e)
        sys.exit(1)

    if args.output == "json":
        print(json.dumps(report, indent=2))
    else:
        print_summary(report, time.perf_counter() - start)


if __name__ == "__main__":
    main()
