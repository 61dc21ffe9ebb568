"""Lending scenarios for populating a backend with synthetic data."""

from ecredit.scenarios.loan_portfolio import LoanPortfolioScenario

__all__ = ["LoanPortfolioScenario"]
