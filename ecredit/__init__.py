"""Loan terms engine and backend data-access layer for eCredit."""

__version__ = "0.1.0"
