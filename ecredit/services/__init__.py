"""Borrower and admin operations built on the backend collaborators."""

from ecredit.services.admin import AdminService, DashboardStats, LoanWithBorrower
from ecredit.services.applications import submit_loan_application
from ecredit.services.history import LoanHistory, fetch_loan_history, sample_loan_history
from ecredit.services.profiles import (
    ensure_profile,
    get_profile,
    set_verification_status,
    update_profile,
    upload_avatar,
    upload_id_document,
)

__all__ = [
    "AdminService",
    "DashboardStats",
    "LoanHistory",
    "LoanWithBorrower",
    "ensure_profile",
    "fetch_loan_history",
    "get_profile",
    "sample_loan_history",
    "set_verification_status",
    "submit_loan_application",
    "update_profile",
    "upload_avatar",
    "upload_id_document",
]
