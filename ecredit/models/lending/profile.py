"""Borrower profile model for lending domain."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from ecredit.exceptions import BackendUnavailableError
from ecredit.models.base import Address
from ecredit.models.lending.enums import VerificationStatus
from ecredit.serialization import parse_amount, parse_timestamp

MAX_COMPLETION_STEP = 5

BASIC_INFO_FIELDS = ("full_name", "phone")
ADDRESS_FIELDS = ("house_number", "province", "city", "barangay", "postal_code")
INCOME_TEXT_FIELDS = ("employment_company", "employment_position")


def _filled(value: str | None) -> bool:
    return bool((value or "").strip())


@dataclass
class UserProfile:
    """Borrower identity plus underwriting attributes (one ``profiles`` row)."""

    id: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    credit_score: int = 0
    loan_limit: float = 0.0
    avatar_url: str | None = None
    id_document_url: str | None = None
    id_verification_status: VerificationStatus = VerificationStatus.NOT_UPLOADED
    # Address
    house_number: str | None = None
    province: str | None = None
    city: str | None = None
    barangay: str | None = None
    postal_code: str | None = None
    landline: str | None = None
    work_from_home: bool = False
    # Income
    main_income_source: str | None = None
    business_name: str | None = None
    payout_frequency: str | None = None
    payout_days: str | None = None
    employment_company: str | None = None
    employment_position: str | None = None
    monthly_income: float = 0.0
    # Completion
    profile_completion_step: int = 1
    profile_completed: bool = False
    is_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> UserProfile:
        """Build a profile from a backend row, ignoring unknown columns."""
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in row.items() if k in known}
        try:
            data["id_verification_status"] = VerificationStatus(
                data.get("id_verification_status") or VerificationStatus.NOT_UPLOADED
            )
        except ValueError as e:
            raise BackendUnavailableError(
                f"Unknown verification status in profile {row.get('id')}: "
                f"{row.get('id_verification_status')!r}"
            ) from e
        try:
            data["credit_score"] = int(data.get("credit_score") or 0)
            data["profile_completion_step"] = int(data.get("profile_completion_step") or 1)
        except (TypeError, ValueError) as e:
            raise BackendUnavailableError(f"Malformed profile row {row.get('id')}: {e}") from e
        data["loan_limit"] = parse_amount(data.get("loan_limit"), 0.0)
        data["monthly_income"] = parse_amount(data.get("monthly_income"), 0.0)
        data["profile_completed"] = bool(data.get("profile_completed"))
        data["work_from_home"] = bool(data.get("work_from_home"))
        data["is_admin"] = bool(data.get("is_admin"))
        data["created_at"] = parse_timestamp(data.get("created_at"))
        data["updated_at"] = parse_timestamp(data.get("updated_at"))
        return cls(**data)

    @property
    def address(self) -> Address:
        return Address(
            house_number=self.house_number or "",
            province=self.province or "",
            city=self.city or "",
            barangay=self.barangay or "",
            postal_code=self.postal_code or "",
            landline=self.landline or "",
            work_from_home=self.work_from_home,
        )

    @property
    def basic_info_complete(self) -> bool:
        return all(_filled(getattr(self, name)) for name in BASIC_INFO_FIELDS)

    @property
    def income_complete(self) -> bool:
        return (self.monthly_income or 0) > 0 and all(
            _filled(getattr(self, name)) for name in INCOME_TEXT_FIELDS
        )

    @property
    def is_complete(self) -> bool:
        """Every setup step's required fields are filled and income is positive."""
        return self.basic_info_complete and self.address.is_complete and self.income_complete

    def missing_fields(self) -> list[str]:
        """Names of required profile fields that are still empty."""
        missing = [
            name
            for name in (*BASIC_INFO_FIELDS, *ADDRESS_FIELDS, *INCOME_TEXT_FIELDS)
            if not _filled(getattr(self, name))
        ]
        if (self.monthly_income or 0) <= 0:
            missing.append("monthly_income")
        return missing

    def completion_step(self) -> int:
        """Setup step the borrower is on, 1 through 5.

        Sections are satisfied in order: basic info, address, income,
        ID uploaded, ID verified. The step is one past the last satisfied
        leading section.
        """
        sections = (
            self.basic_info_complete,
            self.address.is_complete,
            self.income_complete,
            bool(self.id_document_url),
            self.id_verification_status == VerificationStatus.VERIFIED,
        )
        step = 1
        for done in sections:
            if not done:
                break
            step += 1
        return min(step, MAX_COMPLETION_STEP)
