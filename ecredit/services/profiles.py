"""Borrower profile operations: creation, setup steps and ID documents."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any

from ecredit.config import StorageConfig
from ecredit.eligibility import Violation
from ecredit.exceptions import BackendUnavailableError, NotFoundError, ValidationError
from ecredit.models.lending import UserProfile, VerificationStatus
from ecredit.serialization import parse_amount, to_row, utcnow
from ecredit.store.base import PROFILES, AuthSession, Backend, TableClient

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "full_name",
        "phone",
        "avatar_url",
        "house_number",
        "province",
        "city",
        "barangay",
        "postal_code",
        "landline",
        "work_from_home",
        "main_income_source",
        "business_name",
        "payout_frequency",
        "payout_days",
        "employment_company",
        "employment_position",
        "monthly_income",
    }
)

DEFAULT_IMAGE_EXTENSION = "jpeg"


def get_profile(tables: TableClient, user_id: str) -> UserProfile:
    """Load a profile.

    Raises
    ------
    NotFoundError
        If the user has no profile row.
    """
    row = tables.get(PROFILES, user_id)
    if row is None:
        raise NotFoundError(PROFILES, user_id)
    return UserProfile.from_row(row)


def ensure_profile(
    tables: TableClient,
    session: AuthSession,
    now: datetime | None = None,
) -> UserProfile:
    """Return the signed-in user's profile, creating it on first sign-in."""
    row = tables.get(PROFILES, session.user_id)
    if row is not None:
        return UserProfile.from_row(row)

    profile = UserProfile(id=session.user_id, email=session.email, created_at=now or utcnow())
    stored = tables.insert(PROFILES, to_row(profile))
    logger.info("Created profile for %s", session.user_id)
    return UserProfile.from_row(stored)


def _with_completion(profile: UserProfile) -> UserProfile:
    return replace(
        profile,
        profile_completed=profile.is_complete,
        profile_completion_step=profile.completion_step(),
    )


def _write_profile(
    tables: TableClient,
    profile: UserProfile,
    values: dict[str, Any],
    now: datetime,
) -> UserProfile:
    """Persist ``values`` plus the recomputed completion state."""
    profile = _with_completion(replace(profile, updated_at=now, **values))
    changes = {
        **values,
        "profile_completed": profile.profile_completed,
        "profile_completion_step": profile.profile_completion_step,
        "updated_at": now,
    }
    rows = tables.update(PROFILES, changes, filters={"id": profile.id})
    if not rows:
        raise NotFoundError(PROFILES, profile.id)
    return UserProfile.from_row(rows[0])


def update_profile(
    tables: TableClient,
    user_id: str,
    updates: dict[str, Any],
    now: datetime | None = None,
) -> UserProfile:
    """Apply borrower-editable field updates from a setup or edit step.

    ``profile_completed`` and ``profile_completion_step`` are derived from
    the resulting fields, never taken from the caller.

    Raises
    ------
    ValidationError
        For fields the borrower may not edit or a non-numeric / negative income.
    NotFoundError
        If the user has no profile row.
    """
    violations = [
        Violation(name, "editable", f"{name} cannot be changed from the profile form.")
        for name in updates
        if name not in EDITABLE_FIELDS
    ]
    values = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
    if "monthly_income" in values:
        try:
            income = parse_amount(values["monthly_income"], 0.0)
        except BackendUnavailableError:
            income = None
        if income is None or not math.isfinite(income) or income < 0:
            violations.append(
                Violation("monthly_income", "numeric", "Monthly income must be a positive number.")
            )
        else:
            values["monthly_income"] = income
    if violations:
        raise ValidationError(violations)

    profile = get_profile(tables, user_id)
    updated = _write_profile(tables, profile, values, now or utcnow())
    logger.info(
        "Updated profile %s (step %d, complete=%s)",
        user_id,
        updated.profile_completion_step,
        updated.profile_completed,
    )
    return updated


def _normalize_extension(extension: str | None) -> str:
    ext = (extension or "").lower().lstrip(".")
    return ext if ext.isalnum() else DEFAULT_IMAGE_EXTENSION


def upload_id_document(
    backend: Backend,
    user_id: str,
    data: bytes,
    extension: str | None = None,
    storage: StorageConfig | None = None,
    now: datetime | None = None,
) -> UserProfile:
    """Store an ID image and submit it for verification.

    The blob goes to the ID bucket under ``<user>-id-<epoch ms>.<ext>``; the
    profile records its public URL and moves to ``pending`` review.
    """
    storage = storage or StorageConfig()
    now = now or utcnow()
    profile = get_profile(backend.tables, user_id)

    ext = _normalize_extension(extension)
    key = f"{user_id}-id-{int(now.timestamp() * 1000)}.{ext}"
    backend.storage.upload(storage.id_document_bucket, key, data, content_type=f"image/{ext}")
    url = backend.storage.public_url(storage.id_document_bucket, key)

    logger.info("ID document uploaded for %s", user_id)
    return _write_profile(
        backend.tables,
        profile,
        {"id_document_url": url, "id_verification_status": VerificationStatus.PENDING.value},
        now,
    )


def upload_avatar(
    backend: Backend,
    user_id: str,
    data: bytes,
    extension: str | None = None,
    storage: StorageConfig | None = None,
    now: datetime | None = None,
) -> UserProfile:
    """Store a profile picture and record its public URL."""
    storage = storage or StorageConfig()
    now = now or utcnow()
    profile = get_profile(backend.tables, user_id)

    ext = _normalize_extension(extension)
    key = f"{user_id}-{int(now.timestamp() * 1000)}.{ext}"
    backend.storage.upload(storage.avatar_bucket, key, data, content_type=f"image/{ext}")
    url = backend.storage.public_url(storage.avatar_bucket, key)
    return _write_profile(backend.tables, profile, {"avatar_url": url}, now)


def set_verification_status(
    tables: TableClient,
    user_id: str,
    status: VerificationStatus | str,
    now: datetime | None = None,
) -> UserProfile:
    """Record the outcome of an ID document review."""
    try:
        status = VerificationStatus(status)
    except ValueError:
        raise ValidationError(
            [Violation("id_verification_status", "choice", f"Unknown status: {status}")]
        ) from None

    profile = get_profile(tables, user_id)
    if status != VerificationStatus.NOT_UPLOADED and not profile.id_document_url:
        raise ValidationError(
            [
                Violation(
                    "id_verification_status",
                    "document",
                    "No ID document has been uploaded for review.",
                )
            ]
        )

    logger.info("ID verification for %s set to %s", user_id, status.value)
    return _write_profile(tables, profile, {"id_verification_status": status.value}, now or utcnow())
