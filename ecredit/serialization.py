"""Conversion between domain dataclasses and backend rows."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from ecredit.exceptions import BackendUnavailableError


def to_row(obj: Any) -> dict[str, Any]:
    """Convert a flat dataclass into a backend row.

    Enums become their values; datetimes are kept as-is so the table
    client can adapt them natively.
    """
    if not is_dataclass(obj):
        raise TypeError(f"Cannot convert {type(obj).__name__} to a row")
    return {f.name: _row_value(getattr(obj, f.name)) for f in fields(obj)}


def _row_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def to_json_dict(obj: Any) -> dict:
    """Convert object to a JSON-safe dictionary."""
    if is_dataclass(obj):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value):
        return to_json_dict(value)
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse a backend timestamp into an aware UTC datetime.

    Hosted backends return ISO-8601 strings (sometimes with a trailing
    ``Z``); PostgreSQL returns datetimes. Naive values are taken as UTC.

    Raises
    ------
    BackendUnavailableError
        If the value is not a recognizable timestamp.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise BackendUnavailableError(f"Malformed timestamp from backend: {value!r}") from e
    if not isinstance(value, datetime):
        raise BackendUnavailableError(f"Malformed timestamp from backend: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_amount(value: Any, default: float | None = None) -> float | None:
    """Parse a numeric column (int, float, Decimal or numeric string)."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise BackendUnavailableError(f"Malformed amount from backend: {value!r}") from e


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
