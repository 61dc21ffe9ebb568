"""Logging setup for ecredit services and scripts."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Record attributes lifted into JSON output when passed via ``extra=``
CONTEXT_FIELDS = ("user_id", "loan_id", "admin_id", "action", "status", "amount")

QUIET_LOGGERS = ("psycopg", "faker")


def loan_context(**fields: Any) -> dict[str, Any]:
    """Build an ``extra=`` mapping for a log call, dropping unset fields.

    Enum values are logged by value.

    Examples
    --------
    >>> logger.info("Loan approved", extra=loan_context(loan_id=loan.id, status=loan.status))
    """
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown log context fields: {sorted(unknown)}")
    return {
        name: getattr(value, "value", value)
        for name, value in fields.items()
        if value is not None
    }


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger for ecredit.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        "standard" for human-readable lines, "json" for one object per line.
    stream : TextIO | None
        Destination; stdout when None.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("ecredit").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """Format records as JSON objects carrying loan and user context."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)
