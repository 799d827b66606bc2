"""Timestamp utilities for consistent datetime handling across scans."""

from datetime import datetime, timezone
from typing import Any

from common_lib.logger import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_datetime(value: Any) -> datetime:
    """
    Convert various timestamp formats to a UTC datetime.

    Args:
        value: A datetime object, ISO format string, or other value

    Returns:
        Timezone-aware datetime in UTC.
        Naive datetimes are assumed to be UTC; unparsable values yield the current time.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            logger.warning("Invalid datetime format encountered: %s, using current time", value)
    return utcnow()


def normalize_timestamp(value: Any) -> str:
    """
    Convert various timestamp formats to an ISO 8601 UTC string ending in "Z".

    Args:
        value: A datetime object, ISO format string, or other value

    Returns:
        ISO format string (YYYY-MM-DDTHH:MM:SS[.ffffff]Z)
    """
    moment = ensure_datetime(value).astimezone(timezone.utc)
    return moment.isoformat().replace("+00:00", "Z")
