"""
Centralized DateTime Utilities
==============================

Provides consistent datetime handling across the entire application.
All datetime operations use the timezone configured in servicedesk.core.config.

Functions:
- now(): Returns timezone-aware datetime object in the application timezone
- utc_now(): Returns timezone-aware UTC datetime
- now_iso(): Returns ISO 8601 string
- parse_iso(): Safely parse ISO 8601 string to datetime
- to_iso(): Convert datetime object to ISO 8601 string
- ensure_aware(): Attach UTC to naive datetimes read back from MongoDB
"""
import logging
import zoneinfo
from datetime import datetime, tzinfo, timezone as dt_timezone
from typing import Optional

from servicedesk.core.config import get_settings

logger = logging.getLogger(__name__)


def _get_app_timezone() -> tzinfo:
    """
    Get the application timezone from config.
    Returns timezone object (defaults to UTC if invalid).
    """
    tz_str = get_settings().timezone

    if tz_str.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone '%s', falling back to UTC", tz_str)
        return dt_timezone.utc


def now() -> datetime:
    """
    Get current datetime with application-configured timezone.

    Returns:
        timezone-aware datetime object
    """
    return datetime.now(_get_app_timezone())


def utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


def now_iso() -> str:
    """
    Get current datetime as ISO 8601 string with application-configured timezone.

    Returns:
        ISO 8601 formatted string (e.g., "2026-01-24T10:30:00+03:00" or "2026-01-24T10:30:00Z")
    """
    return to_iso(now())


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """
    MongoDB hands back naive UTC datetimes unless the client is tz_aware.
    Treat naive values as UTC so they compare with now().
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt


def parse_iso(dt_str: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO 8601 string to datetime object.
    Handles both timezone-aware and naive strings.
    If string is naive, assumes application timezone.

    Args:
        dt_str: ISO 8601 string (e.g., "2026-01-24T10:30:00Z")

    Returns:
        timezone-aware datetime object, or None if parsing fails
    """
    if not dt_str:
        return None

    try:
        dt = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_get_app_timezone())
    return dt


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string.
    If datetime is naive, assumes application timezone.

    Args:
        dt: datetime object (timezone-aware or naive)

    Returns:
        ISO 8601 formatted string, or None if dt is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_get_app_timezone())

    # 'Z' suffix for UTC
    if dt.utcoffset() is not None and dt.utcoffset().total_seconds() == 0:
        return dt.astimezone(dt_timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return dt.replace(microsecond=0).isoformat()
