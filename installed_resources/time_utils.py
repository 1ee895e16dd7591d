"""
Shared datetime helpers.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

import pandas as pd


# .NET writes up to seven fractional digits; fromisoformat accepts six.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp and normalize it to UTC."""
    if not value:
        return None
    text = _FRACTION_RE.sub(r"\1", value.strip()).replace("Z", "+00:00")
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def parse_datetime(value: str) -> datetime:
    """Parse a timestamp in ISO 8601 or any format pandas understands.

    Raises:
        ValueError: If the value is empty or cannot be parsed
    """
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed
    if not value or not value.strip():
        raise ValueError("empty timestamp")
    try:
        timestamp = pd.to_datetime(value.strip())
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"unrecognized timestamp '{value}'") from e
    if pd.isna(timestamp):
        raise ValueError(f"unrecognized timestamp '{value}'")
    try:
        return ensure_utc(timestamp.to_pydatetime())
    except OverflowError as e:
        raise ValueError(f"timestamp '{value}' is out of range") from e
