"""
utils/time_utils.py

Purpose: Timestamp helpers

- Record timestamps (naive UTC, millisecond precision)
- ISO round-tripping for the JSON file backend
- Client-facing UTC rendering with a Z suffix
"""

from datetime import datetime, timezone
from typing import Optional

def utc_now() -> datetime:
    """
    Current UTC time as a naive datetime truncated to milliseconds.
    MongoDB stores milliseconds, so both backends hand back the same value they stored.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)

def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes a datetime for the JSON file.
    """
    if not dt:
        return None
    return dt.isoformat(timespec="milliseconds")

def from_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parses a timestamp written by to_iso.
    """
    if not value:
        return None
    return datetime.fromisoformat(value)

def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Renders a stored (naive UTC) timestamp for clients, e.g. 2026-10-19T12:06:55.728Z.
    """
    if not dt:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"
