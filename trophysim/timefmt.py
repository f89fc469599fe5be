"""Timestamps formatted in local time with milliseconds."""

from __future__ import annotations

from datetime import datetime


def format_time(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as local 'YYYY-MM-DD HH:MM:SS.mmm'."""
    if moment is None:
        moment = datetime.now()
    if moment.tzinfo is not None:
        try:
            moment = moment.astimezone()
        except (OverflowError, OSError, ValueError):
            return "TIMESTAMP_ERROR"
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"