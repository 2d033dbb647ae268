"""Quiet hours check (HH:MM bounds, end exclusive, may span midnight)."""

from datetime import datetime


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def is_in_quiet_hours(moment: datetime, quiet_start: str, quiet_end: str) -> bool:
    now = moment.hour * 60 + moment.minute
    start = _minutes(quiet_start)
    end = _minutes(quiet_end)
    if start == end:
        return False
    if start < end:
        return start <= now < end
    # Spans midnight, e.g. 22:00-07:00
    return now >= start or now < end
