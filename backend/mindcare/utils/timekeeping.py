# mindcare/utils/timekeeping.py
"""Clock and date parsing helpers shared by the lifecycle and dashboard code.

Appointment ``date`` and ``time`` are wall-clock values in the clinic's
timezone. They are converted to UTC before any comparison with "now".
"""
import os
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

import pandas as pd

CLINIC_TIMEZONE = ZoneInfo(os.getenv("CLINIC_TIMEZONE", "UTC"))

_TIME_24H = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")
_TIME_12H = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: Optional[datetime] = None) -> str:
    moment = moment or utcnow()
    return moment.astimezone(timezone.utc).isoformat()


def clinic_today(now: Optional[datetime] = None) -> date:
    """Today's calendar date in the clinic timezone."""
    now = now or utcnow()
    return now.astimezone(CLINIC_TIMEZONE).date()


def parse_date(value: str) -> date:
    return date.fromisoformat(value.strip())


def parse_time(value: str) -> tuple:
    """Parse ``HH:MM`` or ``h:MM AM/PM`` into an (hour, minute) pair."""
    match = _TIME_24H.match(value)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
    else:
        match = _TIME_12H.match(value)
        if not match:
            raise ValueError(f"Unrecognised time format: {value!r}")
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12:
            raise ValueError(f"Hour out of range: {value!r}")
        meridiem = match.group(3).upper()
        hour = hour % 12 + (12 if meridiem == "PM" else 0)
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hour, minute


def normalize_time(value: str) -> str:
    hour, minute = parse_time(value)
    return f"{hour:02d}:{minute:02d}"


def appointment_datetime(date_value: str, time_value: str) -> datetime:
    """Combine stored date and time into an aware UTC datetime."""
    day = parse_date(date_value)
    hour, minute = parse_time(time_value)
    local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=CLINIC_TIMEZONE)
    return local.astimezone(timezone.utc)


def coerce_date(value: Any) -> Optional[date]:
    """Best-effort calendar date from an ISO string, ISO-with-time or date value.

    Returns None for anything that cannot be parsed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    stamp = pd.to_datetime(value, errors="coerce")
    if stamp is None or pd.isna(stamp):
        return None
    return stamp.date()


def hours_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier) / timedelta(hours=1)
