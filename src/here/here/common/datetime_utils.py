from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_SCHOOL_TIMEZONE

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_iso_date(value: str) -> bool:
    """True if value is a real calendar date written as YYYY-MM-DD."""
    if not value or not _ISO_DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS as stored by MySQL) into a time."""
    v = (value or "").strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time string: {value!r}")


def format_clock(value: time) -> str:
    """12-hour clock label used in user messages, e.g. 8:45 AM."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


class SchoolClock:
    """Wall clock of the school's configured timezone.

    Returns naive datetimes/dates expressed in school-local time so they compare
    directly with section start/end times.
    """

    def __init__(self, timezone: Optional[str] = None):
        self._tz = ZoneInfo(timezone or DEFAULT_SCHOOL_TIMEZONE)

    @property
    def timezone(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()
