"""Calendar CSV parsing and row validation.

Format: a header row naming ``date`` and ``day_type`` columns (any order,
case-insensitive), then one row per date. ``day_type`` is A, B or off.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable

from ..common.datetime_utils import is_iso_date, parse_iso_date
from ..core.constants import DAY_OFF_NOTE
from ..core.enums import ABDesignation, DayType
from .model import CalendarDay

CalendarRow = tuple[int, str, str]


def read_calendar_csv(text: str) -> tuple[list[CalendarRow], list[str]]:
    """Split CSV text into (row_number, date, day_type) tuples.

    Row numbers are 1-based physical lines (the line a record ends on), the
    header being row 1. Blank lines are skipped.
    """
    reader = csv.reader(io.StringIO(text or ""))
    parsed = [(reader.line_num, values) for values in reader if any(v.strip() for v in values)]
    if len(parsed) < 2:
        return [], ["CSV file is empty or invalid"]

    headers = [h.strip().lower() for h in parsed[0][1]]
    if "date" not in headers or "day_type" not in headers:
        return [], ['CSV must have "date" and "day_type" columns']

    date_index = headers.index("date")
    type_index = headers.index("day_type")

    rows: list[CalendarRow] = []
    for row_number, values in parsed[1:]:
        date_text = values[date_index].strip() if date_index < len(values) else ""
        type_text = values[type_index].strip() if type_index < len(values) else ""
        rows.append((row_number, date_text, type_text))
    return rows, []


def build_calendar_days(rows: Iterable[CalendarRow]) -> tuple[list[CalendarDay], list[str]]:
    """Validate every row; the caller must apply nothing if errors is non-empty."""
    days: list[CalendarDay] = []
    errors: list[str] = []
    seen: set[str] = set()

    for row_number, date_text, type_text in rows:
        if not is_iso_date(date_text):
            errors.append(f'Row {row_number}: Invalid date format "{date_text}" (expected YYYY-MM-DD)')
            continue

        day_type_s = (type_text or "").strip().upper()
        try:
            day_type = DayType(day_type_s)
        except ValueError:
            errors.append(f'Row {row_number}: Invalid day_type "{day_type_s}" (expected A, B, or off)')
            continue

        if date_text in seen:
            errors.append(f'Row {row_number}: Duplicate date "{date_text}"')
            continue
        seen.add(date_text)

        days.append(_to_calendar_day(date_text, day_type))

    return days, errors


def _to_calendar_day(date_text: str, day_type: DayType) -> CalendarDay:
    if day_type == DayType.OFF:
        return CalendarDay(calendar_date=parse_iso_date(date_text), is_school_day=False, notes=DAY_OFF_NOTE)

    ab = ABDesignation.A_DAY if day_type == DayType.A else ABDesignation.B_DAY
    return CalendarDay(calendar_date=parse_iso_date(date_text), is_school_day=True, ab_designation=ab)
