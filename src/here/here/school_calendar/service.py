from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.constants import DAY_OFF_NOTE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .calendar_import import CalendarRow, build_calendar_days, read_calendar_csv
from .model import CalendarDay, CalendarImportResult, ResolvedDay
from .repository import CalendarRepository

logger = logging.getLogger(__name__)


class CalendarService:
    """Calendar resolution plus the admin operations that maintain it."""

    def __init__(self, calendar: CalendarRepository):
        self._calendar = calendar

    def resolve(self, calendar_date: date) -> ResolvedDay:
        day = self._calendar.get_by_date(calendar_date)
        if day is None:
            return ResolvedDay.default(calendar_date)
        return ResolvedDay(
            calendar_date=calendar_date,
            is_school_day=day.is_school_day,
            ab_designation=day.ab_designation,
        )

    def list_days(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CalendarDay]:
        return self._calendar.list_range(start=start, end=end)

    def replace_calendar(self, *, current_role: Role, entries: Sequence[tuple[str, str]]) -> CalendarImportResult:
        """Replace the whole calendar with (YYYY-MM-DD, A|B|OFF) pairs."""
        self._require_admin(current_role)
        rows = [(i, d, t) for i, (d, t) in enumerate(entries, start=1)]
        return self._apply(rows)

    def import_csv(self, *, current_role: Role, text: str) -> CalendarImportResult:
        self._require_admin(current_role)
        rows, errors = read_calendar_csv(text)
        if errors:
            return CalendarImportResult(success=False, errors=errors)
        return self._apply(rows)

    def mark_day_off(self, *, current_role: Role, calendar_date: date) -> None:
        self._require_admin(current_role)
        self._calendar.upsert(
            CalendarDay(calendar_date=calendar_date, is_school_day=False, ab_designation=None, notes=DAY_OFF_NOTE)
        )
        logger.info("Marked %s as a day off", calendar_date.isoformat())

    def unmark_day_off(self, *, current_role: Role, calendar_date: date) -> None:
        """Drop the explicit record so the date falls back to the default school day."""
        self._require_admin(current_role)
        removed = self._calendar.delete_by_date(calendar_date)
        logger.info("Cleared calendar record for %s (existed=%s)", calendar_date.isoformat(), removed)

    def _apply(self, rows: Sequence[CalendarRow]) -> CalendarImportResult:
        if not rows:
            return CalendarImportResult(success=False, errors=["No calendar entries supplied"])

        days, errors = build_calendar_days(rows)
        if errors:
            return CalendarImportResult(success=False, errors=errors)

        imported = self._calendar.replace_all(days)
        logger.info("Calendar replaced with %d days", imported)
        return CalendarImportResult(success=True, imported=imported, skipped=0)

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to edit the calendar")
