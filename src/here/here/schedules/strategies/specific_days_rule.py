from __future__ import annotations

from ...school_calendar.model import ResolvedDay
from ...sections.model import Section
from .base import ScheduleRule


class SpecificDaysRule(ScheduleRule):
    """Meets when the date's weekday is in the section's day set; never on weekends."""

    def meets_on(self, *, section: Section, day: ResolvedDay) -> bool:
        return section.days_of_week.includes_index(day.calendar_date.weekday())
