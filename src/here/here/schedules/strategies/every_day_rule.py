from __future__ import annotations

from ...school_calendar.model import ResolvedDay
from ...sections.model import Section
from .base import ScheduleRule


class EveryDayRule(ScheduleRule):
    def meets_on(self, *, section: Section, day: ResolvedDay) -> bool:
        return True
