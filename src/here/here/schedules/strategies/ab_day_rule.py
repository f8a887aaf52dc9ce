from __future__ import annotations

from ...core.enums import ABDesignation
from ...school_calendar.model import ResolvedDay
from ...sections.model import Section
from .base import ScheduleRule


class ABDayRule(ScheduleRule):
    def __init__(self, designation: ABDesignation):
        self._designation = designation

    def meets_on(self, *, section: Section, day: ResolvedDay) -> bool:
        # Undesignated days match neither rotation.
        return day.ab_designation == self._designation
