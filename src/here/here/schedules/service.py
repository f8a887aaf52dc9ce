from __future__ import annotations

from datetime import date
from typing import List, Sequence

from ..core.enums import Role
from ..school_calendar.service import CalendarService
from ..sections.model import Section
from ..sections.repository import SectionRepository
from .factory import ScheduleRuleFactory


class ScheduleMatcher:
    """Answers "which of this person's sections meet on this date?"."""

    def __init__(
        self,
        calendar: CalendarService,
        sections: SectionRepository,
        *,
        rule_factory: ScheduleRuleFactory | None = None,
    ):
        self._calendar = calendar
        self._sections = sections
        self._rules = rule_factory or ScheduleRuleFactory()

    def _candidates(self, *, person_id: int, role: Role) -> Sequence[Section]:
        if role == Role.STUDENT:
            return self._sections.list_for_student(person_id)
        if role == Role.TEACHER:
            return self._sections.list_for_teacher(person_id)
        return []

    def active_sections(self, *, person_id: int, role: Role, on_date: date) -> List[Section]:
        day = self._calendar.resolve(on_date)
        if not day.is_school_day:
            return []

        meeting = [
            s
            for s in self._candidates(person_id=person_id, role=role)
            if self._rules.for_pattern(s.schedule_pattern).meets_on(section=s, day=day)
        ]
        return sorted(meeting, key=lambda s: (s.start_time, s.name))
