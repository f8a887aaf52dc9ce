from __future__ import annotations

from abc import ABC, abstractmethod

from ...school_calendar.model import ResolvedDay
from ...sections.model import Section


class ScheduleRule(ABC):
    """Strategy Pattern: decide whether a section meets on a resolved school day."""

    @abstractmethod
    def meets_on(self, *, section: Section, day: ResolvedDay) -> bool:
        raise NotImplementedError
