from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta

from ...sections.model import Section
from ..model import EligibilityDecision, SectionStatus


class EligibilityRule(ABC):
    """Strategy Pattern: one student action's time window and state checks."""

    @abstractmethod
    def evaluate(self, *, section: Section, now: datetime, state: SectionStatus) -> EligibilityDecision:
        raise NotImplementedError

    @staticmethod
    def _at(day: date, section_time, *, minus_minutes: int = 0) -> datetime:
        return datetime.combine(day, section_time) - timedelta(minutes=minus_minutes)
