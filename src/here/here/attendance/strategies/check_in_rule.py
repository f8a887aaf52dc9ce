from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_clock
from ...sections.model import Section
from ..model import EligibilityDecision, SectionStatus
from .base import EligibilityRule


class CheckInRule(EligibilityRule):
    """Check-in is open from ``lead_minutes`` before start until the section ends."""

    def __init__(self, lead_minutes: int):
        self._lead = int(lead_minutes)

    def evaluate(self, *, section: Section, now: datetime, state: SectionStatus) -> EligibilityDecision:
        if not section.requires_check_in:
            return EligibilityDecision.deny("This section does not require check-in")
        if state.has_checked_in:
            return EligibilityDecision.deny("Already checked in today")

        opens_at = self._at(now.date(), section.start_time, minus_minutes=self._lead)
        closes_at = self._at(now.date(), section.end_time)
        if now < opens_at:
            return EligibilityDecision.deny(f"Check-in opens at {format_clock(opens_at.time())}", opens_at=opens_at)
        if now > closes_at:
            return EligibilityDecision.deny("Check-in closed")
        return EligibilityDecision.allow()
