from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_clock
from ...sections.model import Section
from ..model import EligibilityDecision, SectionStatus
from .base import EligibilityRule


class WaveRule(EligibilityRule):
    """Waves open a few minutes before start and stay open for the rest of the day."""

    def __init__(self, lead_minutes: int):
        self._lead = int(lead_minutes)

    def evaluate(self, *, section: Section, now: datetime, state: SectionStatus) -> EligibilityDecision:
        if not section.is_presence_only:
            return EligibilityDecision.deny("Presence waves not enabled for this section")
        if state.has_waved:
            return EligibilityDecision.deny("Already waved today")

        opens_at = self._at(now.date(), section.start_time, minus_minutes=self._lead)
        if now < opens_at:
            return EligibilityDecision.deny(f"Wave opens at {format_clock(opens_at.time())}", opens_at=opens_at)
        return EligibilityDecision.allow()
