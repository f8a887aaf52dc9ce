from __future__ import annotations

from datetime import datetime

from ...sections.model import Section
from ..model import EligibilityDecision, SectionStatus
from .base import EligibilityRule


class CheckOutRule(EligibilityRule):
    # No time bound: students may check out late.
    def evaluate(self, *, section: Section, now: datetime, state: SectionStatus) -> EligibilityDecision:
        if state.has_checked_out:
            return EligibilityDecision.deny("Already checked out today")
        if not state.has_checked_in:
            return EligibilityDecision.deny("Must check in before checking out")
        return EligibilityDecision.allow()
