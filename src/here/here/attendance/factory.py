from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import CHECKIN_LEAD_MINUTES, WAVE_LEAD_MINUTES
from ..core.enums import ActionType
from .strategies.base import EligibilityRule
from .strategies.check_in_rule import CheckInRule
from .strategies.check_out_rule import CheckOutRule
from .strategies.wave_rule import WaveRule


@dataclass
class EligibilityRuleFactory:
    """Factory Pattern: choose the rule that governs a student action."""

    checkin_lead_minutes: int = CHECKIN_LEAD_MINUTES
    wave_lead_minutes: int = WAVE_LEAD_MINUTES

    def for_action(self, action: ActionType) -> EligibilityRule:
        if action == ActionType.WAVE:
            return WaveRule(self.wave_lead_minutes)
        if action == ActionType.CHECK_IN:
            return CheckInRule(self.checkin_lead_minutes)
        if action == ActionType.CHECK_OUT:
            return CheckOutRule()
        raise ValueError(f"Unknown action: {action!r}")
