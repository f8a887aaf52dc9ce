from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.enums import ActionType
from ..sections.model import Section
from .factory import EligibilityRuleFactory
from .model import EligibilityDecision, SectionStatus


class EligibilityGate:
    """Pure decision of whether a student action is available right now.

    Denials are returned as values; nothing here touches storage.
    """

    def __init__(self, *, rule_factory: EligibilityRuleFactory | None = None):
        self._rules = rule_factory or EligibilityRuleFactory()

    def check_action(
        self,
        section: Section,
        action: ActionType,
        *,
        now: datetime,
        target_date: date,
        state: Optional[SectionStatus] = None,
    ) -> EligibilityDecision:
        if target_date != now.date():
            return EligibilityDecision.deny("Actions only available for today")
        return self._rules.for_action(action).evaluate(section=section, now=now, state=state or SectionStatus())
