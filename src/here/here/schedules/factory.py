from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ABDesignation, SchedulePattern
from .strategies.ab_day_rule import ABDayRule
from .strategies.base import ScheduleRule
from .strategies.every_day_rule import EveryDayRule
from .strategies.specific_days_rule import SpecificDaysRule


@dataclass
class ScheduleRuleFactory:
    """Factory Pattern: map a section's schedule pattern to its rule."""

    def for_pattern(self, pattern: SchedulePattern) -> ScheduleRule:
        if pattern == SchedulePattern.EVERY_DAY:
            return EveryDayRule()
        if pattern == SchedulePattern.SPECIFIC_DAYS:
            return SpecificDaysRule()
        if pattern == SchedulePattern.A_DAYS:
            return ABDayRule(ABDesignation.A_DAY)
        if pattern == SchedulePattern.B_DAYS:
            return ABDayRule(ABDesignation.B_DAY)
        raise ValueError(f"Unknown schedule pattern: {pattern!r}")
