from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import ABDesignation


@dataclass(frozen=True)
class CalendarDay:
    """Explicit calendar record maintained by administrators."""

    calendar_date: date
    is_school_day: bool
    ab_designation: Optional[ABDesignation] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ResolvedDay:
    """School status of a date after applying the default-open policy."""

    calendar_date: date
    is_school_day: bool
    ab_designation: Optional[ABDesignation] = None

    @classmethod
    def default(cls, calendar_date: date) -> "ResolvedDay":
        return cls(calendar_date=calendar_date, is_school_day=True, ab_designation=None)


@dataclass(frozen=True)
class CalendarImportResult:
    success: bool
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
