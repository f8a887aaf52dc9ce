from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional

from ..core.enums import ActionType, EventType
from ..sections.model import Section


@dataclass(frozen=True)
class Location:
    """Coordinates reported by the student's device at check-in."""

    lat: float
    lng: float
    accuracy: Optional[float] = None

    @classmethod
    def from_dict(cls, value: Optional[dict]) -> Optional["Location"]:
        if not value or value.get("lat") is None or value.get("lng") is None:
            return None
        accuracy = value.get("accuracy")
        return cls(
            lat=float(value["lat"]),
            lng=float(value["lng"]),
            accuracy=float(accuracy) if accuracy is not None else None,
        )

    def to_dict(self) -> dict:
        data = {"lat": self.lat, "lng": self.lng}
        if self.accuracy is not None:
            data["accuracy"] = self.accuracy
        return data


@dataclass(frozen=True)
class AttendanceEvent:
    """A check-in or check-out, with the prompt text written alongside it."""

    event_id: int
    student_id: int
    section_id: int
    event_type: EventType
    event_date: date
    occurred_at: datetime
    location: Optional[Location] = None
    location_verified: Optional[bool] = None
    prompt_text: Optional[str] = None


@dataclass(frozen=True)
class PresenceInteraction:
    interaction_id: int
    student_id: int
    section_id: int
    interaction_date: date
    content: str
    created_at: datetime


@dataclass(frozen=True)
class SectionStatus:
    has_checked_in: bool = False
    has_checked_out: bool = False
    has_waved: bool = False
    plans_text: Optional[str] = None
    progress_text: Optional[str] = None
    wave_content: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None
    location_verified: Optional[bool] = None


@dataclass(frozen=True)
class EligibilityDecision:
    allowed: bool
    reason: Optional[str] = None
    opens_at: Optional[datetime] = None

    @classmethod
    def allow(cls) -> "EligibilityDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, *, opens_at: Optional[datetime] = None) -> "EligibilityDecision":
        return cls(allowed=False, reason=reason, opens_at=opens_at)


@dataclass(frozen=True)
class AgendaItem:
    """One row of a student's agenda: the section, today's state and what can be done now."""

    section: Section
    status: SectionStatus
    actions: Dict[ActionType, EligibilityDecision] = field(default_factory=dict)
