from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.enums import SchedulePattern, SectionType, Weekday


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    @classmethod
    def from_dict(cls, value: Optional[dict]) -> Optional["GeoPoint"]:
        if not value or value.get("lat") is None or value.get("lng") is None:
            return None
        return cls(lat=float(value["lat"]), lng=float(value["lng"]))

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Section:
    """A scheduled block of instruction or work."""

    section_id: int
    name: str
    section_type: SectionType
    start_time: time
    end_time: time
    schedule_pattern: SchedulePattern
    days_of_week: Weekday = Weekday.NONE
    presence_enabled: bool = True
    attendance_enabled: bool = True
    expected_location: Optional[GeoPoint] = None
    geofence_radius: Optional[int] = None

    @property
    def requires_check_in(self) -> bool:
        return self.section_type in {SectionType.REMOTE, SectionType.INTERNSHIP}

    @property
    def is_presence_only(self) -> bool:
        return self.presence_enabled and not self.requires_check_in

    def to_dict(self) -> dict:
        return {
            "section_id": self.section_id,
            "name": self.name,
            "section_type": self.section_type.value,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "schedule_pattern": self.schedule_pattern.value,
            "days_of_week": self.days_of_week.indices(),
            "presence_enabled": self.presence_enabled,
            "attendance_enabled": self.attendance_enabled,
            "requires_check_in": self.requires_check_in,
            "expected_location": self.expected_location.to_dict() if self.expected_location else None,
            "geofence_radius": self.geofence_radius,
        }


@dataclass(frozen=True)
class SectionDraft:
    """Validated input for creating or updating a section."""

    name: str
    section_type: SectionType
    start_time: time
    end_time: time
    schedule_pattern: SchedulePattern
    days_of_week: Weekday = Weekday.NONE
    presence_enabled: bool = True
    attendance_enabled: bool = True
    expected_location: Optional[GeoPoint] = None
    geofence_radius: Optional[int] = None


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    section_id: int
    student_id: int
    active: bool
    enrolled_at: datetime


@dataclass(frozen=True)
class EnrollmentResult:
    enrolled: int
    reactivated: int
    skipped: int
