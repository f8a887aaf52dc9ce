from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from .model import AttendanceEvent, Location, PresenceInteraction


class AttendanceEventRepository(Protocol):
    def list_for_student(self, *, student_id: int, section_id: int, on_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def create_event(
        self,
        *,
        student_id: int,
        section_id: int,
        event_type: EventType,
        event_date: date,
        occurred_at: datetime,
        prompt_text: str,
        location: Optional[Location] = None,
        location_verified: Optional[bool] = None,
    ) -> int:
        """Insert the event and its prompt response atomically.

        Raises DuplicateEventError when an event of the same type already exists
        for that student, section and date.
        """

        raise NotImplementedError


class PresenceRepository(Protocol):
    def create_wave(
        self, *, student_id: int, section_id: int, on_date: date, content: str, created_at: datetime
    ) -> int:
        raise NotImplementedError

    def latest_for_student(self, *, student_id: int, section_id: int, on_date: date) -> Optional[PresenceInteraction]:
        raise NotImplementedError

    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[PresenceInteraction]:
        raise NotImplementedError
