from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from .model import AttendanceMarkInput, AttendanceRecord, StudentSummary


class RosterRepository(Protocol):
    def list_active_students(self, section_id: int) -> Sequence[StudentSummary]:
        raise NotImplementedError


class AttendanceRecordRepository(Protocol):
    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def save_marks(
        self,
        *,
        section_id: int,
        on_date: date,
        marks: Sequence[AttendanceMarkInput],
        clear_student_ids: Sequence[int],
        marked_by: int,
        updated_at: datetime,
    ) -> int:
        """Upsert ``marks`` and delete records for ``clear_student_ids`` in one unit of work."""

        raise NotImplementedError
