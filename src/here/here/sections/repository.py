from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Enrollment, Section, SectionDraft


class SectionRepository(Protocol):
    def get_by_id(self, section_id: int) -> Optional[Section]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Section]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Section]:
        """Sections the student is actively enrolled in."""

        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[Section]:
        raise NotImplementedError

    def create(self, draft: SectionDraft, *, created_by: Optional[int] = None) -> int:
        raise NotImplementedError

    def update(self, section_id: int, draft: SectionDraft) -> bool:
        raise NotImplementedError

    def delete(self, section_id: int) -> bool:
        raise NotImplementedError

    def assign_teacher(self, *, section_id: int, teacher_id: int, is_primary: bool = True) -> None:
        raise NotImplementedError

    def is_teacher_assigned(self, *, section_id: int, teacher_id: int) -> bool:
        raise NotImplementedError


class EnrollmentRepository(Protocol):
    def list_for_section(self, section_id: int) -> Sequence[Enrollment]:
        """All enrollment rows for a section, active or not."""

        raise NotImplementedError

    def count_active(self, section_id: int) -> int:
        raise NotImplementedError

    def insert_many(self, *, section_id: int, student_ids: Sequence[int], enrolled_at: datetime) -> int:
        raise NotImplementedError

    def reactivate_many(self, *, section_id: int, student_ids: Sequence[int], enrolled_at: datetime) -> int:
        raise NotImplementedError

    def deactivate(self, *, section_id: int, student_id: int) -> bool:
        raise NotImplementedError
