from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import AttendanceMark
from ..sections.model import Section


@dataclass(frozen=True)
class StudentSummary:
    user_id: int
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Teacher-entered mark for one student, section and date."""

    student_id: int
    section_id: int
    record_date: date
    status: AttendanceMark
    notes: Optional[str] = None
    marked_by: Optional[int] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceMarkInput:
    """One roster row submitted by a teacher; status None clears the mark."""

    student_id: int
    status: Optional[AttendanceMark]
    notes: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    student: StudentSummary
    attendance_status: Optional[AttendanceMark] = None
    attendance_notes: Optional[str] = None
    presence_mood: Optional[str] = None
    check_in_time: Optional[datetime] = None
    check_in_verified: Optional[bool] = None
    check_out_time: Optional[datetime] = None
    plans_text: Optional[str] = None


@dataclass(frozen=True)
class TeacherSectionAgenda:
    section: Section
    students: List[RosterEntry] = field(default_factory=list)
    total_students: int = 0
    marked_students: int = 0
    presence_count: int = 0
    checked_in_count: int = 0
