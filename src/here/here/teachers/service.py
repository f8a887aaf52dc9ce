from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Union

from ..attendance.repository import AttendanceEventRepository, PresenceRepository
from ..common.datetime_utils import SchoolClock
from ..core.enums import AttendanceMark, EventType, Role
from ..core.results import ActionResult
from ..schedules.service import ScheduleMatcher
from ..sections.model import Section
from ..sections.repository import SectionRepository
from .model import AttendanceMarkInput, RosterEntry, TeacherSectionAgenda
from .repository import AttendanceRecordRepository, RosterRepository

logger = logging.getLogger(__name__)

MarkLike = Union[AttendanceMarkInput, Mapping]


def _to_mark(raw: MarkLike) -> AttendanceMarkInput:
    if isinstance(raw, AttendanceMarkInput):
        return raw
    status_s = (raw.get("status") or "").strip().lower()
    status = AttendanceMark(status_s) if status_s else None
    notes = (raw.get("notes") or "").strip() or None
    return AttendanceMarkInput(student_id=int(raw["student_id"]), status=status, notes=notes)


class TeacherAgendaService:
    """Teacher's day view plus attendance marking for assigned sections."""

    def __init__(
        self,
        matcher: ScheduleMatcher,
        sections: SectionRepository,
        roster: RosterRepository,
        records: AttendanceRecordRepository,
        events: AttendanceEventRepository,
        presence: PresenceRepository,
        *,
        clock: SchoolClock | None = None,
    ):
        self._matcher = matcher
        self._sections = sections
        self._roster = roster
        self._records = records
        self._events = events
        self._presence = presence
        self._clock = clock or SchoolClock()

    def get_agenda(self, *, teacher_id: int, on_date: date | None = None) -> List[TeacherSectionAgenda]:
        on_date = on_date or self._clock.today()
        sections = self._matcher.active_sections(person_id=teacher_id, role=Role.TEACHER, on_date=on_date)
        return [self._section_agenda(section, on_date) for section in sections]

    def _section_agenda(self, section: Section, on_date: date) -> TeacherSectionAgenda:
        students = self._roster.list_active_students(section.section_id)
        enrolled = {s.user_id for s in students}

        records = {
            r.student_id: r
            for r in self._records.list_for_section(section_id=section.section_id, on_date=on_date)
            if r.student_id in enrolled
        }
        waves = [
            w
            for w in self._presence.list_for_section(section_id=section.section_id, on_date=on_date)
            if w.student_id in enrolled
        ]
        events = [
            e
            for e in self._events.list_for_section(section_id=section.section_id, on_date=on_date)
            if e.student_id in enrolled
        ]

        # Most recent wave wins for the mood column.
        mood = {w.student_id: w.content for w in waves}
        check_ins = {e.student_id: e for e in events if e.event_type == EventType.CHECK_IN}
        check_outs = {e.student_id: e for e in events if e.event_type == EventType.CHECK_OUT}

        entries = []
        for student in students:
            record = records.get(student.user_id)
            check_in = check_ins.get(student.user_id)
            check_out = check_outs.get(student.user_id)
            entries.append(
                RosterEntry(
                    student=student,
                    attendance_status=record.status if record else None,
                    attendance_notes=record.notes if record else None,
                    presence_mood=mood.get(student.user_id),
                    check_in_time=check_in.occurred_at if check_in else None,
                    check_in_verified=check_in.location_verified if check_in else None,
                    check_out_time=check_out.occurred_at if check_out else None,
                    plans_text=check_in.prompt_text if check_in else None,
                )
            )
        entries.sort(key=lambda e: (e.student.last_name.lower(), e.student.first_name.lower()))

        return TeacherSectionAgenda(
            section=section,
            students=entries,
            total_students=len(entries),
            marked_students=len(records),
            presence_count=len(mood),
            checked_in_count=len(check_ins),
        )

    def save_attendance(
        self,
        *,
        teacher_id: int,
        section_id: int,
        on_date: date,
        marks: Iterable[MarkLike],
        now: Optional[datetime] = None,
    ) -> ActionResult:
        if not self._sections.is_teacher_assigned(section_id=section_id, teacher_id=teacher_id):
            return ActionResult.fail("You are not assigned to this section")

        try:
            parsed = [_to_mark(m) for m in marks]
        except (KeyError, TypeError, ValueError):
            return ActionResult.fail("Invalid attendance status")

        to_save = [m for m in parsed if m.status is not None]
        to_clear = [m.student_id for m in parsed if m.status is None]

        saved = self._records.save_marks(
            section_id=section_id,
            on_date=on_date,
            marks=to_save,
            clear_student_ids=to_clear,
            marked_by=teacher_id,
            updated_at=now or self._clock.now(),
        )
        logger.info(
            "Teacher %s saved %d marks (%d cleared) for section %s on %s",
            teacher_id,
            saved,
            len(to_clear),
            section_id,
            on_date.isoformat(),
        )
        return ActionResult.ok({"saved_count": saved})
