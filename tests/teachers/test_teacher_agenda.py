from __future__ import annotations

from datetime import date, datetime

import pytest

from src.here.here.attendance.service import AttendanceService
from src.here.here.core.enums import AttendanceMark, SectionType
from src.here.here.schedules.service import ScheduleMatcher
from src.here.here.school_calendar.model import CalendarDay
from src.here.here.school_calendar.service import CalendarService
from src.here.here.teachers.model import StudentSummary
from src.here.here.teachers.service import TeacherAgendaService
from tests.fakes import (
    FixedClock,
    InMemoryAttendanceRecords,
    InMemoryCalendar,
    InMemoryEvents,
    InMemoryPresence,
    InMemoryRoster,
    InMemorySections,
    make_section,
)

TEACHER = 50
DAY = date(2026, 1, 13)
NOW = datetime(2026, 1, 13, 9, 10)


@pytest.fixture
def world():
    sections = InMemorySections(
        [
            make_section(1, "Remote Work", section_type=SectionType.REMOTE, start=(9, 0), end=(11, 0)),
            make_section(2, "Homeroom", section_type=SectionType.IN_PERSON, start=(8, 0), end=(8, 30)),
        ]
    )
    sections.assign(TEACHER, 1, 2)
    roster = InMemoryRoster(
        [
            StudentSummary(10, "Zoe", "Young", "zoe@here.test"),
            StudentSummary(11, "Ava", "Adams", "ava@here.test"),
            StudentSummary(12, "Max", "Miller", "max@here.test"),
        ]
    )
    roster.add(1, 10, 11)
    roster.add(2, 10, 11, 12)

    calendar = InMemoryCalendar()
    events, presence, records = InMemoryEvents(), InMemoryPresence(), InMemoryAttendanceRecords()
    matcher = ScheduleMatcher(CalendarService(calendar), sections)
    clock = FixedClock(NOW)

    teacher_svc = TeacherAgendaService(matcher, sections, roster, records, events, presence, clock=clock)
    student_svc = AttendanceService(sections, events, presence, clock=clock)
    return teacher_svc, student_svc, calendar, records


def test_agenda_lists_sections_with_sorted_roster_and_counts(world):
    teacher_svc, student_svc, _, _ = world
    student_svc.record_check_in(student_id=10, section_id=1, plans="finish lab report")
    student_svc.record_presence_wave(student_id=12, section_id=2, mood="\N{SLEEPING FACE}")
    teacher_svc.save_attendance(
        teacher_id=TEACHER, section_id=2, on_date=DAY, marks=[{"student_id": 11, "status": "present"}]
    )

    agenda = teacher_svc.get_agenda(teacher_id=TEACHER, on_date=DAY)

    assert [a.section.name for a in agenda] == ["Homeroom", "Remote Work"]
    homeroom, remote = agenda

    assert [e.student.last_name for e in homeroom.students] == ["Adams", "Miller", "Young"]
    assert (homeroom.total_students, homeroom.marked_students, homeroom.presence_count) == (3, 1, 1)
    assert homeroom.students[0].attendance_status == AttendanceMark.PRESENT
    assert homeroom.students[1].presence_mood == "\N{SLEEPING FACE}"

    assert remote.checked_in_count == 1
    young = next(e for e in remote.students if e.student.user_id == 10)
    assert young.plans_text == "finish lab report"
    assert young.check_in_time == NOW


def test_agenda_is_empty_on_day_off(world):
    teacher_svc, _, calendar, _ = world
    calendar.upsert(CalendarDay(DAY, False, notes="Day off"))

    assert teacher_svc.get_agenda(teacher_id=TEACHER, on_date=DAY) == []


def test_save_attendance_requires_assignment(world):
    teacher_svc, _, _, _ = world

    result = teacher_svc.save_attendance(
        teacher_id=999, section_id=1, on_date=DAY, marks=[{"student_id": 10, "status": "present"}]
    )

    assert result.success is False
    assert result.error == "You are not assigned to this section"


def test_save_attendance_upserts_and_clears(world):
    teacher_svc, _, _, records = world

    first = teacher_svc.save_attendance(
        teacher_id=TEACHER,
        section_id=1,
        on_date=DAY,
        marks=[{"student_id": 10, "status": "absent"}, {"student_id": 11, "status": "excused", "notes": "doctor"}],
    )
    assert first.data == {"saved_count": 2}

    second = teacher_svc.save_attendance(
        teacher_id=TEACHER,
        section_id=1,
        on_date=DAY,
        marks=[{"student_id": 10, "status": "Present"}, {"student_id": 11, "status": ""}],
    )

    assert second.data == {"saved_count": 1}
    saved = records.list_for_section(section_id=1, on_date=DAY)
    assert [(r.student_id, r.status) for r in saved] == [(10, AttendanceMark.PRESENT)]
    assert saved[0].marked_by == TEACHER


def test_save_attendance_rejects_unknown_status(world):
    teacher_svc, _, _, records = world

    result = teacher_svc.save_attendance(
        teacher_id=TEACHER, section_id=1, on_date=DAY, marks=[{"student_id": 10, "status": "tardy"}]
    )

    assert result.success is False
    assert records.records == {}
