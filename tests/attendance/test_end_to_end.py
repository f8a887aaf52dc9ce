from __future__ import annotations

from datetime import date, datetime

from src.here.here.attendance.service import AttendanceService
from src.here.here.core.enums import ActionType, Role, SectionType
from src.here.here.schedules.service import ScheduleMatcher
from src.here.here.school_calendar.service import CalendarService
from tests.fakes import FixedClock, InMemoryCalendar, InMemoryEvents, InMemoryPresence, InMemorySections, make_section


def test_remote_section_day_from_agenda_to_check_out():
    today = date(2026, 1, 13)
    now = datetime(2026, 1, 13, 8, 50)
    student = 7

    remote = make_section(1, "Remote Work", section_type=SectionType.REMOTE, start=(9, 0), end=(11, 0))
    sections = InMemorySections([remote])
    sections.enroll(student, 1)

    matcher = ScheduleMatcher(CalendarService(InMemoryCalendar()), sections)
    svc = AttendanceService(
        sections, InMemoryEvents(), InMemoryPresence(), clock=FixedClock(now), matcher=matcher
    )

    assert matcher.active_sections(person_id=student, role=Role.STUDENT, on_date=today) == [remote]
    assert svc.check_action(
        student_id=student, section_id=1, action=ActionType.CHECK_IN, target_date=today, now=now
    ).success

    assert svc.record_check_in(student_id=student, section_id=1, plans="debug a flaky test", now=now).success
    status = svc.get_status(student_id=student, section_id=1, on_date=today)
    assert status.has_checked_in is True
    assert status.plans_text == "debug a flaky test"

    again = svc.record_check_in(student_id=student, section_id=1, plans="debug a flaky test", now=now)
    assert again.success is False
    assert again.error == "Already checked in today"

    ten = datetime(2026, 1, 13, 10, 0)
    assert svc.check_action(
        student_id=student, section_id=1, action=ActionType.CHECK_OUT, target_date=today, now=ten
    ).success
    assert svc.record_check_out(student_id=student, section_id=1, progress="fixed it", now=ten).success

    final = svc.get_status(student_id=student, section_id=1, on_date=today)
    assert final.has_checked_in and final.has_checked_out


def test_student_agenda_reports_gate_per_action():
    now = datetime(2026, 1, 13, 7, 50)
    student = 7
    homeroom = make_section(1, "Homeroom", section_type=SectionType.IN_PERSON, start=(8, 0), end=(8, 30))
    remote = make_section(2, "Remote Work", section_type=SectionType.REMOTE, start=(9, 0), end=(11, 0))
    sections = InMemorySections([remote, homeroom])
    sections.enroll(student, 1, 2)

    svc = AttendanceService(
        sections,
        InMemoryEvents(),
        InMemoryPresence(),
        clock=FixedClock(now),
        matcher=ScheduleMatcher(CalendarService(InMemoryCalendar()), sections),
    )

    agenda = svc.get_student_agenda(student_id=student)

    assert [item.section.name for item in agenda] == ["Homeroom", "Remote Work"]
    assert list(agenda[0].actions) == [ActionType.WAVE]
    assert agenda[0].actions[ActionType.WAVE].reason == "Wave opens at 7:55 AM"
    assert agenda[1].actions[ActionType.CHECK_IN].reason == "Check-in opens at 8:45 AM"
    assert agenda[1].actions[ActionType.CHECK_OUT].reason == "Must check in before checking out"
