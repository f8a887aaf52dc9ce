from __future__ import annotations

from datetime import datetime, time

import pytest

from src.here.here.core.enums import Role, SchedulePattern, SectionType, Weekday
from src.here.here.core.exceptions import AuthorizationError, ValidationError
from src.here.here.sections.model import Enrollment
from src.here.here.sections.service import SectionService, build_section_draft
from tests.fakes import InMemoryEnrollments, InMemorySections, make_section

NOW = datetime(2026, 1, 13, 9, 0)


def _draft(**overrides):
    data = dict(
        name="Biology Lab",
        section_type="in_person",
        start_time="13:00",
        end_time="14:30",
        schedule_pattern="specific_days",
        days_of_week=[0, 2],
    )
    data.update(overrides)
    return build_section_draft(**data)


def test_draft_parses_times_and_weekday_set():
    draft = _draft()

    assert draft.start_time == time(13, 0)
    assert draft.end_time == time(14, 30)
    assert draft.section_type == SectionType.IN_PERSON
    assert draft.days_of_week == Weekday.MONDAY | Weekday.WEDNESDAY


def test_draft_clears_days_for_other_patterns():
    draft = _draft(schedule_pattern="every_day")

    assert draft.schedule_pattern == SchedulePattern.EVERY_DAY
    assert draft.days_of_week == Weekday.NONE


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": "  "}, "Section name is required"),
        ({"end_time": "12:00"}, "End time must be after start time"),
        ({"start_time": "1pm"}, "start_time must be HH:MM"),
        ({"days_of_week": []}, "Select at least one day for a specific-days schedule"),
        ({"days_of_week": [5]}, "days_of_week must contain weekday indices 0 (Mon) to 4 (Fri)"),
        ({"section_type": "hybrid"}, "Invalid section type"),
    ],
)
def test_draft_validation(overrides, message):
    with pytest.raises(ValidationError) as exc:
        _draft(**overrides)
    assert str(exc.value) == message


def test_internship_location_gets_default_radius():
    draft = _draft(section_type="internship", schedule_pattern="every_day", expected_location={"lat": 1, "lng": 2})

    assert draft.expected_location.lat == 1.0
    assert draft.geofence_radius == 100


def test_create_and_update_section():
    sections = InMemorySections()
    svc = SectionService(sections, InMemoryEnrollments())

    section_id = svc.create_section(current_role=Role.ADMIN, draft=_draft())
    svc.update_section(current_role=Role.ADMIN, section_id=section_id, draft=_draft(name="Advanced Biology"))

    assert svc.get_section(section_id).name == "Advanced Biology"
    with pytest.raises(ValidationError):
        svc.update_section(current_role=Role.ADMIN, section_id=999, draft=_draft())


def test_only_admin_manages_sections():
    svc = SectionService(InMemorySections(), InMemoryEnrollments())

    with pytest.raises(AuthorizationError):
        svc.create_section(current_role=Role.TEACHER, draft=_draft())


def test_enrollment_skips_reactivates_and_inserts():
    enrollments = InMemoryEnrollments(
        [
            Enrollment(1, section_id=1, student_id=10, active=True, enrolled_at=NOW),
            Enrollment(2, section_id=1, student_id=11, active=False, enrolled_at=NOW),
        ]
    )
    svc = SectionService(InMemorySections([make_section(1)]), enrollments)

    result = svc.enroll_students(current_role=Role.ADMIN, section_id=1, student_ids=[10, 11, 12, 12], now=NOW)

    assert (result.enrolled, result.reactivated, result.skipped) == (1, 1, 1)
    # Reactivation reuses the same row.
    assert enrollments.rows[(1, 11)].enrollment_id == 2
    assert enrollments.rows[(1, 11)].active is True
    assert enrollments.count_active(1) == 3


def test_re_enrolling_active_student_is_a_no_op():
    enrollments = InMemoryEnrollments([Enrollment(1, section_id=1, student_id=10, active=True, enrolled_at=NOW)])
    svc = SectionService(InMemorySections([make_section(1)]), enrollments)

    result = svc.enroll_students(current_role=Role.ADMIN, section_id=1, student_ids=[10], now=NOW)

    assert (result.enrolled, result.reactivated, result.skipped) == (0, 0, 1)
    assert len(enrollments.rows) == 1


def test_unenroll_is_soft_delete():
    enrollments = InMemoryEnrollments([Enrollment(1, section_id=1, student_id=10, active=True, enrolled_at=NOW)])
    svc = SectionService(InMemorySections([make_section(1)]), enrollments)

    svc.unenroll_student(current_role=Role.ADMIN, section_id=1, student_id=10)

    assert enrollments.rows[(1, 10)].active is False
    with pytest.raises(ValidationError):
        svc.unenroll_student(current_role=Role.ADMIN, section_id=1, student_id=10)


def test_delete_refused_while_students_enrolled():
    sections = InMemorySections([make_section(1)])
    enrollments = InMemoryEnrollments(
        [
            Enrollment(1, section_id=1, student_id=10, active=True, enrolled_at=NOW),
            Enrollment(2, section_id=1, student_id=11, active=True, enrolled_at=NOW),
        ]
    )
    svc = SectionService(sections, enrollments)

    with pytest.raises(ValidationError) as exc:
        svc.delete_section(current_role=Role.ADMIN, section_id=1)
    assert str(exc.value) == "Cannot delete section with 2 enrolled students"

    svc.unenroll_student(current_role=Role.ADMIN, section_id=1, student_id=10)
    svc.unenroll_student(current_role=Role.ADMIN, section_id=1, student_id=11)
    svc.delete_section(current_role=Role.ADMIN, section_id=1)
    assert sections.get_by_id(1) is None


def test_assign_teacher():
    sections = InMemorySections([make_section(1)])
    svc = SectionService(sections, InMemoryEnrollments())

    svc.assign_teacher(current_role=Role.ADMIN, section_id=1, teacher_id=50)

    assert sections.is_teacher_assigned(section_id=1, teacher_id=50)
