from __future__ import annotations

from datetime import date

import pytest

from src.here.here.core.enums import ABDesignation, Role, SchedulePattern, SectionType, Weekday
from src.here.here.schedules.factory import ScheduleRuleFactory
from src.here.here.schedules.service import ScheduleMatcher
from src.here.here.school_calendar.model import CalendarDay
from src.here.here.school_calendar.service import CalendarService
from tests.fakes import InMemoryCalendar, InMemorySections, make_section

MONDAY = date(2026, 1, 12)
TUESDAY = date(2026, 1, 13)
SATURDAY = date(2026, 1, 17)


def _matcher(sections, calendar_days=()):
    return ScheduleMatcher(CalendarService(InMemoryCalendar(calendar_days)), sections)


def test_specific_days_match_only_listed_weekdays():
    lab = make_section(
        1, "Biology Lab", section_type=SectionType.IN_PERSON,
        pattern=SchedulePattern.SPECIFIC_DAYS, days=Weekday.from_indices([0, 2]),
    )
    repo = InMemorySections([lab])
    repo.enroll(7, 1)
    # A/B designation must not matter for SPECIFIC_DAYS.
    matcher = _matcher(repo, [CalendarDay(TUESDAY, True, ABDesignation.A_DAY)])

    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=MONDAY) == [lab]
    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=TUESDAY) == []


def test_weekends_never_match_specific_days():
    every_weekday = make_section(1, pattern=SchedulePattern.SPECIFIC_DAYS, days=Weekday.from_indices(range(5)))
    repo = InMemorySections([every_weekday])
    repo.enroll(7, 1)

    assert _matcher(repo).active_sections(person_id=7, role=Role.STUDENT, on_date=SATURDAY) == []


def test_off_day_overrides_every_pattern():
    homeroom = make_section(1, "Homeroom", pattern=SchedulePattern.EVERY_DAY)
    repo = InMemorySections([homeroom])
    repo.enroll(7, 1)
    matcher = _matcher(repo, [CalendarDay(TUESDAY, False, notes="Day off")])

    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=TUESDAY) == []


def test_ab_rotation_follows_calendar_designation():
    a_section = make_section(1, "Studio Art", pattern=SchedulePattern.A_DAYS)
    b_section = make_section(2, "Chemistry", pattern=SchedulePattern.B_DAYS)
    repo = InMemorySections([a_section, b_section])
    repo.enroll(7, 1, 2)
    matcher = _matcher(repo, [CalendarDay(MONDAY, True, ABDesignation.A_DAY)])

    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=MONDAY) == [a_section]
    # No designation: neither rotation meets.
    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=TUESDAY) == []


def test_results_sorted_by_start_time_and_scoped_by_role():
    late = make_section(1, "Remote Work", start=(13, 0), end=(14, 0))
    early = make_section(2, "Homeroom", start=(8, 0), end=(8, 30))
    other = make_section(3, "Teacher Only", start=(10, 0), end=(11, 0))
    repo = InMemorySections([late, early, other])
    repo.enroll(7, 1, 2)
    repo.assign(50, 3, 1)
    matcher = _matcher(repo)

    assert matcher.active_sections(person_id=7, role=Role.STUDENT, on_date=TUESDAY) == [early, late]
    assert matcher.active_sections(person_id=50, role=Role.TEACHER, on_date=TUESDAY) == [other, late]
    assert matcher.active_sections(person_id=7, role=Role.ADMIN, on_date=TUESDAY) == []


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        (SchedulePattern.EVERY_DAY, "EveryDayRule"),
        (SchedulePattern.SPECIFIC_DAYS, "SpecificDaysRule"),
        (SchedulePattern.A_DAYS, "ABDayRule"),
        (SchedulePattern.B_DAYS, "ABDayRule"),
    ],
)
def test_factory_picks_rule_for_pattern(pattern, expected):
    assert type(ScheduleRuleFactory().for_pattern(pattern)).__name__ == expected
