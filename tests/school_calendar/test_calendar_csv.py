from __future__ import annotations

from datetime import date

from src.here.here.core.enums import ABDesignation, Role
from src.here.here.school_calendar.calendar_import import build_calendar_days, read_calendar_csv
from src.here.here.school_calendar.service import CalendarService
from tests.fakes import InMemoryCalendar


def test_columns_are_located_by_name_in_any_order():
    rows, errors = read_calendar_csv("Day_Type,notes,DATE\nA,first day,2026-01-12\n\noff,,2026-01-13\n")

    assert errors == []
    # Blank line is skipped but physical line numbers are kept.
    assert rows == [(2, "2026-01-12", "A"), (4, "2026-01-13", "off")]


def test_missing_columns_are_reported():
    rows, errors = read_calendar_csv("when,kind\n2026-01-12,A\n")

    assert rows == []
    assert errors == ['CSV must have "date" and "day_type" columns']


def test_header_only_file_is_invalid():
    _, errors = read_calendar_csv("date,day_type\n")

    assert errors == ["CSV file is empty or invalid"]


def test_off_rows_become_days_off_with_note():
    days, errors = build_calendar_days([(2, "2026-01-19", "OFF"), (3, "2026-01-20", "b")])

    assert errors == []
    assert days[0].is_school_day is False
    assert days[0].ab_designation is None
    assert days[0].notes == "Day off"
    assert days[1].ab_designation == ABDesignation.B_DAY


def test_duplicate_dates_are_rejected():
    _, errors = build_calendar_days([(2, "2026-01-19", "A"), (3, "2026-01-19", "B")])

    assert errors == ['Row 3: Duplicate date "2026-01-19"']


def test_import_csv_applies_valid_file():
    repo = InMemoryCalendar()
    svc = CalendarService(repo)

    result = svc.import_csv(current_role=Role.ADMIN, text="date,day_type\n2026-01-12,A\n2026-01-13,b\n2026-01-14,Off\n")

    assert result.success is True
    assert result.imported == 3
    assert sorted(repo.days) == [date(2026, 1, 12), date(2026, 1, 13), date(2026, 1, 14)]


def test_import_csv_with_bad_row_changes_nothing():
    repo = InMemoryCalendar()
    svc = CalendarService(repo)

    result = svc.import_csv(current_role=Role.ADMIN, text="date,day_type\n2026-01-12,A\n2026-02-30,B\n")

    assert result.success is False
    assert result.errors == ['Row 3: Invalid date format "2026-02-30" (expected YYYY-MM-DD)']
    assert repo.days == {}


def test_quoted_multiline_field_keeps_later_row_numbers_aligned():
    text = 'date,day_type,notes\n2026-01-12,A,"assembly\nin gym"\n2026-01-13,B,\n2026-01-14,X,\n'

    rows, errors = read_calendar_csv(text)

    assert errors == []
    assert rows == [(3, "2026-01-12", "A"), (4, "2026-01-13", "B"), (5, "2026-01-14", "X")]
    _, row_errors = build_calendar_days(rows)
    assert row_errors == ['Row 5: Invalid day_type "X" (expected A, B, or off)']
