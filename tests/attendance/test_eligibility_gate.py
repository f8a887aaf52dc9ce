from __future__ import annotations

from datetime import date, datetime, time

from src.here.here.attendance.eligibility import EligibilityGate
from src.here.here.attendance.factory import EligibilityRuleFactory
from src.here.here.attendance.model import SectionStatus
from src.here.here.core.enums import ActionType, SectionType
from tests.fakes import make_section

DAY = date(2026, 1, 13)
REMOTE = make_section(1, "Remote Work", section_type=SectionType.REMOTE, start=(9, 0), end=(11, 0))
HOMEROOM = make_section(2, "Homeroom", section_type=SectionType.IN_PERSON, start=(8, 0), end=(8, 30))


def _at(hour: int, minute: int) -> datetime:
    return datetime.combine(DAY, time(hour, minute))


def test_actions_only_allowed_for_today():
    gate = EligibilityGate()

    decision = gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(9, 0), target_date=date(2026, 1, 14))

    assert decision.allowed is False
    assert decision.reason == "Actions only available for today"


def test_check_in_window_opens_fifteen_minutes_before_start():
    gate = EligibilityGate()

    early = gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(8, 44), target_date=DAY)
    assert early.allowed is False
    assert early.reason == "Check-in opens at 8:45 AM"
    assert early.opens_at == _at(8, 45)

    assert gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(8, 45), target_date=DAY).allowed is True
    assert gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(11, 0), target_date=DAY).allowed is True

    closed = gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(11, 1), target_date=DAY)
    assert closed.allowed is False
    assert closed.reason == "Check-in closed"


def test_check_in_denied_when_already_checked_in():
    decision = EligibilityGate().check_action(
        REMOTE, ActionType.CHECK_IN, now=_at(9, 30), target_date=DAY, state=SectionStatus(has_checked_in=True)
    )

    assert decision.reason == "Already checked in today"


def test_check_in_not_offered_for_in_person_sections():
    decision = EligibilityGate().check_action(HOMEROOM, ActionType.CHECK_IN, now=_at(8, 0), target_date=DAY)

    assert decision.reason == "This section does not require check-in"


def test_check_out_has_no_closing_time():
    checked_in = SectionStatus(has_checked_in=True, checked_in_at=_at(9, 5))

    decision = EligibilityGate().check_action(
        REMOTE, ActionType.CHECK_OUT, now=_at(23, 0), target_date=DAY, state=checked_in
    )

    assert decision.allowed is True


def test_check_out_requires_check_in_and_only_once():
    gate = EligibilityGate()

    before = gate.check_action(REMOTE, ActionType.CHECK_OUT, now=_at(10, 0), target_date=DAY)
    assert before.reason == "Must check in before checking out"

    done = gate.check_action(
        REMOTE,
        ActionType.CHECK_OUT,
        now=_at(10, 0),
        target_date=DAY,
        state=SectionStatus(has_checked_in=True, has_checked_out=True),
    )
    assert done.reason == "Already checked out today"


def test_wave_opens_five_minutes_before_start_and_stays_open():
    gate = EligibilityGate()

    early = gate.check_action(HOMEROOM, ActionType.WAVE, now=_at(7, 54), target_date=DAY)
    assert early.allowed is False
    assert early.reason == "Wave opens at 7:55 AM"

    assert gate.check_action(HOMEROOM, ActionType.WAVE, now=_at(7, 55), target_date=DAY).allowed is True
    assert gate.check_action(HOMEROOM, ActionType.WAVE, now=_at(21, 0), target_date=DAY).allowed is True


def test_wave_only_for_presence_only_sections():
    no_presence = make_section(3, "Study Hall", section_type=SectionType.IN_PERSON, presence_enabled=False)
    gate = EligibilityGate()

    assert gate.check_action(REMOTE, ActionType.WAVE, now=_at(9, 0), target_date=DAY).allowed is False
    assert gate.check_action(no_presence, ActionType.WAVE, now=_at(9, 0), target_date=DAY).reason == (
        "Presence waves not enabled for this section"
    )


def test_lead_times_are_configurable():
    gate = EligibilityGate(rule_factory=EligibilityRuleFactory(checkin_lead_minutes=30, wave_lead_minutes=0))

    assert gate.check_action(REMOTE, ActionType.CHECK_IN, now=_at(8, 30), target_date=DAY).allowed is True
    assert gate.check_action(HOMEROOM, ActionType.WAVE, now=_at(7, 59), target_date=DAY).reason == (
        "Wave opens at 8:00 AM"
    )


def test_afternoon_times_use_pm_label():
    afternoon = make_section(4, "Internship", section_type=SectionType.INTERNSHIP, start=(13, 0), end=(16, 0))

    decision = EligibilityGate().check_action(afternoon, ActionType.CHECK_IN, now=_at(12, 0), target_date=DAY)

    assert decision.reason == "Check-in opens at 12:45 PM"
