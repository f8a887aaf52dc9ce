from __future__ import annotations

from enum import Enum, IntFlag
from typing import Iterable


class Role(str, Enum):
    """User roles; a user may hold several and switch the active one."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    MENTOR = "mentor"


class SectionType(str, Enum):
    IN_PERSON = "in_person"
    REMOTE = "remote"
    INTERNSHIP = "internship"


class SchedulePattern(str, Enum):
    """Rule deciding which calendar dates a section meets on."""

    EVERY_DAY = "every_day"
    SPECIFIC_DAYS = "specific_days"
    A_DAYS = "a_days"
    B_DAYS = "b_days"


class ABDesignation(str, Enum):
    A_DAY = "a_day"
    B_DAY = "b_day"


class DayType(str, Enum):
    """Day types accepted by the calendar CSV import."""

    A = "A"
    B = "B"
    OFF = "OFF"


class EventType(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class InteractionType(str, Enum):
    PROMPT_RESPONSE = "prompt_response"
    PRESENCE = "presence"


class ActionType(str, Enum):
    """Student actions gated by time windows on the agenda."""

    WAVE = "wave"
    CHECK_IN = "checkin"
    CHECK_OUT = "checkout"


class AttendanceMark(str, Enum):
    """Status a teacher records on the roster."""

    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class Weekday(IntFlag):
    """School weekdays as a 5-bit set (Monday=index 0 .. Friday=index 4)."""

    NONE = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 4
    THURSDAY = 8
    FRIDAY = 16

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        if not 0 <= int(index) <= 4:
            raise ValueError(f"Weekday index out of range: {index!r}")
        return cls(1 << int(index))

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> "Weekday":
        days = cls.NONE
        for index in indices:
            days |= cls.from_index(index)
        return days

    def indices(self) -> list[int]:
        return [i for i in range(5) if self & (1 << i)]

    def includes_index(self, index: int) -> bool:
        # date.weekday() gives 5/6 for weekends, which never match.
        if not 0 <= index <= 4:
            return False
        return bool(self & (1 << index))
