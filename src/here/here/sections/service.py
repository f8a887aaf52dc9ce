from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from ..core.enums import Role, SchedulePattern, SectionType, Weekday
from ..core.exceptions import AuthorizationError, ValidationError
from .model import EnrollmentResult, GeoPoint, Section, SectionDraft
from .repository import EnrollmentRepository, SectionRepository

logger = logging.getLogger(__name__)


def _as_time(value, field_name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_hhmm(str(value or ""))
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM")


def _as_weekdays(value) -> Weekday:
    if isinstance(value, Weekday):
        return value
    try:
        return Weekday.from_indices(int(v) for v in (value or []))
    except (TypeError, ValueError):
        raise ValidationError("days_of_week must contain weekday indices 0 (Mon) to 4 (Fri)")


def build_section_draft(
    *,
    name: str,
    section_type,
    start_time,
    end_time,
    schedule_pattern,
    days_of_week=None,
    presence_enabled: bool = True,
    attendance_enabled: bool = True,
    expected_location: Optional[dict] = None,
    geofence_radius: Optional[int] = None,
) -> SectionDraft:
    """Validate raw admin input into a SectionDraft.

    ``days_of_week`` is only kept for SPECIFIC_DAYS and must be non-empty there.
    Internship sections with an expected location get the default radius when
    none is given.
    """

    name = require_non_empty(name, "Section name")
    try:
        section_type = SectionType(section_type)
    except ValueError:
        raise ValidationError("Invalid section type")
    try:
        schedule_pattern = SchedulePattern(schedule_pattern)
    except ValueError:
        raise ValidationError("Invalid schedule pattern")

    start = _as_time(start_time, "start_time")
    end = _as_time(end_time, "end_time")
    if end <= start:
        raise ValidationError("End time must be after start time")

    if schedule_pattern == SchedulePattern.SPECIFIC_DAYS:
        days = _as_weekdays(days_of_week)
        if not days:
            raise ValidationError("Select at least one day for a specific-days schedule")
    else:
        days = Weekday.NONE

    location = expected_location if isinstance(expected_location, GeoPoint) else GeoPoint.from_dict(expected_location)
    radius = None
    if location is not None:
        radius = int(geofence_radius) if geofence_radius else DEFAULT_GEOFENCE_RADIUS_METERS
        if radius <= 0:
            raise ValidationError("Geofence radius must be positive")

    return SectionDraft(
        name=name,
        section_type=section_type,
        start_time=start,
        end_time=end,
        schedule_pattern=schedule_pattern,
        days_of_week=days,
        presence_enabled=bool(presence_enabled),
        attendance_enabled=bool(attendance_enabled),
        expected_location=location,
        geofence_radius=radius,
    )


class SectionService:
    """Admin use cases for sections, teacher assignment and enrollment."""

    def __init__(self, sections: SectionRepository, enrollments: EnrollmentRepository):
        self._sections = sections
        self._enrollments = enrollments

    def list_sections(self) -> Sequence[Section]:
        return self._sections.list_all()

    def get_section(self, section_id: int) -> Section:
        section = self._sections.get_by_id(section_id)
        if not section:
            raise ValidationError("Section not found")
        return section

    def create_section(self, *, current_role: Role, draft: SectionDraft, created_by: Optional[int] = None) -> int:
        self._require_admin(current_role)
        section_id = self._sections.create(draft, created_by=created_by)
        logger.info("Created section %s (%s)", section_id, draft.name)
        return section_id

    def update_section(self, *, current_role: Role, section_id: int, draft: SectionDraft) -> None:
        self._require_admin(current_role)
        if not self._sections.update(section_id, draft):
            raise ValidationError("Section not found")

    def delete_section(self, *, current_role: Role, section_id: int) -> None:
        self._require_admin(current_role)
        self.get_section(section_id)

        enrolled = self._enrollments.count_active(section_id)
        if enrolled > 0:
            raise ValidationError(f"Cannot delete section with {enrolled} enrolled students")

        self._sections.delete(section_id)
        logger.info("Deleted section %s", section_id)

    def assign_teacher(self, *, current_role: Role, section_id: int, teacher_id: int) -> None:
        self._require_admin(current_role)
        self.get_section(section_id)
        self._sections.assign_teacher(section_id=section_id, teacher_id=teacher_id, is_primary=True)

    def enroll_students(
        self,
        *,
        current_role: Role,
        section_id: int,
        student_ids: Iterable[int],
        now: datetime | None = None,
    ) -> EnrollmentResult:
        self._require_admin(current_role)
        self.get_section(section_id)
        now = now or datetime.now()

        requested = list(dict.fromkeys(int(sid) for sid in student_ids))
        if not requested:
            raise ValidationError("No students selected")

        existing = {e.student_id: e for e in self._enrollments.list_for_section(section_id)}
        to_reactivate = [sid for sid in requested if sid in existing and not existing[sid].active]
        to_insert = [sid for sid in requested if sid not in existing]
        skipped = len(requested) - len(to_reactivate) - len(to_insert)

        reactivated = self._enrollments.reactivate_many(section_id=section_id, student_ids=to_reactivate, enrolled_at=now)
        enrolled = self._enrollments.insert_many(section_id=section_id, student_ids=to_insert, enrolled_at=now)

        logger.info(
            "Section %s enrollment: %d new, %d reactivated, %d skipped", section_id, enrolled, reactivated, skipped
        )
        return EnrollmentResult(enrolled=enrolled, reactivated=reactivated, skipped=skipped)

    def unenroll_student(self, *, current_role: Role, section_id: int, student_id: int) -> None:
        self._require_admin(current_role)
        if not self._enrollments.deactivate(section_id=section_id, student_id=student_id):
            raise ValidationError("Student is not enrolled in this section")

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage sections")
