from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.eligibility import EligibilityGate
from .attendance.factory import EligibilityRuleFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceEventRepository, MySQLPresenceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import SchoolClock
from .core.constants import CHECKIN_LEAD_MINUTES, DEFAULT_GEOFENCE_RADIUS_METERS, WAVE_LEAD_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .schedules.service import ScheduleMatcher
from .school_calendar.mysql_calendar_repository import MySQLCalendarRepository
from .school_calendar.service import CalendarService
from .sections.mysql_section_repository import MySQLEnrollmentRepository, MySQLSectionRepository
from .sections.service import SectionService
from .teachers.mysql_roster_repository import MySQLAttendanceRecordRepository, MySQLRosterRepository
from .teachers.service import TeacherAgendaService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    clock: SchoolClock

    auth_service: AuthService
    user_service: UserService
    calendar_service: CalendarService
    section_service: SectionService
    schedule_matcher: ScheduleMatcher
    attendance_service: AttendanceService
    teacher_agenda_service: TeacherAgendaService

    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    db_config: dict,
    school_timezone: Optional[str] = None,
    checkin_lead_minutes: int = CHECKIN_LEAD_MINUTES,
    wave_lead_minutes: int = WAVE_LEAD_MINUTES,
    default_geofence_radius: int = DEFAULT_GEOFENCE_RADIUS_METERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = SchoolClock(school_timezone)

    users_repo = MySQLUserRepository(conn)
    calendar_repo = MySQLCalendarRepository(conn)
    sections_repo = MySQLSectionRepository(conn)
    enrollments_repo = MySQLEnrollmentRepository(conn)
    events_repo = MySQLAttendanceEventRepository(conn)
    presence_repo = MySQLPresenceRepository(conn)
    roster_repo = MySQLRosterRepository(conn)
    records_repo = MySQLAttendanceRecordRepository(conn)

    calendar_service = CalendarService(calendar_repo)
    schedule_matcher = ScheduleMatcher(calendar_service, sections_repo)
    gate = EligibilityGate(
        rule_factory=EligibilityRuleFactory(
            checkin_lead_minutes=checkin_lead_minutes,
            wave_lead_minutes=wave_lead_minutes,
        )
    )
    attendance_service = AttendanceService(
        sections_repo,
        events_repo,
        presence_repo,
        clock=clock,
        gate=gate,
        matcher=schedule_matcher,
        default_geofence_radius=default_geofence_radius,
    )
    teacher_agenda_service = TeacherAgendaService(
        schedule_matcher,
        sections_repo,
        roster_repo,
        records_repo,
        events_repo,
        presence_repo,
        clock=clock,
    )

    return Container(
        clock=clock,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        calendar_service=calendar_service,
        section_service=SectionService(sections_repo, enrollments_repo),
        schedule_matcher=schedule_matcher,
        attendance_service=attendance_service,
        teacher_agenda_service=teacher_agenda_service,
        conn=conn,
    )
