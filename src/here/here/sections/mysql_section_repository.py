from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SchedulePattern, SectionType, Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, normalize_mysql_time
from .model import Enrollment, GeoPoint, Section, SectionDraft
from .repository import EnrollmentRepository, SectionRepository

_SECTION_COLUMNS = """
    s.section_id, s.name, s.section_type, s.start_time, s.end_time,
    s.schedule_pattern, s.days_of_week, s.presence_enabled, s.attendance_enabled,
    s.expected_location, s.geofence_radius
"""


def _to_section(r: dict) -> Section:
    return Section(
        section_id=int(r["section_id"]),
        name=r["name"],
        section_type=SectionType(r["section_type"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        schedule_pattern=SchedulePattern(r["schedule_pattern"]),
        days_of_week=Weekday(int(r.get("days_of_week") or 0) & 0b11111),
        presence_enabled=bool(r.get("presence_enabled", True)),
        attendance_enabled=bool(r.get("attendance_enabled", True)),
        expected_location=GeoPoint.from_dict(load_json(r.get("expected_location"))),
        geofence_radius=int(r["geofence_radius"]) if r.get("geofence_radius") is not None else None,
    )


def _draft_params(draft: SectionDraft) -> tuple:
    return (
        draft.name,
        draft.section_type.value,
        draft.start_time,
        draft.end_time,
        draft.schedule_pattern.value,
        int(draft.days_of_week),
        int(draft.presence_enabled),
        int(draft.attendance_enabled),
        dump_json(draft.expected_location.to_dict()) if draft.expected_location else None,
        draft.geofence_radius,
    )


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, section_id: int) -> Optional[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SECTION_COLUMNS} FROM sections s WHERE s.section_id=%s", (int(section_id),))
            r = fetchone(cur)
            return _to_section(r) if r else None

    def list_all(self) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SECTION_COLUMNS} FROM sections s ORDER BY s.start_time, s.name")
            return [_to_section(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SECTION_COLUMNS}
                FROM section_students ss
                JOIN sections s ON s.section_id = ss.section_id
                WHERE ss.student_id=%s AND ss.active=1
                """,
                (int(student_id),),
            )
            return [_to_section(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: int) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SECTION_COLUMNS}
                FROM section_teachers st
                JOIN sections s ON s.section_id = st.section_id
                WHERE st.teacher_id=%s
                """,
                (int(teacher_id),),
            )
            return [_to_section(r) for r in fetchall(cur)]

    def create(self, draft: SectionDraft, *, created_by: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sections(
                    name, section_type, start_time, end_time, schedule_pattern, days_of_week,
                    presence_enabled, attendance_enabled, expected_location, geofence_radius, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _draft_params(draft) + (created_by,),
            )
            return int(cur.lastrowid)

    def update(self, section_id: int, draft: SectionDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sections
                SET name=%s, section_type=%s, start_time=%s, end_time=%s, schedule_pattern=%s,
                    days_of_week=%s, presence_enabled=%s, attendance_enabled=%s,
                    expected_location=%s, geofence_radius=%s
                WHERE section_id=%s
                """,
                _draft_params(draft) + (int(section_id),),
            )
            # rowcount is 0 when nothing changed, so confirm the row exists.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM sections WHERE section_id=%s", (int(section_id),))
            return fetchone(cur) is not None

    def delete(self, section_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sections WHERE section_id=%s", (int(section_id),))
            return cur.rowcount > 0

    def assign_teacher(self, *, section_id: int, teacher_id: int, is_primary: bool = True) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO section_teachers(section_id, teacher_id, is_primary)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE is_primary=VALUES(is_primary)
                """,
                (int(section_id), int(teacher_id), int(is_primary)),
            )

    def is_teacher_assigned(self, *, section_id: int, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM section_teachers WHERE section_id=%s AND teacher_id=%s",
                (int(section_id), int(teacher_id)),
            )
            return fetchone(cur) is not None


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_section(self, section_id: int) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT enrollment_id, section_id, student_id, active, enrolled_at
                FROM section_students
                WHERE section_id=%s
                ORDER BY enrolled_at ASC
                """,
                (int(section_id),),
            )
            return [
                Enrollment(
                    enrollment_id=int(r["enrollment_id"]),
                    section_id=int(r["section_id"]),
                    student_id=int(r["student_id"]),
                    active=bool(r["active"]),
                    enrolled_at=r["enrolled_at"],
                )
                for r in fetchall(cur)
            ]

    def count_active(self, section_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM section_students WHERE section_id=%s AND active=1",
                (int(section_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def insert_many(self, *, section_id: int, student_ids: Sequence[int], enrolled_at: datetime) -> int:
        if not student_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO section_students(section_id, student_id, active, enrolled_at) VALUES(%s,%s,1,%s)",
                [(int(section_id), int(sid), enrolled_at) for sid in student_ids],
            )
            return len(student_ids)

    def reactivate_many(self, *, section_id: int, student_ids: Sequence[int], enrolled_at: datetime) -> int:
        if not student_ids:
            return 0
        placeholders = ",".join(["%s"] * len(student_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE section_students
                SET active=1, enrolled_at=%s
                WHERE section_id=%s AND student_id IN ({placeholders})
                """,
                (enrolled_at, int(section_id), *[int(sid) for sid in student_ids]),
            )
            return cur.rowcount

    def deactivate(self, *, section_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE section_students SET active=0 WHERE section_id=%s AND student_id=%s AND active=1",
                (int(section_id), int(student_id)),
            )
            return cur.rowcount > 0
