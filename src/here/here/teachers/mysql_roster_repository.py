from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..core.enums import AttendanceMark
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceMarkInput, AttendanceRecord, StudentSummary
from .repository import AttendanceRecordRepository, RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_students(self, section_id: int) -> Sequence[StudentSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.first_name, u.last_name, u.email
                FROM section_students ss
                JOIN users u ON u.user_id = ss.student_id
                WHERE ss.section_id=%s AND ss.active=1
                """,
                (int(section_id),),
            )
            return [
                StudentSummary(
                    user_id=int(r["user_id"]),
                    first_name=r.get("first_name") or "",
                    last_name=r.get("last_name") or "",
                    email=r["email"],
                )
                for r in fetchall(cur)
            ]


class MySQLAttendanceRecordRepository(AttendanceRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, section_id, record_date, status, notes, marked_by, updated_at
                FROM attendance_records
                WHERE section_id=%s AND record_date=%s
                """,
                (int(section_id), on_date),
            )
            return [
                AttendanceRecord(
                    student_id=int(r["student_id"]),
                    section_id=int(r["section_id"]),
                    record_date=r["record_date"],
                    status=AttendanceMark(r["status"]),
                    notes=r.get("notes"),
                    marked_by=r.get("marked_by"),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]

    def save_marks(
        self,
        *,
        section_id: int,
        on_date: date,
        marks: Sequence[AttendanceMarkInput],
        clear_student_ids: Sequence[int],
        marked_by: int,
        updated_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if marks:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(student_id, section_id, record_date, status, notes, marked_by, updated_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status), notes=VALUES(notes),
                        marked_by=VALUES(marked_by), updated_at=VALUES(updated_at)
                    """,
                    [
                        (int(m.student_id), int(section_id), on_date, m.status.value, m.notes, int(marked_by), updated_at)
                        for m in marks
                    ],
                )
            if clear_student_ids:
                placeholders = ",".join(["%s"] * len(clear_student_ids))
                cur.execute(
                    f"""
                    DELETE FROM attendance_records
                    WHERE section_id=%s AND record_date=%s AND student_id IN ({placeholders})
                    """,
                    (int(section_id), on_date, *[int(sid) for sid in clear_student_ids]),
                )
            return len(marks)
