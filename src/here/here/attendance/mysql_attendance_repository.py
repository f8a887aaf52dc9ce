from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import EventType, InteractionType
from ..core.exceptions import DuplicateEventError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, is_duplicate_key, load_json
from .model import AttendanceEvent, Location, PresenceInteraction
from .repository import AttendanceEventRepository, PresenceRepository

logger = logging.getLogger(__name__)

_EVENT_SELECT = """
    SELECT
        ae.event_id, ae.student_id, ae.section_id, ae.event_type, ae.event_date,
        ae.occurred_at, ae.location, ae.location_verified,
        i.content AS prompt_text
    FROM attendance_events ae
    LEFT JOIN interactions i ON i.attendance_event_id = ae.event_id
"""


def _to_event(r: dict) -> AttendanceEvent:
    verified = r.get("location_verified")
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        student_id=int(r["student_id"]),
        section_id=int(r["section_id"]),
        event_type=EventType(r["event_type"]),
        event_date=r["event_date"],
        occurred_at=r["occurred_at"],
        location=Location.from_dict(load_json(r.get("location"))),
        location_verified=None if verified is None else bool(verified),
        prompt_text=r.get("prompt_text"),
    )


def _to_wave(r: dict) -> PresenceInteraction:
    return PresenceInteraction(
        interaction_id=int(r["interaction_id"]),
        student_id=int(r["author_id"]),
        section_id=int(r["section_id"]),
        interaction_date=r["interaction_date"],
        content=r["content"],
        created_at=r["created_at"],
    )


class MySQLAttendanceEventRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, *, student_id: int, section_id: int, on_date: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _EVENT_SELECT
                + """
                WHERE ae.student_id=%s AND ae.section_id=%s AND ae.event_date=%s
                ORDER BY ae.occurred_at ASC
                """,
                (int(student_id), int(section_id), on_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _EVENT_SELECT
                + """
                WHERE ae.section_id=%s AND ae.event_date=%s
                ORDER BY ae.occurred_at ASC
                """,
                (int(section_id), on_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def create_event(
        self,
        *,
        student_id: int,
        section_id: int,
        event_type: EventType,
        event_date: date,
        occurred_at: datetime,
        prompt_text: str,
        location: Optional[Location] = None,
        location_verified: Optional[bool] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        student_id, section_id, event_type, event_date, occurred_at, location, location_verified
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(student_id),
                        int(section_id),
                        event_type.value,
                        event_date,
                        occurred_at,
                        dump_json(location.to_dict()) if location else None,
                        None if location_verified is None else int(location_verified),
                    ),
                )
                event_id = int(cur.lastrowid)
                cur.execute(
                    """
                    INSERT INTO interactions(
                        interaction_type, author_id, section_id, attendance_event_id,
                        interaction_date, content, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        InteractionType.PROMPT_RESPONSE.value,
                        int(student_id),
                        int(section_id),
                        event_id,
                        event_date,
                        prompt_text,
                        occurred_at,
                    ),
                )
                return event_id
        except IntegrityError as e:
            if is_duplicate_key(e):
                logger.warning(
                    "Duplicate %s for student %s section %s on %s",
                    event_type.value,
                    student_id,
                    section_id,
                    event_date,
                )
                raise DuplicateEventError(event_type.value) from e
            raise


class MySQLPresenceRepository(PresenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_wave(
        self, *, student_id: int, section_id: int, on_date: date, content: str, created_at: datetime
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO interactions(interaction_type, author_id, section_id, interaction_date, content, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (InteractionType.PRESENCE.value, int(student_id), int(section_id), on_date, content, created_at),
            )
            return int(cur.lastrowid)

    def latest_for_student(self, *, student_id: int, section_id: int, on_date: date) -> Optional[PresenceInteraction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT interaction_id, author_id, section_id, interaction_date, content, created_at
                FROM interactions
                WHERE interaction_type=%s AND author_id=%s AND section_id=%s AND interaction_date=%s
                ORDER BY created_at DESC, interaction_id DESC
                LIMIT 1
                """,
                (InteractionType.PRESENCE.value, int(student_id), int(section_id), on_date),
            )
            r = fetchone(cur)
            return _to_wave(r) if r else None

    def list_for_section(self, *, section_id: int, on_date: date) -> Sequence[PresenceInteraction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT interaction_id, author_id, section_id, interaction_date, content, created_at
                FROM interactions
                WHERE interaction_type=%s AND section_id=%s AND interaction_date=%s
                ORDER BY created_at ASC, interaction_id ASC
                """,
                (InteractionType.PRESENCE.value, int(section_id), on_date),
            )
            return [_to_wave(r) for r in fetchall(cur)]
