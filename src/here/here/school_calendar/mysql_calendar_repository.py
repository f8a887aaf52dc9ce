from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ABDesignation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CalendarDay
from .repository import CalendarRepository


def _to_day(r: dict) -> CalendarDay:
    ab = r.get("ab_designation")
    return CalendarDay(
        calendar_date=r["calendar_date"],
        is_school_day=bool(r["is_school_day"]),
        ab_designation=ABDesignation(ab) if ab else None,
        notes=r.get("notes"),
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_date(self, calendar_date: date) -> Optional[CalendarDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT calendar_date, is_school_day, ab_designation, notes
                FROM calendar_days
                WHERE calendar_date=%s
                """,
                (calendar_date,),
            )
            r = fetchone(cur)
            return _to_day(r) if r else None

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CalendarDay]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("calendar_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("calendar_date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT calendar_date, is_school_day, ab_designation, notes
                FROM calendar_days
                {where}
                ORDER BY calendar_date ASC
                """,
                tuple(params),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def replace_all(self, days: Sequence[CalendarDay]) -> int:
        # Delete and insert share one connection/transaction; a failure rolls both back.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_days")
            if days:
                cur.executemany(
                    """
                    INSERT INTO calendar_days(calendar_date, is_school_day, ab_designation, notes)
                    VALUES(%s,%s,%s,%s)
                    """,
                    [
                        (
                            d.calendar_date,
                            int(d.is_school_day),
                            d.ab_designation.value if d.ab_designation else None,
                            d.notes,
                        )
                        for d in days
                    ],
                )
            return len(days)

    def upsert(self, day: CalendarDay) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendar_days(calendar_date, is_school_day, ab_designation, notes)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    is_school_day=VALUES(is_school_day),
                    ab_designation=VALUES(ab_designation),
                    notes=VALUES(notes)
                """,
                (
                    day.calendar_date,
                    int(day.is_school_day),
                    day.ab_designation.value if day.ab_designation else None,
                    day.notes,
                ),
            )

    def delete_by_date(self, calendar_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_days WHERE calendar_date=%s", (calendar_date,))
            return cur.rowcount > 0
