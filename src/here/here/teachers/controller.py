from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import is_iso_date, parse_iso_date
from ..common.web import current_user_id, date_arg, json_error, role_required
from ..core.enums import Role
from ..container import Container
from .model import RosterEntry, TeacherSectionAgenda

logger = logging.getLogger(__name__)


def _entry_json(entry: RosterEntry) -> dict:
    return {
        "student_id": entry.student.user_id,
        "first_name": entry.student.first_name,
        "last_name": entry.student.last_name,
        "email": entry.student.email,
        "attendance_status": entry.attendance_status.value if entry.attendance_status else None,
        "attendance_notes": entry.attendance_notes,
        "presence_mood": entry.presence_mood,
        "check_in_time": entry.check_in_time.isoformat() if entry.check_in_time else None,
        "check_in_verified": entry.check_in_verified,
        "check_out_time": entry.check_out_time.isoformat() if entry.check_out_time else None,
        "plans": entry.plans_text,
    }


def _section_json(agenda: TeacherSectionAgenda) -> dict:
    data = agenda.section.to_dict()
    data.update(
        {
            "total_students": agenda.total_students,
            "marked_students": agenda.marked_students,
            "presence_count": agenda.presence_count,
            "checked_in_count": agenda.checked_in_count,
            "students": [_entry_json(e) for e in agenda.students],
        }
    )
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/teacher/agenda", methods=["GET"], endpoint="teacher_agenda")
    @role_required(Role.TEACHER)
    def teacher_agenda():
        on_date = date_arg("date", default=container.clock.today())
        try:
            agenda = container.teacher_agenda_service.get_agenda(teacher_id=current_user_id(), on_date=on_date)
        except Exception:
            logger.exception("Loading teacher agenda failed")
            return json_error("System error while loading the agenda", 500)
        return jsonify({"date": on_date.isoformat(), "sections": [_section_json(a) for a in agenda]})

    @app.route("/teacher/sections/<int:section_id>/attendance", methods=["POST"], endpoint="teacher_save_attendance")
    @role_required(Role.TEACHER)
    def teacher_save_attendance(section_id: int):
        payload = request.get_json(silent=True) or {}
        raw_date = str(payload.get("date") or "")
        if not is_iso_date(raw_date):
            return json_error("Date must be YYYY-MM-DD")

        try:
            result = container.teacher_agenda_service.save_attendance(
                teacher_id=current_user_id(),
                section_id=section_id,
                on_date=parse_iso_date(raw_date),
                marks=payload.get("records") or [],
            )
        except Exception:
            logger.exception("Saving attendance for section %s failed", section_id)
            return json_error("System error while saving attendance", 500)

        return jsonify(result.to_dict()), (200 if result.success else 400)
