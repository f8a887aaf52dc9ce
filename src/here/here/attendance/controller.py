from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import is_iso_date, parse_iso_date
from ..common.web import current_user_id, date_arg, json_error, role_required
from ..core.enums import ActionType, Role
from ..container import Container
from .model import AgendaItem, Location, SectionStatus

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _status_json(status: SectionStatus) -> dict:
    return {
        "has_checked_in": status.has_checked_in,
        "has_checked_out": status.has_checked_out,
        "has_waved": status.has_waved,
        "plans": status.plans_text,
        "progress": status.progress_text,
        "wave_content": status.wave_content,
        "checked_in_at": _iso(status.checked_in_at),
        "checked_out_at": _iso(status.checked_out_at),
        "location_verified": status.location_verified,
    }


def _agenda_json(item: AgendaItem) -> dict:
    data = item.section.to_dict()
    data["status"] = _status_json(item.status)
    data["actions"] = {
        action.value: {"allowed": d.allowed, "reason": d.reason, "opens_at": _iso(d.opens_at)}
        for action, d in item.actions.items()
    }
    return data


def register(app: Flask, container: Container) -> None:
    def _run_gated(section_id: int, action: ActionType, record):
        """Check the time window first, then record; failures come back as 400 JSON."""
        payload = request.get_json(silent=True) or {}
        now = container.clock.now()
        raw_date = str(payload.get("date") or "")
        target_date = parse_iso_date(raw_date) if is_iso_date(raw_date) else now.date()

        try:
            gate = container.attendance_service.check_action(
                student_id=current_user_id(), section_id=section_id, action=action, target_date=target_date, now=now
            )
            result = gate if not gate.success else record(payload, now)
        except Exception:
            logger.exception("Student %s failed to %s section %s", current_user_id(), action.value, section_id)
            return json_error("System error, please try again", 500)

        return jsonify(result.to_dict()), (200 if result.success else 400)

    @app.route("/student/agenda", methods=["GET"], endpoint="student_agenda")
    @role_required(Role.STUDENT)
    def student_agenda():
        now = container.clock.now()
        on_date = date_arg("date", default=now.date())
        try:
            items = container.attendance_service.get_student_agenda(
                student_id=current_user_id(), on_date=on_date, now=now
            )
        except Exception:
            logger.exception("Loading agenda for student %s failed", current_user_id())
            return json_error("System error, please try again", 500)
        return jsonify({"date": on_date.isoformat(), "sections": [_agenda_json(i) for i in items]})

    @app.route("/student/sections/<int:section_id>/status", methods=["GET"], endpoint="student_section_status")
    @role_required(Role.STUDENT)
    def student_section_status(section_id: int):
        on_date = date_arg("date", default=container.clock.today())
        try:
            status = container.attendance_service.get_status(
                student_id=current_user_id(), section_id=section_id, on_date=on_date
            )
        except Exception:
            logger.exception("Loading status for student %s in section %s failed", current_user_id(), section_id)
            return json_error("System error, please try again", 500)
        return jsonify(_status_json(status))

    @app.route("/student/sections/<int:section_id>/wave", methods=["POST"], endpoint="student_wave")
    @role_required(Role.STUDENT)
    def student_wave(section_id: int):
        return _run_gated(
            section_id,
            ActionType.WAVE,
            lambda payload, now: container.attendance_service.record_presence_wave(
                student_id=current_user_id(), section_id=section_id, mood=payload.get("mood"), now=now
            ),
        )

    @app.route("/student/sections/<int:section_id>/check-in", methods=["POST"], endpoint="student_check_in")
    @role_required(Role.STUDENT)
    def student_check_in(section_id: int):
        return _run_gated(
            section_id,
            ActionType.CHECK_IN,
            lambda payload, now: container.attendance_service.record_check_in(
                student_id=current_user_id(),
                section_id=section_id,
                plans=payload.get("plans", ""),
                location=Location.from_dict(payload.get("location")),
                now=now,
            ),
        )

    @app.route("/student/sections/<int:section_id>/check-out", methods=["POST"], endpoint="student_check_out")
    @role_required(Role.STUDENT)
    def student_check_out(section_id: int):
        return _run_gated(
            section_id,
            ActionType.CHECK_OUT,
            lambda payload, now: container.attendance_service.record_check_out(
                student_id=current_user_id(), section_id=section_id, progress=payload.get("progress", ""), now=now
            ),
        )
