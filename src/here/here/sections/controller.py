from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, json_error, role_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .service import build_section_draft

logger = logging.getLogger(__name__)


def _draft_from(payload: dict):
    return build_section_draft(
        name=payload.get("name", ""),
        section_type=payload.get("section_type", ""),
        start_time=payload.get("start_time", ""),
        end_time=payload.get("end_time", ""),
        schedule_pattern=payload.get("schedule_pattern", ""),
        days_of_week=payload.get("days_of_week"),
        presence_enabled=payload.get("presence_enabled", True),
        attendance_enabled=payload.get("attendance_enabled", True),
        expected_location=payload.get("expected_location"),
        geofence_radius=payload.get("geofence_radius"),
    )


def register(app: Flask, container: Container) -> None:
    def _handle(action, failure: str):
        try:
            return action()
        except ValidationError as e:
            return json_error(str(e))
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception(failure)
            return json_error(failure, 500)

    @app.route("/admin/sections", methods=["GET"], endpoint="admin_sections")
    @role_required(Role.ADMIN)
    def admin_sections():
        sections = container.section_service.list_sections()
        return jsonify({"success": True, "sections": [s.to_dict() for s in sections]})

    @app.route("/admin/sections", methods=["POST"], endpoint="admin_sections_create")
    @role_required(Role.ADMIN)
    def admin_sections_create():
        def action():
            section_id = container.section_service.create_section(
                current_role=current_role(),
                draft=_draft_from(request.get_json(silent=True) or {}),
                created_by=current_user_id(),
            )
            return jsonify({"success": True, "section_id": section_id}), 201

        return _handle(action, "System error while creating section")

    @app.route("/admin/sections/<int:section_id>", methods=["PUT"], endpoint="admin_sections_update")
    @role_required(Role.ADMIN)
    def admin_sections_update(section_id: int):
        def action():
            container.section_service.update_section(
                current_role=current_role(),
                section_id=section_id,
                draft=_draft_from(request.get_json(silent=True) or {}),
            )
            return jsonify({"success": True})

        return _handle(action, "System error while updating section")

    @app.route("/admin/sections/<int:section_id>", methods=["DELETE"], endpoint="admin_sections_delete")
    @role_required(Role.ADMIN)
    def admin_sections_delete(section_id: int):
        def action():
            container.section_service.delete_section(current_role=current_role(), section_id=section_id)
            return jsonify({"success": True})

        return _handle(action, "System error while deleting section")

    @app.route("/admin/sections/<int:section_id>/teacher", methods=["POST"], endpoint="admin_sections_teacher")
    @role_required(Role.ADMIN)
    def admin_sections_teacher(section_id: int):
        def action():
            payload = request.get_json(silent=True) or {}
            try:
                teacher_id = int(payload.get("teacher_id"))
            except (TypeError, ValueError):
                raise ValidationError("teacher_id is required")
            container.section_service.assign_teacher(
                current_role=current_role(), section_id=section_id, teacher_id=teacher_id
            )
            return jsonify({"success": True})

        return _handle(action, "System error while assigning teacher")

    @app.route("/admin/sections/<int:section_id>/enroll", methods=["POST"], endpoint="admin_sections_enroll")
    @role_required(Role.ADMIN)
    def admin_sections_enroll(section_id: int):
        def action():
            payload = request.get_json(silent=True) or {}
            try:
                student_ids = [int(s) for s in payload.get("student_ids") or []]
            except (TypeError, ValueError):
                raise ValidationError("student_ids must be a list of ids")
            result = container.section_service.enroll_students(
                current_role=current_role(), section_id=section_id, student_ids=student_ids
            )
            return jsonify(
                {
                    "success": True,
                    "enrolled": result.enrolled,
                    "reactivated": result.reactivated,
                    "skipped": result.skipped,
                }
            )

        return _handle(action, "System error while enrolling students")

    @app.route(
        "/admin/sections/<int:section_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="admin_sections_unenroll",
    )
    @role_required(Role.ADMIN)
    def admin_sections_unenroll(section_id: int, student_id: int):
        def action():
            container.section_service.unenroll_student(
                current_role=current_role(), section_id=section_id, student_id=student_id
            )
            return jsonify({"success": True})

        return _handle(action, "System error while unenrolling student")
