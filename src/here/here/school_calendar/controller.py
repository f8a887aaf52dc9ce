from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import is_iso_date, parse_iso_date
from ..common.web import current_role, date_arg, json_error, login_required, role_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _import_json(result) -> dict:
    return {
        "success": result.success,
        "imported": result.imported,
        "skipped": result.skipped,
        "errors": list(result.errors),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/calendar/<day>", methods=["GET"], endpoint="resolve_day")
    @login_required
    def resolve_day(day: str):
        if not is_iso_date(day):
            return json_error("Date must be YYYY-MM-DD")
        try:
            resolved = container.calendar_service.resolve(parse_iso_date(day))
        except Exception:
            logger.exception("Resolving calendar day %s failed", day)
            return json_error("System error, please try again", 500)
        return jsonify(
            {
                "date": resolved.calendar_date.isoformat(),
                "is_school_day": resolved.is_school_day,
                "ab_designation": resolved.ab_designation.value if resolved.ab_designation else None,
            }
        )

    @app.route("/admin/calendar", methods=["GET"], endpoint="admin_calendar")
    @role_required(Role.ADMIN)
    def admin_calendar():
        try:
            days = container.calendar_service.list_days(start=date_arg("start"), end=date_arg("end"))
        except Exception:
            logger.exception("Listing calendar days failed")
            return json_error("System error, please try again", 500)
        return jsonify(
            {
                "success": True,
                "days": [
                    {
                        "date": d.calendar_date.isoformat(),
                        "is_school_day": d.is_school_day,
                        "ab_designation": d.ab_designation.value if d.ab_designation else None,
                        "notes": d.notes,
                    }
                    for d in days
                ],
            }
        )

    @app.route("/admin/calendar/upload", methods=["POST"], endpoint="admin_calendar_upload")
    @role_required(Role.ADMIN)
    def admin_calendar_upload():
        try:
            upload = request.files.get("file")
            if upload is not None:
                text = upload.read().decode("utf-8-sig")
                result = container.calendar_service.import_csv(current_role=current_role(), text=text)
            else:
                payload = request.get_json(silent=True) or {}
                entries = [(str(e.get("date", "")), str(e.get("day_type", ""))) for e in payload.get("entries") or []]
                if not entries:
                    raise ValidationError("No calendar entries supplied")
                result = container.calendar_service.replace_calendar(current_role=current_role(), entries=entries)
        except ValidationError as e:
            return json_error(str(e))
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except UnicodeDecodeError:
            return json_error("CSV file must be UTF-8 encoded")
        except Exception:
            logger.exception("Calendar import failed")
            return json_error("System error while importing the calendar", 500)

        return jsonify(_import_json(result)), (200 if result.success else 400)

    @app.route("/admin/calendar/<day>/off", methods=["POST", "DELETE"], endpoint="admin_calendar_day_off")
    @role_required(Role.ADMIN)
    def admin_calendar_day_off(day: str):
        if not is_iso_date(day):
            return json_error("Date must be YYYY-MM-DD")
        try:
            if request.method == "POST":
                container.calendar_service.mark_day_off(current_role=current_role(), calendar_date=parse_iso_date(day))
            else:
                container.calendar_service.unmark_day_off(current_role=current_role(), calendar_date=parse_iso_date(day))
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception("Updating day off %s failed", day)
            return json_error("System error while updating the calendar", 500)
        return jsonify({"success": True})
