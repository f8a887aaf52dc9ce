from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.web import current_role, current_user_id, date_arg, json_error, login_required
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sections/active", methods=["GET"], endpoint="active_sections")
    @login_required
    def active_sections():
        on_date = date_arg("date", default=container.clock.today())
        try:
            sections = container.schedule_matcher.active_sections(
                person_id=current_user_id(), role=current_role(), on_date=on_date
            )
        except Exception:
            logger.exception("Loading active sections for user %s failed", current_user_id())
            return json_error("System error, please try again", 500)
        return jsonify({"date": on_date.isoformat(), "sections": [s.to_dict() for s in sections]})
