from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from .datetime_utils import is_iso_date, parse_iso_date


def json_error(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Not authenticated", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    """Allow the view only when the session's active role is one of ``roles``."""

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Not authenticated", 401)
            if session.get("role") not in allowed:
                return json_error("You do not have permission to access this page", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def date_arg(name: str = "date", default: Optional[date] = None) -> Optional[date]:
    """Read a YYYY-MM-DD query argument; malformed values fall back to ``default``."""
    raw = (request.args.get(name) or "").strip()
    if raw and is_iso_date(raw):
        return parse_iso_date(raw)
    return default
