from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import current_role, current_user_id, json_error, login_required, role_required
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _user_json(user) -> dict:
    return {
        "user_id": user.user_id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "primary_role": user.primary_role.value,
        "roles": [r.value for r in user.roles],
        "is_active": user.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        payload = request.get_json(silent=True) or request.form
        email = payload.get("email", "")
        password = payload.get("password", "")

        try:
            s_user = container.auth_service.authenticate(email, password)
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except Exception:
            logger.exception("Login failed for %s", email)
            return json_error("System error during login", 500)

        session.clear()
        session.permanent = bool(payload.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["roles"] = [r.value for r in s_user.available_roles]

        return jsonify({"success": True, "role": s_user.role.value, "roles": session["roles"]})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/me", endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "user_id": current_user_id(),
                "name": session.get("name"),
                "role": session.get("role"),
                "roles": session.get("roles", []),
            }
        )

    @app.route("/switch-role", methods=["POST"], endpoint="switch_role")
    @login_required
    def switch_role():
        payload = request.get_json(silent=True) or request.form
        try:
            role = container.auth_service.switch_role(user_id=current_user_id(), role=payload.get("role", ""))
        except (AuthorizationError, AuthenticationError) as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception("Role switch failed")
            return json_error("System error while switching role", 500)

        session["role"] = role.value
        return jsonify({"success": True, "role": role.value})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @role_required(Role.ADMIN)
    def admin_users():
        role_s = request.args.get("role")
        try:
            role = Role(role_s) if role_s else None
        except ValueError:
            return json_error("Invalid role")
        users = container.user_service.list_users(role=role)
        return jsonify({"success": True, "users": [_user_json(u) for u in users]})

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @role_required(Role.ADMIN)
    def add_user():
        payload = request.get_json(silent=True) or {}
        try:
            try:
                primary_role = Role(payload.get("primary_role", "student"))
                extra_roles = [Role(r) for r in payload.get("extra_roles") or []]
            except ValueError:
                raise ValidationError("Invalid role")

            user_id = container.user_service.create_account(
                current_role=current_role(),
                email=payload.get("email", ""),
                first_name=payload.get("first_name", ""),
                last_name=payload.get("last_name", ""),
                password=payload.get("password", ""),
                primary_role=primary_role,
                extra_roles=extra_roles,
            )
        except ValidationError as e:
            return json_error(str(e))
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception("Creating user failed")
            return json_error("System error while creating user", 500)

        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/admin/users/<int:user_id>/deactivate", methods=["POST"], endpoint="deactivate_user")
    @role_required(Role.ADMIN)
    def deactivate_user(user_id: int):
        try:
            container.user_service.deactivate(current_role=current_role(), user_id=user_id)
        except ValidationError as e:
            return json_error(str(e), 404)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception:
            logger.exception("Deactivating user %s failed", user_id)
            return json_error("System error while deactivating user", 500)
        return jsonify({"success": True})
