from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import error_response, fail, json_body, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        try:
            s_user = container.auth_service.authenticate(body.get("nip", ""), body.get("password", ""))
        except Exception as e:
            return error_response(e, action="log in")

        session.clear()
        session.permanent = bool(body.get("remember"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return ok(s_user.to_dict(), message="Logged in")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.users_repo.get_by_id(int(session["user_id"]))
        if not user or not user.is_active:
            session.clear()
            return fail("Please log in to continue", 401)
        return ok({"id": user.user_id, "nip": user.nip, "name": user.name, "role": user.role.value, "position": user.position})
