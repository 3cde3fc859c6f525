from __future__ import annotations

from flask import Flask

from ..common.web import error_response, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts", methods=["GET"], endpoint="list_shifts")
    @login_required
    def list_shifts():
        try:
            return ok([shift.to_dict() for shift in container.shifts_repo.list_active()])
        except Exception as e:
            return error_response(e, action="load shifts")
