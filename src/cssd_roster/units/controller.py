from __future__ import annotations

from flask import Flask

from ..common.web import error_response, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/units", methods=["GET"], endpoint="list_units")
    @login_required
    def list_units():
        try:
            return ok([unit.to_dict() for unit in container.units_repo.list_active()])
        except Exception as e:
            return error_response(e, action="load units")
