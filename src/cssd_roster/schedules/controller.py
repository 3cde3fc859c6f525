from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.web import (
    approver_required,
    current_role,
    current_user_id,
    error_response,
    json_body,
    login_required,
    ok,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["GET"], endpoint="list_schedules")
    @approver_required
    def list_schedules():
        try:
            data = container.schedule_service.list_all(
                current_role=current_role(),
                start=parse_optional_date(request.args.get("startDate")),
                end=parse_optional_date(request.args.get("endDate")),
                user_id=request.args.get("userId"),
                unit_id=request.args.get("unitId"),
                shift_id=request.args.get("shiftId"),
            )
            return ok(data)
        except Exception as e:
            return error_response(e, action="load schedules")

    @app.route("/api/schedules/my-schedule", methods=["GET"], endpoint="my_schedule")
    @login_required
    def my_schedule():
        try:
            data = container.schedule_service.my_schedule(
                user_id=current_user_id(),
                start=parse_optional_date(request.args.get("startDate")),
                end=parse_optional_date(request.args.get("endDate")),
            )
            return ok(data)
        except Exception as e:
            return error_response(e, action="load your schedule")

    @app.route("/api/schedules", methods=["POST"], endpoint="assign_schedule")
    @approver_required
    def assign_schedule():
        body = json_body()
        try:
            entry = container.schedule_service.assign(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_id=body.get("userId"),
                work_date=parse_iso_date(body.get("date") or ""),
                unit_id=body.get("unitId"),
                shift_id=body.get("shiftId"),
                status=body.get("status"),
                notes=body.get("notes"),
            )
            return ok(entry.to_dict(), message="Schedule saved")
        except Exception as e:
            return error_response(e, action="save the schedule")

    @app.route("/api/schedules/bulk", methods=["POST"], endpoint="bulk_assign_schedules")
    @approver_required
    def bulk_assign_schedules():
        body = json_body()
        try:
            result = container.schedule_service.bulk_assign(
                current_role=current_role(),
                current_user_id=current_user_id(),
                items=body.get("schedules"),
            )
            extra = {"errors": result.errors} if result.errors else {}
            return ok(
                [entry.to_dict() for entry in result.saved],
                message=f"{len(result.saved)} schedules saved",
                status=201,
                **extra,
            )
        except Exception as e:
            return error_response(e, action="save the schedules")

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="update_schedule")
    @approver_required
    def update_schedule(schedule_id: int):
        body = json_body()
        try:
            entry = container.schedule_service.update(
                current_role=current_role(),
                schedule_id=schedule_id,
                unit_id=body.get("unitId"),
                shift_id=body.get("shiftId"),
                status=body.get("status"),
                notes=body.get("notes"),
            )
            return ok(entry.to_dict(), message="Schedule updated")
        except Exception as e:
            return error_response(e, action="update the schedule")

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="delete_schedule")
    @approver_required
    def delete_schedule(schedule_id: int):
        try:
            container.schedule_service.delete(current_role=current_role(), schedule_id=schedule_id)
            return ok(message="Schedule deleted")
        except Exception as e:
            return error_response(e, action="delete the schedule")
