from __future__ import annotations

from flask import Flask, request

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
    @app.route("/api/swaps", methods=["GET"], endpoint="list_swaps")
    @login_required
    def list_swaps():
        try:
            data = container.swap_service.list_visible(
                current_role=current_role(),
                user_id=current_user_id(),
                scope=request.args.get("scope"),
                status=request.args.get("status"),
            )
            return ok(data)
        except Exception as e:
            return error_response(e, action="list swap requests")

    @app.route("/api/swaps", methods=["POST"], endpoint="propose_swap")
    @login_required
    def propose_swap():
        body = json_body()
        try:
            swap_id = container.swap_service.propose(
                requester_id=current_user_id(),
                target_id=body.get("targetUserId"),
                requester_schedule_id=body.get("myScheduleId"),
                target_schedule_id=body.get("targetScheduleId"),
                reason=body.get("reason"),
            )
            return ok({"id": swap_id}, message="Swap request created", status=201)
        except Exception as e:
            return error_response(e, action="create the swap request")

    @app.route("/api/swaps/<int:swap_id>/approve", methods=["PUT"], endpoint="approve_swap")
    @approver_required
    def approve_swap(swap_id: int):
        try:
            settlement = container.swap_service.approve(
                current_role=current_role(),
                approver_id=current_user_id(),
                swap_id=swap_id,
            )
            return ok(
                {
                    "id": swap_id,
                    "updated": len(settlement.updates),
                    "created": len(settlement.inserts),
                },
                message="Swap approved, schedules updated",
            )
        except Exception as e:
            return error_response(e, action="approve the swap request")

    @app.route("/api/swaps/<int:swap_id>/reject", methods=["PUT"], endpoint="reject_swap")
    @approver_required
    def reject_swap(swap_id: int):
        try:
            container.swap_service.reject(
                current_role=current_role(),
                approver_id=current_user_id(),
                swap_id=swap_id,
            )
            return ok(message="Swap rejected")
        except Exception as e:
            return error_response(e, action="reject the swap request")

    @app.route("/api/swaps/<int:swap_id>/cancel", methods=["PUT"], endpoint="cancel_swap")
    @login_required
    def cancel_swap(swap_id: int):
        try:
            container.swap_service.cancel(user_id=current_user_id(), swap_id=swap_id)
            return ok(message="Swap request cancelled")
        except Exception as e:
            return error_response(e, action="cancel the swap request")
