from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import actor_required, body_int, body_str, body_timestamp, current_actor_id, json_body, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    workflow = container.adjustment_workflow
    tz = container.clock.tz

    @app.route("/api/adjustments", methods=["POST"], endpoint="api_adjustments_create")
    @actor_required
    def create_adjustment():
        data = json_body()
        created = workflow.create(
            actor_id=current_actor_id(),
            attendance_id=body_int(data, "attendance_id"),
            clock_in=body_timestamp(data, "clock_in", tz),
            clock_out=body_timestamp(data, "clock_out", tz),
            reason=body_str(data, "reason") or "",
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/adjustments/<int:adjustment_id>", methods=["GET"], endpoint="api_adjustments_get")
    @actor_required
    def get_adjustment(adjustment_id: int):
        return jsonify(to_json(workflow.get(actor_id=current_actor_id(), adjustment_id=adjustment_id)))

    @app.route("/api/adjustments/<int:adjustment_id>", methods=["PATCH"], endpoint="api_adjustments_update")
    @actor_required
    def update_adjustment(adjustment_id: int):
        data = json_body()
        updated = workflow.update(
            actor_id=current_actor_id(),
            adjustment_id=adjustment_id,
            clock_in=body_timestamp(data, "clock_in", tz),
            clock_out=body_timestamp(data, "clock_out", tz),
            reason=body_str(data, "reason"),
        )
        return jsonify(to_json(updated))

    @app.route("/api/adjustments/<int:adjustment_id>", methods=["DELETE"], endpoint="api_adjustments_delete")
    @actor_required
    def delete_adjustment(adjustment_id: int):
        workflow.delete(actor_id=current_actor_id(), adjustment_id=adjustment_id)
        return "", 204

    @app.route("/api/adjustments/<int:adjustment_id>/approve", methods=["POST"], endpoint="api_adjustments_approve")
    @actor_required
    def approve_adjustment(adjustment_id: int):
        approved = workflow.approve(approver_id=current_actor_id(), adjustment_id=adjustment_id)
        return jsonify(to_json(approved))

    @app.route("/api/adjustments/<int:adjustment_id>/reject", methods=["POST"], endpoint="api_adjustments_reject")
    @actor_required
    def reject_adjustment(adjustment_id: int):
        data = json_body()
        rejected = workflow.reject(
            approver_id=current_actor_id(),
            adjustment_id=adjustment_id,
            rejected_reason=body_str(data, "rejected_reason") or "",
        )
        return jsonify(to_json(rejected))

    @app.route("/api/employees/<int:employee_id>/adjustments", methods=["GET"], endpoint="api_adjustments_list")
    @actor_required
    def list_adjustments(employee_id: int):
        items = workflow.list_for_employee(actor_id=current_actor_id(), employee_id=employee_id)
        return jsonify({"adjustments": to_json(list(items))})

    @app.route("/api/adjustments/pending", methods=["GET"], endpoint="api_adjustments_pending")
    @actor_required
    def pending_adjustments():
        items = workflow.list_pending_for_approver(approver_id=current_actor_id())
        return jsonify({"adjustments": to_json(items)})
