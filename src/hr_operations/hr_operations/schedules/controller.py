from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    actor_required,
    arg_date,
    body_date,
    body_int,
    body_str,
    current_actor_id,
    json_body,
    to_json,
)
from ..container import Container
from .service import NewShiftSchedule


def register(app: Flask, container: Container) -> None:
    schedules = container.schedule_service

    @app.route("/api/employees/<int:employee_id>/schedules", methods=["GET"], endpoint="api_schedules_list")
    @actor_required
    def list_schedules(employee_id: int):
        items = schedules.list_for_employee(
            actor_id=current_actor_id(),
            employee_id=employee_id,
            start=arg_date("start"),
            end=arg_date("end"),
        )
        return jsonify({"schedules": to_json(list(items))})

    @app.route("/api/schedules", methods=["POST"], endpoint="api_schedules_create")
    @actor_required
    def create_schedule():
        data = json_body()
        created = schedules.create(
            actor_id=current_actor_id(),
            data=NewShiftSchedule(
                employee_id=body_int(data, "employee_id"),
                start_time=body_str(data, "start_time") or "",
                end_time=body_str(data, "end_time") or "",
                day_of_week=body_int(data, "day_of_week", required=False),
                work_date=body_date(data, "date"),
                is_active=bool(data.get("is_active", True)),
                notes=body_str(data, "notes"),
            ),
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["PATCH"], endpoint="api_schedules_update")
    @actor_required
    def update_schedule(schedule_id: int):
        data = json_body()
        updated = schedules.update(
            actor_id=current_actor_id(),
            schedule_id=schedule_id,
            day_of_week=body_int(data, "day_of_week", required=False),
            work_date=body_date(data, "date"),
            start_time=body_str(data, "start_time"),
            end_time=body_str(data, "end_time"),
            is_active=data.get("is_active"),
            notes=body_str(data, "notes"),
        )
        return jsonify(to_json(updated))

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="api_schedules_delete")
    @actor_required
    def delete_schedule(schedule_id: int):
        schedules.delete(actor_id=current_actor_id(), schedule_id=schedule_id)
        return "", 204
