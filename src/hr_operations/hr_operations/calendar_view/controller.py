from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import actor_required, arg_date, arg_int, current_actor_id, to_json
from ..container import Container
from ..core.exceptions import ValidationError
from ..schedules.model import DayView


def day_view_json(view: DayView) -> dict:
    return {
        "date": view.work_date.isoformat(),
        "employee_id": view.employee_id,
        "status": view.status.value,
        "schedule": to_json(view.display_schedule),
        "attendance": to_json(view.attendance),
        "leaves": to_json(list(view.leaves)),
    }


def register(app: Flask, container: Container) -> None:
    calendar = container.calendar_service

    @app.route("/api/employees/<int:employee_id>/calendar", methods=["GET"], endpoint="api_calendar_range")
    @actor_required
    def calendar_range(employee_id: int):
        start = arg_date("start")
        end = arg_date("end")
        if start is None or end is None:
            raise ValidationError("start and end are required")
        views = calendar.day_views(actor_id=current_actor_id(), employee_id=employee_id, start=start, end=end)
        return jsonify({"days": [day_view_json(v) for v in views]})

    @app.route("/api/employees/<int:employee_id>/calendar/week", methods=["GET"], endpoint="api_calendar_week")
    @actor_required
    def calendar_week(employee_id: int):
        views = calendar.week(actor_id=current_actor_id(), employee_id=employee_id, anchor=arg_date("date"))
        return jsonify({"days": [day_view_json(v) for v in views]})

    @app.route("/api/employees/<int:employee_id>/calendar/month", methods=["GET"], endpoint="api_calendar_month")
    @actor_required
    def calendar_month(employee_id: int):
        rows = calendar.month(
            actor_id=current_actor_id(),
            employee_id=employee_id,
            year=arg_int("year"),
            month=arg_int("month"),
        )
        return jsonify({"weeks": [[day_view_json(v) for v in row] for row in rows]})

    @app.route("/api/team/calendar/week", methods=["GET"], endpoint="api_team_week")
    @actor_required
    def team_week():
        team = calendar.team_week(actor_id=current_actor_id(), anchor=arg_date("date"))
        return jsonify(
            {"employees": {str(eid): [day_view_json(v) for v in views] for eid, views in team.items()}}
        )
