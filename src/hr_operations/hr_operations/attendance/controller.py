from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import actor_required, body_str, current_actor_id, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    def _notes():
        data = request.get_json(silent=True) or {}
        return body_str(data, "notes") if isinstance(data, dict) else None

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @actor_required
    def clock_in():
        record = attendance.clock_in(current_actor_id(), notes=_notes())
        return jsonify(to_json(record)), 201

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @actor_required
    def clock_out():
        record = attendance.clock_out(current_actor_id(), notes=_notes())
        return jsonify(to_json(record))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @actor_required
    def today():
        return jsonify({"attendance": to_json(attendance.today_record(current_actor_id()))})
