"""Flask helpers shared by the JSON controllers."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Optional
from zoneinfo import ZoneInfo

from flask import jsonify, request, session

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_timestamp


def actor_required(view):
    """Reject requests without an authenticated employee in the session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"error": "unauthorized", "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_actor_id() -> int:
    return int(session["employee_id"])


def to_json(value: Any) -> Any:
    """Convert dataclasses, enums, dates and containers into JSON-ready values."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if is_dataclass(value):
        return {f.name: to_json(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return str(value)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    raw = request.args.get(name)
    return parse_iso_date(raw) if raw else default


def arg_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def body_int(data: dict, name: str, *, required: bool = True) -> Optional[int]:
    raw = data.get(name)
    if raw is None or raw == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def body_str(data: dict, name: str) -> Optional[str]:
    raw = data.get(name)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError(f"{name} must be a string")
    return raw


def body_date(data: dict, name: str) -> Optional[date]:
    raw = body_str(data, name)
    return parse_iso_date(raw) if raw else None


def body_timestamp(data: dict, name: str, tz: ZoneInfo) -> Optional[datetime]:
    raw = body_str(data, name)
    return parse_timestamp(raw, tz) if raw else None
