from __future__ import annotations

import json
from typing import Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


def _dump(value) -> str | None:
    if value is None:
        return None
    return json.dumps(value, default=str, sort_keys=True)


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection, tz: ZoneInfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def add(self, entry: AuditEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(action, entity_type, entity_id, actor_id, before_json, after_json, reason, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.action.value,
                    entry.entity_type,
                    int(entry.entity_id),
                    int(entry.actor_id),
                    _dump(entry.before),
                    _dump(entry.after),
                    entry.reason,
                    to_utc_naive(entry.created_at, self._tz),
                ),
            )
            return int(cur.lastrowid)

    def list_for_entity(self, *, entity_type: str, entity_id: int, limit: int = 200) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, action, entity_type, entity_id, actor_id, before_json, after_json, reason, created_at
                FROM audit_logs
                WHERE entity_type=%s AND entity_id=%s
                ORDER BY created_at ASC, audit_id ASC
                LIMIT %s
                """,
                (entity_type, int(entity_id), int(limit)),
            )
            return [
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    action=AuditAction(r["action"]),
                    entity_type=r["entity_type"],
                    entity_id=int(r["entity_id"]),
                    actor_id=int(r["actor_id"]),
                    before=json.loads(r["before_json"]) if r.get("before_json") else None,
                    after=json.loads(r["after_json"]) if r.get("after_json") else None,
                    reason=r.get("reason"),
                    created_at=from_utc_naive(r["created_at"]),
                )
                for r in fetchall(cur)
            ]
