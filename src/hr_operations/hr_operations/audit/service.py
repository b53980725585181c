from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import Clock
from ..core.enums import AuditAction
from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditTrail:
    """Records committed state changes.

    Audit is best effort: the business write has already been committed when
    `record` runs, so a storage failure is logged and not re-raised.
    """

    def __init__(self, audits: AuditRepository, *, clock: Clock):
        self._audits = audits
        self._clock = clock

    def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: int,
        actor_id: int,
        *,
        before: Optional[dict[str, Any]] = None,
        after: Optional[dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> None:
        entry = AuditEntry(
            action=action,
            entity_type=entity_type,
            entity_id=int(entity_id),
            actor_id=int(actor_id),
            created_at=self._clock.now(),
            before=before,
            after=after,
            reason=reason,
        )
        try:
            self._audits.add(entry)
        except Exception:
            logger.exception("Failed to log audit event %s %s#%s", action.value, entity_type, entity_id)

    def history(self, entity_type: str, entity_id: int):
        return self._audits.list_for_entity(entity_type=entity_type, entity_id=int(entity_id))
