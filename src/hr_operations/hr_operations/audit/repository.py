from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def add(self, entry: AuditEntry) -> int:
        raise NotImplementedError

    def list_for_entity(self, *, entity_type: str, entity_id: int, limit: int = 200) -> Sequence[AuditEntry]:
        raise NotImplementedError
