from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLog:
    id: str
    action: AuditAction
    user_id: str
    entity_type: str
    entity_id: str
    created_at: datetime
    changes: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class AuditEntry:
    """Audit row written in the same transaction as the change it records.

    ``entity_id`` may be left empty when the row being written does not have
    an id yet; the repository fills it in.
    """

    action: AuditAction
    user_id: str
    entity_type: str
    entity_id: Optional[str] = None
    changes: Optional[str] = None
    reason: Optional[str] = None
