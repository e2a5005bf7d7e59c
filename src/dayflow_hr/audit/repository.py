from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditLog


class AuditLogRepository(Protocol):
    """Read side of the audit trail.

    Audit rows are written by the repositories that own the audited change
    (see ``insert_audit_log``), inside the same transaction.
    """

    def list_recent_for_user(self, user_id: str, limit: int) -> Sequence[AuditLog]:
        raise NotImplementedError
