from __future__ import annotations

from typing import Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, new_id
from .model import AuditEntry, AuditLog
from .repository import AuditLogRepository


def insert_audit_log(cur, entry: AuditEntry) -> str:
    """Write ``entry`` on an open cursor so it commits with the caller's change."""
    if not entry.entity_id:
        raise ValueError("audit entry needs an entity id")
    log_id = new_id()
    cur.execute(
        """
        INSERT INTO audit_logs(id, action, user_id, entity_type, entity_id, changes, reason)
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            log_id,
            entry.action.value,
            str(entry.user_id),
            entry.entity_type,
            str(entry.entity_id),
            entry.changes,
            entry.reason,
        ),
    )
    return log_id


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_recent_for_user(self, user_id: str, limit: int) -> Sequence[AuditLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, action, user_id, entity_type, entity_id, changes, reason, created_at
                FROM audit_logs
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (str(user_id), int(limit)),
            )
            return [
                AuditLog(
                    id=str(r["id"]),
                    action=AuditAction(r["action"]),
                    user_id=str(r["user_id"]),
                    entity_type=r["entity_type"],
                    entity_id=str(r["entity_id"]),
                    created_at=r["created_at"],
                    changes=r.get("changes"),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]
