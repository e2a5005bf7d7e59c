from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    type: NotificationType
    message: str
    created_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
            "metadata": {k: v for k, v in self.metadata.items() if v is not None},
        }


@dataclass(frozen=True)
class NotificationFeed:
    notifications: List[Notification]
    employee_found: bool = True

    def to_dict(self) -> dict:
        body: Dict[str, Any] = {"notifications": [n.to_dict() for n in self.notifications]}
        if not self.employee_found:
            body["metadata"] = {"employeeFound": False}
        return body
