"""Domain entities representing alert notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

SYSTEM_EVENT_TYPE = "system"


@dataclass
class Notification:
    """Immutable record of one successful alert match."""

    id: int | None
    user_id: int
    alert_id: int | None
    event_type: str
    title: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(frozen=True)
class NotificationDraft:
    """Rendered content for a notification that has not been stored yet."""

    title: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)


__all__ = ["Notification", "NotificationDraft", "SYSTEM_EVENT_TYPE"]
