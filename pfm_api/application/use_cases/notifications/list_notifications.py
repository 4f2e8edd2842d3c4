"""Use cases for reading a user's notifications."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Notification
from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    user_id: int,
    read: bool | None = None,
    limit: int | None = 50,
    offset: int = 0,
) -> Sequence[Notification]:
    """Return the newest notifications first, optionally filtered by read state."""

    return NotificationRepository(session).list_for_user(
        user_id, read=read, limit=limit, offset=offset
    )


def get_notification(session: Session, *, user_id: int, notification_id: int) -> Notification:
    notification = NotificationRepository(session).get(user_id, notification_id)
    if notification is None:
        raise ResourceNotFoundError(f"Notification {notification_id} not found")
    return notification


def count_unread_notifications(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)
