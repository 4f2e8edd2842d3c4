"""Use cases that change a notification's read or deleted state."""

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Notification
from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import NotificationRepository


def mark_notification_read(
    session: Session, *, user_id: int, notification_id: int
) -> Notification:
    """Flag a notification as read and stamp when it happened."""

    notification = NotificationRepository(session).mark_as_read(user_id, notification_id)
    if notification is None:
        raise ResourceNotFoundError(f"Notification {notification_id} not found")
    return notification


def mark_all_notifications_read(session: Session, *, user_id: int) -> int:
    """Mark every unread notification of ``user_id`` as read and return the count."""

    return NotificationRepository(session).mark_all_as_read(user_id)


def delete_notification(session: Session, *, user_id: int, notification_id: int) -> None:
    if not NotificationRepository(session).delete(user_id, notification_id):
        raise ResourceNotFoundError(f"Notification {notification_id} not found")
