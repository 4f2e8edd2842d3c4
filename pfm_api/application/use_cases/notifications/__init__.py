"""Use cases over the notification log."""

from .list_notifications import (
    count_unread_notifications,
    get_notification,
    list_notifications,
)
from .update_notifications import (
    delete_notification,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "count_unread_notifications",
    "delete_notification",
    "get_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
