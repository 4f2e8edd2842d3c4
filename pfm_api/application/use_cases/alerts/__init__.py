"""Use cases for managing alert rules."""

from .create_alert import create_alert
from .delete_alert import delete_alert
from .list_alerts import get_alert, list_alerts
from .update_alert import disable_alert, enable_alert, update_alert

__all__ = [
    "create_alert",
    "delete_alert",
    "disable_alert",
    "enable_alert",
    "get_alert",
    "list_alerts",
    "update_alert",
]
