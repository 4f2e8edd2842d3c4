"""Use cases for alert delivery preferences."""

from .alert_destinations import (
    AlertDestinationUpdate,
    get_alert_destinations,
    update_alert_destinations,
)

__all__ = [
    "AlertDestinationUpdate",
    "get_alert_destinations",
    "update_alert_destinations",
]
