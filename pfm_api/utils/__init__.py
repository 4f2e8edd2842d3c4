"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    local_day_bounds,
    now_in_app_timezone,
    today_in_app_timezone,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "local_day_bounds",
    "now_in_app_timezone",
    "today_in_app_timezone",
]
