"""Domain entities describing a user and where their alerts are delivered."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    email: str | None
    first_name: str | None = None
    last_name: str | None = None
    preferences: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AlertDestinations:
    """Addresses consulted by the delivery channel for a user's alerts."""

    email: str | None
    sms: str | None
    email_verified: bool = False
    sms_verified: bool = False

    @classmethod
    def from_user(cls, user: User) -> "AlertDestinations":
        prefs = user.preferences or {}
        return cls(
            email=user.email or None,
            sms=prefs.get("alertSmsNumber") or None,
            email_verified=bool(prefs.get("emailVerified", False)),
            sms_verified=bool(prefs.get("smsVerified", False)),
        )


__all__ = ["AlertDestinations", "User"]
