"""Use cases for a user's alert delivery addresses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError
from sqlalchemy.orm import Session

from pfm_api.domain.entities import AlertDestinations
from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import UserRepository


class AlertDestinationUpdate(BaseModel):
    """Addresses accepted when a user changes where alerts are sent."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr | None = None
    sms: str | None = Field(
        default=None, pattern=r"^\+?[1-9]\d{1,14}$", description="E.164 phone number"
    )


def get_alert_destinations(session: Session, *, user_id: int) -> AlertDestinations:
    """Return the email and SMS destinations configured for ``user_id``."""

    user = UserRepository(session).get(user_id)
    if user is None:
        raise ResourceNotFoundError(f"User {user_id} not found")
    return AlertDestinations.from_user(user)


def update_alert_destinations(
    session: Session,
    *,
    user_id: int,
    email: str | None = None,
    sms: str | None = None,
) -> AlertDestinations:
    """Change alert destinations; a changed address must be verified again."""

    try:
        update = AlertDestinationUpdate(email=email, sms=sms)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        raise ValueError(f"Invalid alert destination: {fields}") from exc

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise ResourceNotFoundError(f"User {user_id} not found")

    preferences = dict(user.preferences or {})
    if update.email:
        preferences["emailVerified"] = False
    if update.sms:
        preferences["alertSmsNumber"] = update.sms
        preferences["smsVerified"] = False

    saved = repository.update_destinations(
        user_id, email=update.email or None, preferences=preferences
    )
    return AlertDestinations.from_user(saved)
