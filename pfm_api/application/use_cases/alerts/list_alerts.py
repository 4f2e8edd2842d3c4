"""Use cases for reading alert rules."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Alert
from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import AlertRepository


def list_alerts(
    session: Session, *, user_id: int, include_inactive: bool = False
) -> Sequence[Alert]:
    """Return the user's alerts, active ones first."""

    return AlertRepository(session).list_for_user(
        user_id, include_inactive=include_inactive
    )


def get_alert(session: Session, *, user_id: int, alert_id: int) -> Alert:
    """Return one alert owned by ``user_id``."""

    alert = AlertRepository(session).get(user_id, alert_id)
    if alert is None:
        raise ResourceNotFoundError(f"Alert {alert_id} not found")
    return alert
