"""Use case for soft-deleting alert rules."""

from sqlalchemy.orm import Session

from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import AlertRepository


def delete_alert(session: Session, *, user_id: int, alert_id: int) -> None:
    """Mark an alert as deleted so it is never evaluated again."""

    if not AlertRepository(session).delete(user_id, alert_id):
        raise ResourceNotFoundError(f"Alert {alert_id} not found")
