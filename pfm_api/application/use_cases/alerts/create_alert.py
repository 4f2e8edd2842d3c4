"""Use case for creating alert rules."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Alert, AlertKind, build_alert
from pfm_api.infrastructure.repositories import AlertRepository

from .validators import ensure_subject_reference, ensure_valid_name


def create_alert(
    session: Session,
    *,
    user_id: int,
    alert_kind: AlertKind | str,
    name: str,
    conditions: Mapping[str, Any],
    source_id: int | None = None,
    email_delivery: bool = True,
    sms_delivery: bool = False,
) -> Alert:
    """Validate and store a new active alert.

    Conditions are checked against the alert kind before anything is written,
    so only evaluable alerts ever reach the store.
    """

    alert = build_alert(
        user_id=user_id,
        alert_kind=alert_kind,
        name=ensure_valid_name(name),
        conditions=conditions,
        source_id=source_id,
        email_delivery=email_delivery,
        sms_delivery=sms_delivery,
        active=True,
    )
    ensure_subject_reference(session, alert)
    return AlertRepository(session).create(alert)
