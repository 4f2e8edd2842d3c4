"""Use cases for modifying alert rules."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Alert
from pfm_api.domain.exceptions import ResourceNotFoundError
from pfm_api.infrastructure.repositories import AlertRepository

from .validators import SUBJECT_REQUIRED_KINDS, ensure_subject_reference, ensure_valid_name


def update_alert(
    session: Session,
    *,
    user_id: int,
    alert_id: int,
    name: str | None = None,
    conditions: Mapping[str, Any] | None = None,
    email_delivery: bool | None = None,
    sms_delivery: bool | None = None,
    active: bool | None = None,
) -> Alert:
    """Apply the provided changes to an alert owned by ``user_id``."""

    repository = AlertRepository(session)
    current = repository.get(user_id, alert_id)
    if current is None:
        raise ResourceNotFoundError(f"Alert {alert_id} not found")

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = ensure_valid_name(name)
    if conditions is not None:
        # ``replace`` re-runs construction, which decodes the new payload.
        changes["conditions"] = dict(conditions)
    if email_delivery is not None:
        changes["email_delivery"] = email_delivery
    if sms_delivery is not None:
        changes["sms_delivery"] = sms_delivery
    if active is not None:
        changes["active"] = active

    updated = replace(current, **changes)
    if conditions is not None:
        # New conditions own the reference; optional scopes may be dropped.
        reference_id = updated.conditions.reference_id
        if reference_id is not None or updated.alert_kind not in SUBJECT_REQUIRED_KINDS:
            updated.source_id = reference_id
        ensure_subject_reference(session, updated)
    return repository.update(updated)


def enable_alert(session: Session, *, user_id: int, alert_id: int) -> Alert:
    """Resume evaluation of an alert."""

    return update_alert(session, user_id=user_id, alert_id=alert_id, active=True)


def disable_alert(session: Session, *, user_id: int, alert_id: int) -> Alert:
    """Stop evaluating an alert without deleting it."""

    return update_alert(session, user_id=user_id, alert_id=alert_id, active=False)
