"""Validation helpers for alert use cases."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from pfm_api.application.alerts.registry import BATCH_KINDS, DAILY_KINDS
from pfm_api.domain.entities import (
    SOURCE_TYPE_ACCOUNT,
    SOURCE_TYPE_BILL,
    SOURCE_TYPE_BUDGET,
    SOURCE_TYPE_GOAL,
    SOURCE_TYPES,
    Alert,
)
from pfm_api.domain.exceptions import AlertConfigurationError, ResourceNotFoundError
from pfm_api.infrastructure.repositories import (
    AccountRepository,
    BudgetRepository,
    CashflowBillRepository,
    GoalRepository,
)

MAX_NAME_LENGTH = 255

# These kinds are evaluated against a stored entity and cannot exist without one.
SUBJECT_REQUIRED_KINDS = BATCH_KINDS | DAILY_KINDS


def ensure_valid_name(name: str) -> str:
    """Return ``name`` stripped, rejecting blank or oversized labels."""

    stripped = (name or "").strip()
    if not stripped:
        raise AlertConfigurationError(
            "Name is required", [{"field": "name", "message": "Name is required"}]
        )
    if len(stripped) > MAX_NAME_LENGTH:
        msg = f"Name must be {MAX_NAME_LENGTH} characters or less"
        raise AlertConfigurationError(msg, [{"field": "name", "message": msg}])
    return stripped


def _subject_loaders(session: Session) -> dict[str, Callable[..., Any]]:
    return {
        SOURCE_TYPE_ACCOUNT: AccountRepository(session).get,
        SOURCE_TYPE_GOAL: GoalRepository(session).get,
        SOURCE_TYPE_BUDGET: BudgetRepository(session).get,
        SOURCE_TYPE_BILL: CashflowBillRepository(session).get,
    }


def ensure_subject_reference(session: Session, alert: Alert) -> None:
    """Verify the entity ``alert`` watches and stamp its weak reference.

    The referenced entity must exist and belong to the alert owner.
    """

    subject_type = SOURCE_TYPES[alert.alert_kind]
    subject_id = alert.subject_id if subject_type else None

    if subject_id is None:
        if alert.alert_kind in SUBJECT_REQUIRED_KINDS:
            msg = f"{alert.alert_kind.value} alerts must reference a {subject_type}"
            raise AlertConfigurationError(msg, [{"field": "source_id", "message": msg}])
        alert.source_type = None
        alert.source_id = None
        return

    loader = _subject_loaders(session)[subject_type]
    if loader(subject_id, user_id=alert.user_id) is None:
        raise ResourceNotFoundError(
            f"{subject_type.capitalize()} not found or access denied"
        )
    alert.source_type = subject_type
    alert.source_id = subject_id


__all__ = ["MAX_NAME_LENGTH", "ensure_subject_reference", "ensure_valid_name"]
