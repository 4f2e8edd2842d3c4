"""Domain entity representing a user-defined alert rule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .alert_conditions import (
    AlertConditions,
    AlertKind,
    coerce_alert_kind,
    parse_conditions,
)

SOURCE_TYPE_ACCOUNT = "account"
SOURCE_TYPE_GOAL = "goal"
SOURCE_TYPE_BUDGET = "budget"
SOURCE_TYPE_BILL = "bill"

# Entity type an alert kind watches; merchant alerts watch no stored entity.
SOURCE_TYPES: dict[AlertKind, str | None] = {
    AlertKind.ACCOUNT_THRESHOLD: SOURCE_TYPE_ACCOUNT,
    AlertKind.GOAL_MILESTONE: SOURCE_TYPE_GOAL,
    AlertKind.MERCHANT_NAME: None,
    AlertKind.SPENDING_TARGET: SOURCE_TYPE_BUDGET,
    AlertKind.TRANSACTION_LIMIT: SOURCE_TYPE_ACCOUNT,
    AlertKind.UPCOMING_BILL: SOURCE_TYPE_BILL,
}


@dataclass
class Alert:
    """A stored rule of one fixed kind with kind-specific conditions.

    ``conditions`` may be given as a raw mapping; it is decoded into the typed
    model for ``alert_kind`` on construction and an
    :class:`~pfm_api.domain.exceptions.AlertConfigurationError` is raised when
    the payload does not fit.
    """

    id: int | None
    user_id: int
    alert_kind: AlertKind
    name: str
    conditions: AlertConditions
    source_type: str | None = None
    source_id: int | None = None
    email_delivery: bool = True
    sms_delivery: bool = False
    active: bool = True
    last_triggered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        self.alert_kind = coerce_alert_kind(self.alert_kind)
        self.conditions = parse_conditions(self.alert_kind, self.conditions)

    @property
    def is_evaluable(self) -> bool:
        """Return ``True`` when the alert is active and not soft-deleted."""

        return self.active and self.deleted_at is None

    @property
    def subject_id(self) -> int | None:
        """Identifier of the watched entity.

        The weak ``source_id`` reference wins; older rows only carry the id
        inside their conditions.
        """

        if self.source_id is not None:
            return self.source_id
        return self.conditions.reference_id

    def conditions_payload(self) -> dict[str, Any]:
        return self.conditions.to_payload()


def build_alert(
    *,
    user_id: int,
    alert_kind: AlertKind | str,
    name: str,
    conditions: Mapping[str, Any],
    **fields: Any,
) -> Alert:
    """Construct a new, not yet persisted alert."""

    return Alert(
        id=None,
        user_id=user_id,
        alert_kind=alert_kind,
        name=name,
        conditions=conditions,
        **fields,
    )


__all__ = [
    "Alert",
    "SOURCE_TYPES",
    "SOURCE_TYPE_ACCOUNT",
    "SOURCE_TYPE_BILL",
    "SOURCE_TYPE_BUDGET",
    "SOURCE_TYPE_GOAL",
    "build_alert",
]
