"""Typed condition payloads, one model per alert kind.

Alerts are stored with an open JSON ``conditions`` bag whose shape depends on
the alert kind. The bag is decoded into one of the models below as soon as an
:class:`~pfm_api.domain.entities.alert.Alert` is built, so evaluators always
receive validated, typed values.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pfm_api.domain.exceptions import AlertConfigurationError


class AlertKind(str, Enum):
    """Closed set of alert kinds understood by the engine."""

    ACCOUNT_THRESHOLD = "account_threshold"
    GOAL_MILESTONE = "goal_milestone"
    MERCHANT_NAME = "merchant_name"
    SPENDING_TARGET = "spending_target"
    TRANSACTION_LIMIT = "transaction_limit"
    UPCOMING_BILL = "upcoming_bill"


class _Conditions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def reference_id(self) -> int | None:
        """Identifier of the watched entity carried inside the payload, if any."""

        return None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-safe representation stored in the database."""

        return self.model_dump(mode="json", exclude_none=True)


class AccountThresholdConditions(_Conditions):
    threshold: Decimal = Field(..., ge=0, description="Balance the account is compared to")
    direction: Literal["below", "above"]
    account_id: int | None = None

    @property
    def reference_id(self) -> int | None:
        return self.account_id


class GoalMilestoneConditions(_Conditions):
    milestone_percentage: float = Field(..., ge=0, le=100)
    goal_id: int | None = None

    @property
    def reference_id(self) -> int | None:
        return self.goal_id


class MerchantNameConditions(_Conditions):
    merchant_pattern: str = Field(..., min_length=1)
    match_type: Literal["exact", "contains"] = "contains"

    @field_validator("merchant_pattern")
    @classmethod
    def _reject_blank_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Merchant pattern is required")
        return value


class SpendingTargetConditions(_Conditions):
    threshold_percentage: float = Field(..., ge=0, le=200)
    budget_id: int | None = None

    @property
    def reference_id(self) -> int | None:
        return self.budget_id


class TransactionLimitConditions(_Conditions):
    amount: Decimal = Field(..., ge=0, description="Largest absolute amount allowed")
    account_id: int | None = None

    @property
    def reference_id(self) -> int | None:
        return self.account_id


class UpcomingBillConditions(_Conditions):
    days_before: int = Field(..., ge=0)
    bill_id: int | None = None

    @property
    def reference_id(self) -> int | None:
        return self.bill_id


AlertConditions = Union[
    AccountThresholdConditions,
    GoalMilestoneConditions,
    MerchantNameConditions,
    SpendingTargetConditions,
    TransactionLimitConditions,
    UpcomingBillConditions,
]

CONDITION_MODELS: Mapping[AlertKind, type[_Conditions]] = {
    AlertKind.ACCOUNT_THRESHOLD: AccountThresholdConditions,
    AlertKind.GOAL_MILESTONE: GoalMilestoneConditions,
    AlertKind.MERCHANT_NAME: MerchantNameConditions,
    AlertKind.SPENDING_TARGET: SpendingTargetConditions,
    AlertKind.TRANSACTION_LIMIT: TransactionLimitConditions,
    AlertKind.UPCOMING_BILL: UpcomingBillConditions,
}


def coerce_alert_kind(value: AlertKind | str) -> AlertKind:
    """Return ``value`` as an :class:`AlertKind` or raise a configuration error."""

    if isinstance(value, AlertKind):
        return value
    try:
        return AlertKind(value)
    except ValueError as exc:
        raise AlertConfigurationError(
            f"Unsupported alert kind: {value!r}",
            [{"field": "alert_kind", "message": f"Unsupported alert kind: {value!r}"}],
        ) from exc


def parse_conditions(
    kind: AlertKind | str, payload: Mapping[str, Any] | _Conditions | None
) -> AlertConditions:
    """Decode ``payload`` into the condition model registered for ``kind``."""

    alert_kind = coerce_alert_kind(kind)
    model = CONDITION_MODELS[alert_kind]

    if isinstance(payload, _Conditions):
        if isinstance(payload, model):
            return payload
        msg = (
            f"{type(payload).__name__} cannot be used for {alert_kind.value} alerts"
        )
        raise AlertConfigurationError(msg, [{"field": "conditions", "message": msg}])

    if payload is None or not isinstance(payload, Mapping):
        msg = f"Conditions for {alert_kind.value} alerts must be an object"
        raise AlertConfigurationError(msg, [{"field": "conditions", "message": msg}])

    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "conditions",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise AlertConfigurationError(
            f"Invalid conditions for {alert_kind.value} alert", errors
        ) from exc


__all__ = [
    "AccountThresholdConditions",
    "AlertConditions",
    "AlertKind",
    "CONDITION_MODELS",
    "GoalMilestoneConditions",
    "MerchantNameConditions",
    "SpendingTargetConditions",
    "TransactionLimitConditions",
    "UpcomingBillConditions",
    "coerce_alert_kind",
    "parse_conditions",
]
