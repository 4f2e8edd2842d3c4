"""Lookup table binding every alert kind to its evaluator."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pfm_api.domain.entities import AlertKind
from pfm_api.domain.exceptions import UnknownAlertKindError

from .evaluators import (
    AccountThresholdEvaluator,
    AlertEvaluator,
    GoalMilestoneEvaluator,
    MerchantNameEvaluator,
    SpendingTargetEvaluator,
    TransactionLimitEvaluator,
    UpcomingBillEvaluator,
)

# Kinds checked periodically against stored subjects.
BATCH_KINDS: frozenset[AlertKind] = frozenset(
    {AlertKind.ACCOUNT_THRESHOLD, AlertKind.GOAL_MILESTONE, AlertKind.SPENDING_TARGET}
)
# Kinds checked once per incoming transaction.
TRANSACTION_KINDS: frozenset[AlertKind] = frozenset(
    {AlertKind.MERCHANT_NAME, AlertKind.TRANSACTION_LIMIT}
)
# Kinds checked once a day against projected due dates.
DAILY_KINDS: frozenset[AlertKind] = frozenset({AlertKind.UPCOMING_BILL})


def _build_registry(*evaluators: AlertEvaluator) -> Mapping[AlertKind, AlertEvaluator]:
    registry = {evaluator.kind: evaluator for evaluator in evaluators}
    missing = set(AlertKind) - set(registry)
    if missing:
        names = ", ".join(sorted(kind.value for kind in missing))
        raise RuntimeError(f"No evaluator registered for alert kinds: {names}")
    return MappingProxyType(registry)


EVALUATORS: Mapping[AlertKind, AlertEvaluator] = _build_registry(
    AccountThresholdEvaluator(),
    GoalMilestoneEvaluator(),
    MerchantNameEvaluator(),
    SpendingTargetEvaluator(),
    TransactionLimitEvaluator(),
    UpcomingBillEvaluator(),
)


def get_evaluator(
    kind: AlertKind | str,
    registry: Mapping[AlertKind, AlertEvaluator] | None = None,
) -> AlertEvaluator:
    """Return the evaluator registered for ``kind``.

    Raises:
        UnknownAlertKindError: If ``kind`` is not a known alert kind or has no
            evaluator in ``registry``.
    """

    evaluators = EVALUATORS if registry is None else registry
    try:
        alert_kind = kind if isinstance(kind, AlertKind) else AlertKind(kind)
    except ValueError as exc:
        raise UnknownAlertKindError(kind) from exc

    evaluator = evaluators.get(alert_kind)
    if evaluator is None:
        raise UnknownAlertKindError(alert_kind)
    return evaluator


__all__ = [
    "BATCH_KINDS",
    "DAILY_KINDS",
    "EVALUATORS",
    "TRANSACTION_KINDS",
    "get_evaluator",
]
