"""Alert rule evaluation and notification dispatch."""

from .dispatch import (
    AlertDispatcher,
    EvaluationSummary,
    build_alert_dispatcher,
    evaluate_alert,
    evaluate_all_user_alerts,
    evaluate_transaction_alerts,
    evaluate_upcoming_bills,
)
from .evaluators import (
    AccountThresholdEvaluator,
    AlertEvaluator,
    GoalMilestoneEvaluator,
    MerchantNameEvaluator,
    SpendingTargetEvaluator,
    TransactionLimitEvaluator,
    UpcomingBillEvaluator,
)
from .registry import BATCH_KINDS, DAILY_KINDS, EVALUATORS, TRANSACTION_KINDS, get_evaluator

__all__ = [
    "AccountThresholdEvaluator",
    "AlertDispatcher",
    "AlertEvaluator",
    "BATCH_KINDS",
    "DAILY_KINDS",
    "EVALUATORS",
    "EvaluationSummary",
    "GoalMilestoneEvaluator",
    "MerchantNameEvaluator",
    "SpendingTargetEvaluator",
    "TRANSACTION_KINDS",
    "TransactionLimitEvaluator",
    "UpcomingBillEvaluator",
    "build_alert_dispatcher",
    "evaluate_alert",
    "evaluate_all_user_alerts",
    "evaluate_transaction_alerts",
    "evaluate_upcoming_bills",
    "get_evaluator",
]
