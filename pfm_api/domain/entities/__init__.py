"""Domain entities exposed by the application."""

from .alert import (
    SOURCE_TYPE_ACCOUNT,
    SOURCE_TYPE_BILL,
    SOURCE_TYPE_BUDGET,
    SOURCE_TYPE_GOAL,
    SOURCE_TYPES,
    Alert,
    build_alert,
)
from .alert_conditions import (
    AccountThresholdConditions,
    AlertConditions,
    AlertKind,
    GoalMilestoneConditions,
    MerchantNameConditions,
    SpendingTargetConditions,
    TransactionLimitConditions,
    UpcomingBillConditions,
    parse_conditions,
)
from .finance import (
    GOAL_TYPE_PAYOFF,
    GOAL_TYPE_SAVINGS,
    RECURRENCE_BIWEEKLY,
    RECURRENCE_MONTHLY,
    RECURRENCE_WEEKLY,
    Account,
    BillDue,
    Budget,
    BudgetSpend,
    CashflowBill,
    Goal,
    Transaction,
)
from .notification import SYSTEM_EVENT_TYPE, Notification, NotificationDraft
from .user import AlertDestinations, User

__all__ = [
    "Account",
    "AccountThresholdConditions",
    "Alert",
    "AlertConditions",
    "AlertDestinations",
    "AlertKind",
    "BillDue",
    "Budget",
    "BudgetSpend",
    "CashflowBill",
    "GOAL_TYPE_PAYOFF",
    "GOAL_TYPE_SAVINGS",
    "Goal",
    "GoalMilestoneConditions",
    "MerchantNameConditions",
    "Notification",
    "NotificationDraft",
    "RECURRENCE_BIWEEKLY",
    "RECURRENCE_MONTHLY",
    "RECURRENCE_WEEKLY",
    "SOURCE_TYPES",
    "SOURCE_TYPE_ACCOUNT",
    "SOURCE_TYPE_BILL",
    "SOURCE_TYPE_BUDGET",
    "SOURCE_TYPE_GOAL",
    "SYSTEM_EVENT_TYPE",
    "SpendingTargetConditions",
    "Transaction",
    "TransactionLimitConditions",
    "UpcomingBillConditions",
    "User",
    "build_alert",
    "parse_conditions",
]
