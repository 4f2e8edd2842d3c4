"""ORM models used by the application infrastructure."""

from .user import UserModel
from .alert import AlertModel
from .notification import NotificationModel
from .finance import (
    AccountModel,
    BudgetModel,
    CashflowBillModel,
    GoalModel,
    TransactionModel,
)

__all__ = [
    "AccountModel",
    "AlertModel",
    "BudgetModel",
    "CashflowBillModel",
    "GoalModel",
    "NotificationModel",
    "TransactionModel",
    "UserModel",
]
