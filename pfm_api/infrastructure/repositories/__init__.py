"""Repository implementations for infrastructure layer."""

from .account_repository import AccountRepository
from .alert_repository import AlertRepository
from .budget_repository import BudgetRepository
from .cashflow_bill_repository import CashflowBillRepository
from .goal_repository import GoalRepository
from .notification_repository import NotificationRepository
from .transaction_repository import TransactionRepository
from .user_repository import UserRepository

__all__ = [
    "AccountRepository",
    "AlertRepository",
    "BudgetRepository",
    "CashflowBillRepository",
    "GoalRepository",
    "NotificationRepository",
    "TransactionRepository",
    "UserRepository",
]
