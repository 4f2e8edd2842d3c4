"""Domain entities for the financial records alerts watch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

GOAL_TYPE_PAYOFF = "payoff"
GOAL_TYPE_SAVINGS = "savings"

RECURRENCE_MONTHLY = "monthly"
RECURRENCE_BIWEEKLY = "biweekly"
RECURRENCE_WEEKLY = "weekly"


@dataclass
class Account:
    """A financial account with a current balance."""

    id: int | None
    user_id: int
    name: str
    balance: Decimal
    account_type: str = "checking"
    archived_at: datetime | None = None


@dataclass
class Goal:
    """A savings or debt payoff goal."""

    id: int | None
    user_id: int
    name: str
    goal_type: str
    target_amount: Decimal
    current_amount: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)
    deleted_at: datetime | None = None

    @property
    def initial_value(self) -> Decimal | None:
        """Balance captured when a payoff goal was created, if recorded."""

        raw = (self.metadata or {}).get("initialValue")
        if raw in (None, ""):
            return None
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            return None


@dataclass
class Budget:
    """A spending budget over a period, optionally scoped to accounts and tags."""

    id: int | None
    user_id: int
    name: str
    budget_amount: Decimal
    account_ids: list[int] = field(default_factory=list)
    tag_names: list[str] = field(default_factory=list)
    month: int | None = None
    year: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    deleted_at: datetime | None = None


@dataclass
class Transaction:
    """A posted account transaction; debits carry negative amounts."""

    id: int | None
    user_id: int
    account_id: int | None
    amount: Decimal
    description: str | None = None
    merchant_name: str | None = None
    tag_name: str | None = None
    posted_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class CashflowBill:
    """A recurring bill due on a given day of the month."""

    id: int | None
    user_id: int
    name: str
    amount: Decimal
    due_day: int
    recurrence: str = RECURRENCE_MONTHLY
    account_id: int | None = None
    active: bool = True
    stopped_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(frozen=True)
class BudgetSpend:
    """A budget together with the amount spent in the evaluated period."""

    budget: Budget
    spent: Decimal


@dataclass(frozen=True)
class BillDue:
    """A bill together with its next projected due date."""

    bill: CashflowBill
    due_date: date
    days_until_due: int


__all__ = [
    "Account",
    "BillDue",
    "Budget",
    "BudgetSpend",
    "CashflowBill",
    "GOAL_TYPE_PAYOFF",
    "GOAL_TYPE_SAVINGS",
    "Goal",
    "RECURRENCE_BIWEEKLY",
    "RECURRENCE_MONTHLY",
    "RECURRENCE_WEEKLY",
    "Transaction",
]
