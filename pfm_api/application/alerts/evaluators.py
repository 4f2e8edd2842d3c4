"""Evaluator strategies, one per alert kind.

Every evaluator implements the same two-step contract: ``evaluate`` is a pure
predicate over an alert and its subject, and ``notify`` renders the
notification content for a positive match without persisting anything.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, ClassVar

from pfm_api.domain.calculations import goal_progress, percent_used
from pfm_api.domain.entities import (
    AccountThresholdConditions,
    Account,
    Alert,
    AlertKind,
    BillDue,
    BudgetSpend,
    Goal,
    GoalMilestoneConditions,
    MerchantNameConditions,
    NotificationDraft,
    SpendingTargetConditions,
    Transaction,
    TransactionLimitConditions,
    UpcomingBillConditions,
)
from pfm_api.domain.exceptions import AlertConfigurationError


def format_amount(value: Decimal) -> str:
    """Render a monetary amount with two fixed decimals."""

    return f"{value:.2f}"


class AlertEvaluator(ABC):
    """Abstract base class for alert evaluators.

    Subclasses bind themselves to exactly one :class:`AlertKind` and declare
    the condition model they expect.
    """

    kind: ClassVar[AlertKind]
    conditions_type: ClassVar[type]

    @abstractmethod
    def evaluate(self, alert: Alert, subject: Any) -> bool:
        """Return whether ``alert`` matches the current state of ``subject``.

        Args:
            alert: The alert being evaluated.
            subject: The entity the alert watches.

        Returns:
            True if the alert should fire, False otherwise.
        """

    @abstractmethod
    def notify(self, alert: Alert, subject: Any) -> NotificationDraft:
        """Render the notification content for a positive match.

        Args:
            alert: The alert that matched.
            subject: The entity that made it match.

        Returns:
            The title, message and metadata explaining the match.
        """

    def conditions_of(self, alert: Alert):
        conditions = alert.conditions
        if not isinstance(conditions, self.conditions_type):
            raise AlertConfigurationError(
                f"{type(self).__name__} cannot evaluate {alert.alert_kind.value} alert {alert.id}"
            )
        return conditions


class AccountThresholdEvaluator(AlertEvaluator):
    """Fires when an account balance is strictly below or above a threshold."""

    kind = AlertKind.ACCOUNT_THRESHOLD
    conditions_type = AccountThresholdConditions

    def evaluate(self, alert: Alert, subject: Account) -> bool:
        conditions: AccountThresholdConditions = self.conditions_of(alert)
        # Equality never fires so balances resting on a round threshold stay quiet.
        if conditions.direction == "below":
            return subject.balance < conditions.threshold
        return subject.balance > conditions.threshold

    def notify(self, alert: Alert, subject: Account) -> NotificationDraft:
        conditions: AccountThresholdConditions = self.conditions_of(alert)
        threshold = format_amount(conditions.threshold)
        balance = format_amount(subject.balance)
        return NotificationDraft(
            title=alert.name,
            message=(
                f"Your {subject.name} balance is {conditions.direction} ${threshold}. "
                f"Current balance: ${balance}"
            ),
            metadata={
                "account_id": str(subject.id),
                "current_balance": balance,
                "threshold": threshold,
                "direction": conditions.direction,
            },
        )


class GoalMilestoneEvaluator(AlertEvaluator):
    """Fires once a goal has reached or passed a progress milestone."""

    kind = AlertKind.GOAL_MILESTONE
    conditions_type = GoalMilestoneConditions

    def evaluate(self, alert: Alert, subject: Goal) -> bool:
        conditions: GoalMilestoneConditions = self.conditions_of(alert)
        return goal_progress(subject) >= conditions.milestone_percentage

    def notify(self, alert: Alert, subject: Goal) -> NotificationDraft:
        conditions: GoalMilestoneConditions = self.conditions_of(alert)
        progress = goal_progress(subject)
        return NotificationDraft(
            title=alert.name,
            message=f'Your goal "{subject.name}" has reached {progress:.1f}% completion!',
            metadata={
                "goal_id": str(subject.id),
                "goal_type": subject.goal_type,
                "current_amount": format_amount(subject.current_amount),
                "target_amount": format_amount(subject.target_amount),
                "progress": round(progress, 2),
                "milestone": conditions.milestone_percentage,
            },
        )


class MerchantNameEvaluator(AlertEvaluator):
    """Fires when a new transaction's merchant matches a pattern."""

    kind = AlertKind.MERCHANT_NAME
    conditions_type = MerchantNameConditions

    def evaluate(self, alert: Alert, subject: Transaction) -> bool:
        conditions: MerchantNameConditions = self.conditions_of(alert)
        if not subject.merchant_name:
            return False

        merchant_name = subject.merchant_name.lower()
        pattern = conditions.merchant_pattern.lower()
        if conditions.match_type == "exact":
            return merchant_name == pattern
        return pattern in merchant_name

    def notify(self, alert: Alert, subject: Transaction) -> NotificationDraft:
        conditions: MerchantNameConditions = self.conditions_of(alert)
        amount = format_amount(abs(subject.amount))
        return NotificationDraft(
            title=alert.name,
            message=f"Transaction detected: {subject.merchant_name} for ${amount}",
            metadata={
                "transaction_id": str(subject.id),
                "merchant_name": subject.merchant_name,
                "amount": amount,
                "pattern": conditions.merchant_pattern,
                "match_type": conditions.match_type,
            },
        )


class SpendingTargetEvaluator(AlertEvaluator):
    """Fires when spend against a budget reaches a percentage of its amount."""

    kind = AlertKind.SPENDING_TARGET
    conditions_type = SpendingTargetConditions

    def evaluate(self, alert: Alert, subject: BudgetSpend) -> bool:
        conditions: SpendingTargetConditions = self.conditions_of(alert)
        used = percent_used(subject.spent, subject.budget.budget_amount)
        return used >= conditions.threshold_percentage

    def notify(self, alert: Alert, subject: BudgetSpend) -> NotificationDraft:
        conditions: SpendingTargetConditions = self.conditions_of(alert)
        budget = subject.budget
        used = percent_used(subject.spent, budget.budget_amount)
        spent = format_amount(subject.spent)
        budget_amount = format_amount(budget.budget_amount)
        return NotificationDraft(
            title=alert.name,
            message=(
                f'Your "{budget.name}" budget is at {used:.1f}% '
                f"(${spent} of ${budget_amount})"
            ),
            metadata={
                "budget_id": str(budget.id),
                "spent": spent,
                "budget_amount": budget_amount,
                "percent_used": round(used, 2),
                "threshold": conditions.threshold_percentage,
            },
        )


class TransactionLimitEvaluator(AlertEvaluator):
    """Fires when a single transaction's absolute amount exceeds a limit."""

    kind = AlertKind.TRANSACTION_LIMIT
    conditions_type = TransactionLimitConditions

    def evaluate(self, alert: Alert, subject: Transaction) -> bool:
        conditions: TransactionLimitConditions = self.conditions_of(alert)
        return abs(subject.amount) > conditions.amount

    def notify(self, alert: Alert, subject: Transaction) -> NotificationDraft:
        conditions: TransactionLimitConditions = self.conditions_of(alert)
        amount = format_amount(abs(subject.amount))
        limit = format_amount(conditions.amount)
        return NotificationDraft(
            title=alert.name,
            message=(
                f"Large transaction detected: {subject.description or 'Transaction'} "
                f"for ${amount} exceeds your limit of ${limit}"
            ),
            metadata={
                "transaction_id": str(subject.id),
                "account_id": str(subject.account_id) if subject.account_id is not None else None,
                "amount": amount,
                "limit": limit,
                "description": subject.description,
            },
        )


class UpcomingBillEvaluator(AlertEvaluator):
    """Fires when a bill is due within the configured number of days."""

    kind = AlertKind.UPCOMING_BILL
    conditions_type = UpcomingBillConditions

    def evaluate(self, alert: Alert, subject: BillDue) -> bool:
        conditions: UpcomingBillConditions = self.conditions_of(alert)
        return 0 <= subject.days_until_due <= conditions.days_before

    def notify(self, alert: Alert, subject: BillDue) -> NotificationDraft:
        conditions: UpcomingBillConditions = self.conditions_of(alert)
        amount = format_amount(subject.bill.amount)
        return NotificationDraft(
            title=alert.name,
            message=(
                f'Bill "{subject.bill.name}" for ${amount} is due '
                f"{describe_days_until_due(subject.days_until_due)}"
            ),
            metadata={
                "bill_id": str(subject.bill.id),
                "amount": amount,
                "due_date": subject.due_date.isoformat(),
                "days_until_due": subject.days_until_due,
                "days_before_alert": conditions.days_before,
            },
        )


def describe_days_until_due(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


__all__ = [
    "AccountThresholdEvaluator",
    "AlertEvaluator",
    "GoalMilestoneEvaluator",
    "MerchantNameEvaluator",
    "SpendingTargetEvaluator",
    "TransactionLimitEvaluator",
    "UpcomingBillEvaluator",
    "describe_days_until_due",
    "format_amount",
]
