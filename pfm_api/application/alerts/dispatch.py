"""Dispatch loop that resolves alert subjects and records notifications.

Three entry points exist, one per trigger cadence:

* :meth:`AlertDispatcher.evaluate_all_user_alerts` for the periodic batch over
  account, goal and budget alerts;
* :meth:`AlertDispatcher.evaluate_upcoming_bills` for the daily bill check;
* :meth:`AlertDispatcher.evaluate_transaction` for merchant and transaction
  limit alerts, called once per new transaction.

Batch entry points contain every per-alert failure and always return an
:class:`EvaluationSummary`. The transaction entry point lets errors reach its
caller.

A matched alert fires on every evaluation; ``last_triggered_at`` is stamped
but never consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pfm_api.domain.entities import (
    SOURCE_TYPE_ACCOUNT,
    SOURCE_TYPE_BILL,
    SOURCE_TYPE_BUDGET,
    SOURCE_TYPE_GOAL,
    Alert,
    AlertKind,
    Notification,
    NotificationDraft,
    Transaction,
)
from pfm_api.domain.exceptions import DanglingReferenceError, UnknownAlertKindError
from pfm_api.infrastructure.repositories import (
    AccountRepository,
    AlertRepository,
    BudgetRepository,
    CashflowBillRepository,
    GoalRepository,
    NotificationRepository,
)
from pfm_api.utils import now_in_app_timezone

from .evaluators import AlertEvaluator
from .registry import (
    BATCH_KINDS,
    DAILY_KINDS,
    EVALUATORS,
    TRANSACTION_KINDS,
    get_evaluator,
)

logger = logging.getLogger(__name__)


@dataclass
class EvaluationSummary:
    """Outcome of one batch run for one user."""

    user_id: int
    evaluated: int = 0
    notifications: list[Notification] = field(default_factory=list)
    skipped: list[int | None] = field(default_factory=list)
    failed: list[int | None] = field(default_factory=list)

    @property
    def triggered(self) -> int:
        return len(self.notifications)


class AlertDispatcher:
    """Evaluate alerts against their subjects and persist the matches."""

    def __init__(
        self,
        *,
        alerts: AlertRepository,
        notifications: NotificationRepository,
        accounts: AccountRepository,
        goals: GoalRepository,
        budgets: BudgetRepository,
        bills: CashflowBillRepository,
        clock: Callable[[], datetime] = now_in_app_timezone,
        evaluators: Mapping[AlertKind, AlertEvaluator] = EVALUATORS,
        on_store_error: Callable[[], None] | None = None,
    ) -> None:
        self._alerts = alerts
        self._notifications = notifications
        self._accounts = accounts
        self._goals = goals
        self._budgets = budgets
        self._bills = bills
        self._clock = clock
        self._evaluators = evaluators
        self._on_store_error = on_store_error

    # Entry points -----------------------------------------------------------

    def evaluate_alert(self, alert: Alert) -> Notification | None:
        """Evaluate one periodically checked alert.

        Alerts of event-triggered or daily kinds are ignored on this path. A
        subject that no longer resolves is logged and the alert skipped.
        """

        try:
            return self._evaluate(alert, BATCH_KINDS, self.resolve_subject)
        except DanglingReferenceError as exc:
            self._log_dangling(alert, exc)
            return None

    def evaluate_all_user_alerts(self, user_id: int) -> EvaluationSummary:
        """Evaluate every active alert of ``user_id`` on the periodic path."""

        return self._run_batch(user_id, None, BATCH_KINDS)

    def evaluate_upcoming_bills(self, user_id: int) -> EvaluationSummary:
        """Evaluate the user's upcoming bill alerts against projected due dates."""

        return self._run_batch(user_id, DAILY_KINDS, DAILY_KINDS)

    def evaluate_transaction(self, transaction: Transaction) -> list[Notification]:
        """Evaluate merchant and limit alerts of the transaction's owner."""

        created: list[Notification] = []
        alerts = self._alerts.list_active_for_user(
            transaction.user_id, kinds=TRANSACTION_KINDS
        )
        for alert in alerts:
            if not self._applies_to_transaction(alert, transaction):
                continue
            notification = self._evaluate(
                alert, TRANSACTION_KINDS, lambda _alert: transaction
            )
            if notification is not None:
                created.append(notification)
        return created

    # Subject resolution -----------------------------------------------------

    def resolve_subject(self, alert: Alert) -> Any:
        """Load the entity ``alert`` watches.

        Raises:
            DanglingReferenceError: If the referenced entity is missing or
                deleted.
        """

        kind = alert.alert_kind
        subject_id = alert.subject_id
        if kind is AlertKind.ACCOUNT_THRESHOLD:
            subject_type, loader = SOURCE_TYPE_ACCOUNT, self._accounts.get
        elif kind is AlertKind.GOAL_MILESTONE:
            subject_type, loader = SOURCE_TYPE_GOAL, self._goals.get
        elif kind is AlertKind.SPENDING_TARGET:
            subject_type, loader = SOURCE_TYPE_BUDGET, self._budgets.get_with_spend
        elif kind is AlertKind.UPCOMING_BILL:
            subject_type = SOURCE_TYPE_BILL
            today = self._clock().date()

            def loader(bill_id: int) -> Any:
                return self._bills.get_with_days_until_due(bill_id, today)

        else:
            raise ValueError(f"{kind.value} alerts have no stored subject")

        subject = loader(subject_id) if subject_id is not None else None
        if subject is None:
            raise DanglingReferenceError(alert.id, subject_type, subject_id)
        return subject

    # Internals --------------------------------------------------------------

    def _run_batch(
        self,
        user_id: int,
        kinds: Iterable[AlertKind] | None,
        evaluable_kinds: frozenset[AlertKind],
    ) -> EvaluationSummary:
        summary = EvaluationSummary(user_id=user_id)
        try:
            alerts = self._alerts.list_active_for_user(user_id, kinds=kinds)
        except SQLAlchemyError:
            logger.exception("Could not load alerts for user %s; will retry on next run", user_id)
            self._recover_store()
            return summary

        for alert in alerts:
            summary.evaluated += 1
            try:
                notification = self._evaluate(alert, evaluable_kinds, self.resolve_subject)
            except DanglingReferenceError as exc:
                self._log_dangling(alert, exc)
                summary.skipped.append(alert.id)
                continue
            except UnknownAlertKindError:
                logger.exception(
                    "No evaluator registered for alert %s (kind %s) of user %s",
                    alert.id,
                    alert.alert_kind.value,
                    user_id,
                )
                summary.failed.append(alert.id)
                continue
            except SQLAlchemyError:
                logger.exception(
                    "Store error while evaluating alert %s of user %s; will retry on next run",
                    alert.id,
                    user_id,
                )
                self._recover_store()
                summary.failed.append(alert.id)
                continue
            except Exception:
                logger.exception(
                    "Unexpected error evaluating alert %s of user %s", alert.id, user_id
                )
                summary.failed.append(alert.id)
                continue

            if notification is not None:
                summary.notifications.append(notification)

        logger.info(
            "Evaluated %s alerts for user %s: %s triggered, %s skipped, %s failed",
            summary.evaluated,
            user_id,
            summary.triggered,
            len(summary.skipped),
            len(summary.failed),
        )
        return summary

    def _evaluate(
        self,
        alert: Alert,
        evaluable_kinds: frozenset[AlertKind],
        resolve: Callable[[Alert], Any],
    ) -> Notification | None:
        if not alert.is_evaluable:
            logger.debug("Alert %s is inactive or deleted; not evaluated", alert.id)
            return None

        evaluator = get_evaluator(alert.alert_kind, self._evaluators)
        if alert.alert_kind not in evaluable_kinds:
            logger.debug(
                "Alert %s (%s) is not evaluated on this path", alert.id, alert.alert_kind.value
            )
            return None

        subject = resolve(alert)
        if not evaluator.evaluate(alert, subject):
            return None
        return self._record(alert, evaluator.notify(alert, subject))

    def _record(self, alert: Alert, draft: NotificationDraft) -> Notification:
        triggered_at = self._clock()
        notification = Notification(
            id=None,
            user_id=alert.user_id,
            alert_id=alert.id,
            event_type=alert.alert_kind.value,
            title=draft.title,
            message=draft.message,
            metadata={**draft.metadata, "alert_type": alert.alert_kind.value},
            created_at=triggered_at,
        )
        saved = self._notifications.create(notification)
        self._alerts.mark_triggered(alert.id, triggered_at)
        alert.last_triggered_at = triggered_at
        logger.info(
            "Alert %s (%s) fired for user %s; notification %s created",
            alert.id,
            alert.alert_kind.value,
            alert.user_id,
            saved.id,
        )
        return saved

    @staticmethod
    def _applies_to_transaction(alert: Alert, transaction: Transaction) -> bool:
        if alert.alert_kind is not AlertKind.TRANSACTION_LIMIT:
            return True
        account_id = alert.subject_id
        return account_id is None or account_id == transaction.account_id

    @staticmethod
    def _log_dangling(alert: Alert, exc: DanglingReferenceError) -> None:
        logger.warning(
            "Skipping alert %s (%s) of user %s: %s %s no longer exists",
            alert.id,
            alert.alert_kind.value,
            alert.user_id,
            exc.subject_type,
            exc.subject_id,
        )

    def _recover_store(self) -> None:
        if self._on_store_error is not None:
            self._on_store_error()


def build_alert_dispatcher(session: Session, **options: Any) -> AlertDispatcher:
    """Return a dispatcher wired to SQLAlchemy repositories sharing ``session``."""

    return AlertDispatcher(
        alerts=AlertRepository(session),
        notifications=NotificationRepository(session),
        accounts=AccountRepository(session),
        goals=GoalRepository(session),
        budgets=BudgetRepository(session),
        bills=CashflowBillRepository(session),
        on_store_error=session.rollback,
        **options,
    )


def evaluate_alert(session: Session, alert: Alert) -> Notification | None:
    """Evaluate a single periodically checked alert."""

    return build_alert_dispatcher(session).evaluate_alert(alert)


def evaluate_all_user_alerts(session: Session, user_id: int) -> EvaluationSummary:
    """Run the periodic batch for ``user_id``."""

    return build_alert_dispatcher(session).evaluate_all_user_alerts(user_id)


def evaluate_upcoming_bills(session: Session, user_id: int) -> EvaluationSummary:
    """Run the daily bill check for ``user_id``."""

    return build_alert_dispatcher(session).evaluate_upcoming_bills(user_id)


def evaluate_transaction_alerts(
    session: Session, transaction: Transaction
) -> list[Notification]:
    """Check a newly created transaction against the owner's event alerts."""

    return build_alert_dispatcher(session).evaluate_transaction(transaction)


__all__ = [
    "AlertDispatcher",
    "EvaluationSummary",
    "build_alert_dispatcher",
    "evaluate_alert",
    "evaluate_all_user_alerts",
    "evaluate_transaction_alerts",
    "evaluate_upcoming_bills",
]
