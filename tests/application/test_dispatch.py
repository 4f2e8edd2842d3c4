"""Tests for the alert dispatch loop."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from pfm_api.application.alerts import EVALUATORS, AccountThresholdEvaluator
from pfm_api.domain.entities import (
    Account,
    Alert,
    AlertKind,
    BillDue,
    Budget,
    BudgetSpend,
    CashflowBill,
    Goal,
    Transaction,
)
from pfm_api.domain.exceptions import DanglingReferenceError

USER_ID = 1


def _alert(alert_id, kind, conditions, **fields):
    fields.setdefault("user_id", USER_ID)
    return Alert(
        id=alert_id,
        alert_kind=kind,
        name=f"Alert {alert_id}",
        conditions=conditions,
        **fields,
    )


def _low_balance_alert(alert_id=1, account_id=10, threshold="500.00", **fields):
    return _alert(
        alert_id,
        "account_threshold",
        {"threshold": threshold, "direction": "below"},
        source_type="account",
        source_id=account_id,
        **fields,
    )


def _account(account_id=10, balance="450.00"):
    return Account(id=account_id, user_id=USER_ID, name="Checking", balance=Decimal(balance))


def test_low_balance_alert_fires_end_to_end(store, dispatcher, fixed_now):
    alert = store.alerts.add(_low_balance_alert())
    store.accounts.add(10, _account())

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.evaluated == 1
    assert summary.triggered == 1
    notification = summary.notifications[0]
    assert notification.id is not None
    assert notification.user_id == USER_ID
    assert notification.alert_id == alert.id
    assert notification.event_type == "account_threshold"
    assert notification.read is False
    assert notification.created_at == fixed_now
    assert notification.metadata["current_balance"] == "450.00"
    assert notification.metadata["threshold"] == "500.00"
    assert notification.metadata["direction"] == "below"
    assert notification.metadata["alert_type"] == "account_threshold"
    assert alert.last_triggered_at == fixed_now
    assert store.alerts.triggered == [(alert.id, fixed_now)]


def test_balance_equal_to_threshold_stays_quiet(store, dispatcher):
    store.alerts.add(_low_balance_alert())
    store.accounts.add(10, _account(balance="500.00"))

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.evaluated == 1
    assert summary.notifications == []
    assert store.alerts.triggered == []


def test_every_evaluation_fires_again(store, dispatcher):
    store.alerts.add(_low_balance_alert())
    store.accounts.add(10, _account())

    dispatcher.evaluate_all_user_alerts(USER_ID)
    dispatcher.evaluate_all_user_alerts(USER_ID)

    assert len(store.notifications.created) == 2
    assert len({notification.id for notification in store.notifications.created}) == 2


def test_dangling_subject_is_skipped_and_others_still_fire(store, dispatcher, caplog):
    store.alerts.add(_low_balance_alert(alert_id=1, account_id=10))
    store.alerts.add(_low_balance_alert(alert_id=2, account_id=99))
    store.alerts.add(_low_balance_alert(alert_id=3, account_id=11))
    store.accounts.add(10, _account(10))
    store.accounts.add(11, _account(11, balance="20.00"))

    with caplog.at_level(logging.WARNING):
        summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.evaluated == 3
    assert summary.skipped == [2]
    assert summary.failed == []
    assert [n.alert_id for n in summary.notifications] == [1, 3]
    assert "account 99 no longer exists" in caplog.text


def test_subject_id_falls_back_to_conditions(store, dispatcher):
    store.alerts.add(
        _alert(4, "account_threshold", {"threshold": "500", "direction": "below", "account_id": 10})
    )
    store.accounts.add(10, _account())

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.triggered == 1


def test_alert_without_subject_reference_is_dangling(dispatcher):
    alert = _alert(5, "goal_milestone", {"milestone_percentage": 10})

    with pytest.raises(DanglingReferenceError):
        dispatcher.resolve_subject(alert)
    assert dispatcher.evaluate_alert(alert) is None


def test_resolve_subject_refuses_event_kinds(dispatcher):
    alert = _alert(6, "merchant_name", {"merchant_pattern": "Shop"})

    with pytest.raises(ValueError):
        dispatcher.resolve_subject(alert)


def test_inactive_and_deleted_alerts_are_not_evaluated(store, dispatcher, fixed_now):
    store.accounts.add(10, _account())
    inactive = _low_balance_alert(alert_id=1, active=False)
    deleted = _low_balance_alert(alert_id=2, deleted_at=fixed_now)

    assert dispatcher.evaluate_alert(inactive) is None
    assert dispatcher.evaluate_alert(deleted) is None
    assert store.notifications.created == []


def test_batch_ignores_event_and_daily_kinds(store, dispatcher):
    store.alerts.add(_alert(1, "merchant_name", {"merchant_pattern": "coffee"}))
    store.alerts.add(_alert(2, "transaction_limit", {"amount": "0"}))
    store.alerts.add(_alert(3, "upcoming_bill", {"days_before": 30}, source_id=6))

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.notifications == []
    assert summary.failed == []
    assert summary.skipped == []


def test_batch_covers_goal_and_budget_alerts(store, dispatcher):
    store.goals.add(
        7,
        Goal(
            id=7,
            user_id=USER_ID,
            name="Vacation",
            goal_type="savings",
            target_amount=Decimal("2000"),
            current_amount=Decimal("1500"),
        ),
    )
    budget = Budget(id=3, user_id=USER_ID, name="Dining", budget_amount=Decimal("200"))
    store.budgets.add(3, BudgetSpend(budget=budget, spent=Decimal("180")))
    store.alerts.add(_alert(1, "goal_milestone", {"milestone_percentage": 75}, source_id=7))
    store.alerts.add(_alert(2, "spending_target", {"threshold_percentage": 90}, source_id=3))

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert sorted(n.event_type for n in summary.notifications) == [
        "goal_milestone",
        "spending_target",
    ]


def test_unknown_kind_is_logged_and_counted_as_failed(store, fixed_now, caplog):
    registry = {AlertKind.ACCOUNT_THRESHOLD: AccountThresholdEvaluator()}
    dispatcher = store.dispatcher(lambda: fixed_now, evaluators=registry)
    store.alerts.add(_alert(1, "goal_milestone", {"milestone_percentage": 10}, source_id=7))
    store.alerts.add(_low_balance_alert(alert_id=2))
    store.accounts.add(10, _account())

    with caplog.at_level(logging.ERROR):
        summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.failed == [1]
    assert [n.alert_id for n in summary.notifications] == [2]
    assert "No evaluator registered for alert 1" in caplog.text


def test_unexpected_evaluator_error_is_contained(store, fixed_now, caplog):
    class ExplodingEvaluator(AccountThresholdEvaluator):
        def evaluate(self, alert, subject):
            raise ZeroDivisionError("boom")

    registry = dict(EVALUATORS)
    registry[AlertKind.ACCOUNT_THRESHOLD] = ExplodingEvaluator()
    dispatcher = store.dispatcher(lambda: fixed_now, evaluators=registry)
    store.alerts.add(_low_balance_alert())
    store.accounts.add(10, _account())

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.failed == [1]
    assert summary.notifications == []
    assert "Unexpected error evaluating alert 1" in caplog.text


def test_store_error_while_recording_is_contained(store, dispatcher):
    store.alerts.add(_low_balance_alert(alert_id=1))
    store.alerts.add(_low_balance_alert(alert_id=2))
    store.accounts.add(10, _account())
    store.notifications.failing_alert_ids.add(1)

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.failed == [1]
    assert [n.alert_id for n in summary.notifications] == [2]
    assert store.recoveries == 1
    assert [alert_id for alert_id, _ in store.alerts.triggered] == [2]


def test_store_error_while_loading_returns_empty_summary(store, dispatcher, caplog):
    store.alerts.fail_listing = True

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.evaluated == 0
    assert summary.notifications == []
    assert store.recoveries == 1
    assert "Could not load alerts for user 1" in caplog.text


def test_batch_only_reads_the_given_user(store, dispatcher):
    store.alerts.add(_low_balance_alert(alert_id=1, user_id=2))
    store.accounts.add(10, _account())

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.evaluated == 0


def _bill_alert(alert_id=1, bill_id=6, days_before=3):
    return _alert(
        alert_id,
        "upcoming_bill",
        {"days_before": days_before},
        source_type="bill",
        source_id=bill_id,
    )


def _bill_due(days_until_due):
    bill = CashflowBill(
        id=6, user_id=USER_ID, name="Internet", amount=Decimal("60"), due_day=12
    )
    return BillDue(bill=bill, due_date=date(2024, 3, 12), days_until_due=days_until_due)


def test_upcoming_bill_check_uses_clock_date(store, dispatcher):
    store.alerts.add(_bill_alert())
    store.alerts.add(_low_balance_alert(alert_id=2))
    store.accounts.add(10, _account())
    store.bills.add(6, _bill_due(2))

    summary = dispatcher.evaluate_upcoming_bills(USER_ID)

    assert store.bills.requested_days == [date(2024, 3, 10)]
    assert summary.evaluated == 1
    assert [n.alert_id for n in summary.notifications] == [1]
    assert summary.notifications[0].message == 'Bill "Internet" for $60.00 is due in 2 days'


def test_upcoming_bill_outside_window_stays_quiet(store, dispatcher):
    store.alerts.add(_bill_alert(days_before=1))
    store.bills.add(6, _bill_due(2))

    summary = dispatcher.evaluate_upcoming_bills(USER_ID)

    assert summary.notifications == []


def test_periodic_batch_does_not_evaluate_bills(store, dispatcher):
    store.alerts.add(_bill_alert())
    store.bills.add(6, _bill_due(0))

    summary = dispatcher.evaluate_all_user_alerts(USER_ID)

    assert summary.notifications == []
    assert store.bills.requested_days == []


def _transaction(account_id=10, amount="-300.00", merchant_name="Dicks Sporting Goods"):
    return Transaction(
        id=55,
        user_id=USER_ID,
        account_id=account_id,
        amount=Decimal(amount),
        description="Running shoes",
        merchant_name=merchant_name,
    )


def test_transaction_checks_merchant_and_limit_alerts(store, dispatcher):
    store.alerts.add(_alert(1, "merchant_name", {"merchant_pattern": "sporting"}))
    store.alerts.add(_alert(2, "transaction_limit", {"amount": "250", "account_id": 10}))
    store.alerts.add(_alert(3, "transaction_limit", {"amount": "250", "account_id": 11}))
    store.alerts.add(_alert(4, "transaction_limit", {"amount": "100"}))
    store.alerts.add(_low_balance_alert(alert_id=5))
    store.accounts.add(10, _account())

    created = dispatcher.evaluate_transaction(_transaction())

    assert [n.alert_id for n in created] == [1, 2, 4]
    assert created[0].metadata["transaction_id"] == "55"
    assert created[1].event_type == "transaction_limit"


def test_transaction_below_limit_creates_nothing(store, dispatcher):
    store.alerts.add(_alert(1, "transaction_limit", {"amount": "500"}))

    assert dispatcher.evaluate_transaction(_transaction(merchant_name=None)) == []


def test_transaction_path_propagates_store_errors(store, dispatcher):
    store.alerts.add(_alert(1, "transaction_limit", {"amount": "10"}))
    store.notifications.failing_alert_ids.add(1)

    with pytest.raises(SQLAlchemyError):
        dispatcher.evaluate_transaction(_transaction())
