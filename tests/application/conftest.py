"""In-memory stand-ins for the repositories the dispatcher talks to."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from pfm_api.application.alerts import AlertDispatcher


def store_error() -> OperationalError:
    return OperationalError("INSERT INTO notification", {}, Exception("database is locked"))


class FakeAlertRepository:
    def __init__(self) -> None:
        self.alerts = []
        self.triggered = []
        self.fail_listing = False

    def add(self, alert):
        self.alerts.append(alert)
        return alert

    def list_active_for_user(self, user_id, kinds=None):
        if self.fail_listing:
            raise store_error()
        wanted = None if kinds is None else set(kinds)
        return [
            alert
            for alert in self.alerts
            if alert.user_id == user_id
            and alert.is_evaluable
            and (wanted is None or alert.alert_kind in wanted)
        ]

    def mark_triggered(self, alert_id, timestamp):
        self.triggered.append((alert_id, timestamp))


class FakeNotificationRepository:
    def __init__(self) -> None:
        self.created = []
        self.failing_alert_ids = set()

    def create(self, notification):
        if notification.alert_id in self.failing_alert_ids:
            raise store_error()
        saved = replace(notification, id=len(self.created) + 1)
        self.created.append(saved)
        return saved


class FakeLookup:
    """Keyed store exposing every loader name the dispatcher uses."""

    def __init__(self) -> None:
        self.items = {}
        self.requested_days = []

    def add(self, item_id, item):
        self.items[item_id] = item
        return item

    def get(self, item_id):
        return self.items.get(item_id)

    def get_with_spend(self, item_id):
        return self.items.get(item_id)

    def get_with_days_until_due(self, item_id, today: date):
        self.requested_days.append(today)
        return self.items.get(item_id)


class Store:
    def __init__(self) -> None:
        self.alerts = FakeAlertRepository()
        self.notifications = FakeNotificationRepository()
        self.accounts = FakeLookup()
        self.goals = FakeLookup()
        self.budgets = FakeLookup()
        self.bills = FakeLookup()
        self.recoveries = 0

    def recover(self) -> None:
        self.recoveries += 1

    def dispatcher(self, clock, **options) -> AlertDispatcher:
        return AlertDispatcher(
            alerts=self.alerts,
            notifications=self.notifications,
            accounts=self.accounts,
            goals=self.goals,
            budgets=self.budgets,
            bills=self.bills,
            clock=clock,
            on_store_error=self.recover,
            **options,
        )


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def dispatcher(store, fixed_now) -> AlertDispatcher:
    return store.dispatcher(lambda: fixed_now)
