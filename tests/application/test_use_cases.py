"""Tests for the alert, notification and destination management use cases."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pfm_api.application.alerts import evaluate_all_user_alerts
from pfm_api.application.use_cases.alerts import (
    create_alert,
    delete_alert,
    disable_alert,
    enable_alert,
    get_alert,
    list_alerts,
    update_alert,
)
from pfm_api.application.use_cases.destinations import (
    get_alert_destinations,
    update_alert_destinations,
)
from pfm_api.application.use_cases.notifications import (
    count_unread_notifications,
    delete_notification,
    get_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from pfm_api.domain.entities import AlertKind
from pfm_api.domain.exceptions import AlertConfigurationError, ResourceNotFoundError
from pfm_api.infrastructure.models import AccountModel, CashflowBillModel, UserModel


@pytest.fixture
def owner(session):
    user = UserModel(
        email="ana@example.com",
        preferences={"alertSmsNumber": "+15550001111", "smsVerified": True, "emailVerified": True},
    )
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def stranger(session):
    user = UserModel(email="bo@example.com", preferences={})
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def account(session, owner):
    model = AccountModel(user_id=owner.id, name="Checking", balance=Decimal("450.00"))
    session.add(model)
    session.commit()
    return model


def _low_balance(session, owner, account, **overrides):
    options = {
        "user_id": owner.id,
        "alert_kind": "account_threshold",
        "name": "  Low balance  ",
        "conditions": {"threshold": "500", "direction": "below", "account_id": account.id},
    }
    options.update(overrides)
    return create_alert(session, **options)


def test_create_alert_stamps_subject_reference(session, owner, account):
    alert = _low_balance(session, owner, account)

    assert alert.id is not None
    assert alert.name == "Low balance"
    assert alert.active is True
    assert alert.source_type == "account"
    assert alert.source_id == account.id


def test_create_alert_rejects_invalid_conditions(session, owner, account):
    with pytest.raises(AlertConfigurationError) as exc_info:
        _low_balance(session, owner, account, conditions={"threshold": "-5", "direction": "below"})

    assert [error["field"] for error in exc_info.value.errors] == ["threshold"]
    assert list_alerts(session, user_id=owner.id, include_inactive=True) == []


def test_create_alert_requires_subject_for_stored_kinds(session, owner):
    with pytest.raises(AlertConfigurationError):
        create_alert(
            session,
            user_id=owner.id,
            alert_kind="goal_milestone",
            name="Halfway",
            conditions={"milestone_percentage": 50},
        )


def test_create_alert_refuses_subject_of_another_user(session, owner, stranger, account):
    with pytest.raises(ResourceNotFoundError):
        _low_balance(session, owner, account, user_id=stranger.id)


def test_create_alert_rejects_blank_name(session, owner, account):
    with pytest.raises(AlertConfigurationError):
        _low_balance(session, owner, account, name="   ")


def test_merchant_alert_needs_no_subject(session, owner):
    alert = create_alert(
        session,
        user_id=owner.id,
        alert_kind=AlertKind.MERCHANT_NAME,
        name="Coffee",
        conditions={"merchant_pattern": "coffee"},
    )

    assert alert.source_type is None
    assert alert.source_id is None


def test_transaction_limit_alert_may_watch_an_account(session, owner, account):
    alert = create_alert(
        session,
        user_id=owner.id,
        alert_kind="transaction_limit",
        name="Big spend",
        conditions={"amount": "250", "account_id": account.id},
    )

    assert alert.source_type == "account"
    assert alert.source_id == account.id


def test_update_transaction_limit_without_account_widens_scope(session, owner, account):
    alert = create_alert(
        session,
        user_id=owner.id,
        alert_kind="transaction_limit",
        name="Big spend",
        conditions={"amount": "250", "account_id": account.id},
    )

    updated = update_alert(
        session, user_id=owner.id, alert_id=alert.id, conditions={"amount": "250"}
    )

    assert updated.source_type is None
    assert updated.source_id is None
    assert updated.subject_id is None
    stored = get_alert(session, user_id=owner.id, alert_id=alert.id)
    assert stored.subject_id is None


def test_upcoming_bill_alert_watches_bill(session, owner):
    bill = CashflowBillModel(user_id=owner.id, name="Rent", amount=Decimal("1500"), due_day=1)
    session.add(bill)
    session.commit()

    alert = create_alert(
        session,
        user_id=owner.id,
        alert_kind="upcoming_bill",
        name="Rent due",
        conditions={"days_before": 3},
        source_id=bill.id,
    )

    assert alert.source_type == "bill"
    assert alert.subject_id == bill.id


def test_update_alert_revalidates_conditions(session, owner, account):
    alert = _low_balance(session, owner, account)

    with pytest.raises(AlertConfigurationError):
        update_alert(
            session,
            user_id=owner.id,
            alert_id=alert.id,
            conditions={"threshold": "100", "direction": "sideways"},
        )

    unchanged = get_alert(session, user_id=owner.id, alert_id=alert.id)
    assert unchanged.conditions.direction == "below"


def test_update_alert_moves_subject_with_new_conditions(session, owner, account):
    alert = _low_balance(session, owner, account)
    savings = AccountModel(user_id=owner.id, name="Savings", balance=Decimal("9000"))
    session.add(savings)
    session.commit()

    updated = update_alert(
        session,
        user_id=owner.id,
        alert_id=alert.id,
        name="High savings",
        conditions={"threshold": "5000", "direction": "above", "account_id": savings.id},
    )

    assert updated.name == "High savings"
    assert updated.conditions.direction == "above"
    assert updated.source_id == savings.id
    assert updated.updated_at is not None


def test_update_alert_of_other_user_is_not_found(session, owner, stranger, account):
    alert = _low_balance(session, owner, account)

    with pytest.raises(ResourceNotFoundError):
        update_alert(session, user_id=stranger.id, alert_id=alert.id, name="Mine now")


def test_disabled_alert_is_not_evaluated_until_enabled(session, owner, account):
    alert = _low_balance(session, owner, account)

    disabled = disable_alert(session, user_id=owner.id, alert_id=alert.id)
    assert disabled.active is False
    assert evaluate_all_user_alerts(session, owner.id).triggered == 0

    enable_alert(session, user_id=owner.id, alert_id=alert.id)
    assert evaluate_all_user_alerts(session, owner.id).triggered == 1


def test_deleted_alert_disappears(session, owner, account):
    alert = _low_balance(session, owner, account)

    delete_alert(session, user_id=owner.id, alert_id=alert.id)

    assert list_alerts(session, user_id=owner.id, include_inactive=True) == []
    with pytest.raises(ResourceNotFoundError):
        get_alert(session, user_id=owner.id, alert_id=alert.id)
    with pytest.raises(ResourceNotFoundError):
        delete_alert(session, user_id=owner.id, alert_id=alert.id)
    assert evaluate_all_user_alerts(session, owner.id).evaluated == 0


def test_notification_use_cases(session, owner, stranger, account):
    _low_balance(session, owner, account)
    notification = evaluate_all_user_alerts(session, owner.id).notifications[0]

    assert count_unread_notifications(session, user_id=owner.id) == 1
    assert [n.id for n in list_notifications(session, user_id=owner.id)] == [notification.id]
    with pytest.raises(ResourceNotFoundError):
        get_notification(session, user_id=stranger.id, notification_id=notification.id)

    read = mark_notification_read(session, user_id=owner.id, notification_id=notification.id)
    assert read.read is True
    assert count_unread_notifications(session, user_id=owner.id) == 0

    delete_notification(session, user_id=owner.id, notification_id=notification.id)
    assert list_notifications(session, user_id=owner.id) == []
    with pytest.raises(ResourceNotFoundError):
        mark_notification_read(session, user_id=owner.id, notification_id=notification.id)


def test_mark_all_notifications_read_skips_read_and_deleted(session, owner, account):
    _low_balance(session, owner, account)
    first, second, third = (
        evaluate_all_user_alerts(session, owner.id).notifications[0] for _ in range(3)
    )
    mark_notification_read(session, user_id=owner.id, notification_id=first.id)
    delete_notification(session, user_id=owner.id, notification_id=second.id)

    assert mark_all_notifications_read(session, user_id=owner.id) == 1
    assert count_unread_notifications(session, user_id=owner.id) == 0
    assert get_notification(session, user_id=owner.id, notification_id=third.id).read_at
    assert mark_all_notifications_read(session, user_id=owner.id) == 0


def test_get_alert_destinations(session, owner):
    destinations = get_alert_destinations(session, user_id=owner.id)

    assert destinations.email == "ana@example.com"
    assert destinations.sms == "+15550001111"
    assert destinations.email_verified is True
    assert destinations.sms_verified is True


def test_changing_destinations_requires_verification(session, owner):
    destinations = update_alert_destinations(
        session, user_id=owner.id, email="ana@new.example.com", sms="+15559998888"
    )

    assert destinations.email == "ana@new.example.com"
    assert destinations.sms == "+15559998888"
    assert destinations.email_verified is False
    assert destinations.sms_verified is False


def test_updating_only_sms_keeps_email_verification(session, owner):
    destinations = update_alert_destinations(session, user_id=owner.id, sms="+15559998888")

    assert destinations.email == "ana@example.com"
    assert destinations.email_verified is True
    assert destinations.sms_verified is False


@pytest.mark.parametrize(
    ("email", "sms"),
    [
        ("not-an-email", None),
        ("user@exa..mple.com", None),
        ("a@-b.c", None),
        ("ana@example", None),
        (None, "555-CALL-NOW"),
        (None, "+0123"),
    ],
)
def test_invalid_destinations_are_rejected(session, owner, email, sms):
    with pytest.raises(ValueError):
        update_alert_destinations(session, user_id=owner.id, email=email, sms=sms)


def test_destinations_of_unknown_user(session):
    with pytest.raises(ResourceNotFoundError):
        get_alert_destinations(session, user_id=404)
