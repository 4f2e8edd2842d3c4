"""Persistence layer for alert rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import desc, true
from sqlalchemy.orm import Session

from pfm_api.domain.entities import Alert, AlertKind
from pfm_api.domain.exceptions import AlertConfigurationError
from pfm_api.infrastructure.models import AlertModel
from pfm_api.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from ._session import commit_or_rollback

logger = logging.getLogger(__name__)


class AlertRepository:
    """Provide CRUD operations for alert rules."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self, user_id: int, *, include_inactive: bool = False
    ) -> Sequence[Alert]:
        query = (
            self.session.query(AlertModel)
            .filter(AlertModel.user_id == user_id)
            .filter(AlertModel.deleted_at.is_(None))
        )
        if not include_inactive:
            query = query.filter(AlertModel.active == true())
        query = query.order_by(
            desc(AlertModel.active), desc(AlertModel.created_at), desc(AlertModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_active_for_user(
        self, user_id: int, *, kinds: Iterable[AlertKind] | None = None
    ) -> Sequence[Alert]:
        """Return evaluable alerts, skipping rows whose conditions no longer decode."""

        query = (
            self.session.query(AlertModel)
            .filter(AlertModel.user_id == user_id)
            .filter(AlertModel.active == true())
            .filter(AlertModel.deleted_at.is_(None))
        )
        if kinds is not None:
            query = query.filter(
                AlertModel.alert_kind.in_([AlertKind(kind).value for kind in kinds])
            )

        alerts: list[Alert] = []
        for model in query.order_by(AlertModel.id).all():
            try:
                alerts.append(self._to_entity(model))
            except AlertConfigurationError as exc:
                logger.warning(
                    "Ignoring alert %s of user %s with invalid %s conditions: %s",
                    model.id,
                    user_id,
                    model.alert_kind,
                    exc.errors or exc,
                )
        return alerts

    def get(self, user_id: int, alert_id: int) -> Alert | None:
        model = self._get_model(user_id=user_id, alert_id=alert_id)
        return self._to_entity(model) if model else None

    def create(self, alert: Alert) -> Alert:
        model = AlertModel()
        self._apply_entity_to_model(model, alert)
        model.created_at = ensure_app_naive_datetime(
            alert.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        commit_or_rollback(self.session)
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, alert: Alert) -> Alert:
        if alert.id is None:
            raise ValueError("Alert id is required for updates")
        model = self._get_model(user_id=alert.user_id, alert_id=alert.id)
        if model is None:
            msg = f"Alert with id {alert.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, alert)
        model.updated_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        commit_or_rollback(self.session)
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, user_id: int, alert_id: int) -> bool:
        model = self._get_model(user_id=user_id, alert_id=alert_id)
        if model is None:
            return False
        model.deleted_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        commit_or_rollback(self.session)
        return True

    def mark_triggered(self, alert_id: int, timestamp: datetime) -> None:
        self.session.query(AlertModel).filter(AlertModel.id == alert_id).update(
            {AlertModel.last_triggered_at: ensure_app_naive_datetime(timestamp)},
            synchronize_session=False,
        )
        commit_or_rollback(self.session)

    def _get_model(self, *, user_id: int, alert_id: int) -> AlertModel | None:
        return (
            self.session.query(AlertModel)
            .filter(AlertModel.id == alert_id)
            .filter(AlertModel.user_id == user_id)
            .filter(AlertModel.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def _apply_entity_to_model(model: AlertModel, alert: Alert) -> None:
        model.user_id = alert.user_id
        model.alert_kind = alert.alert_kind.value
        model.name = alert.name
        model.source_type = alert.source_type
        model.source_id = alert.source_id
        model.conditions = alert.conditions_payload()
        model.email_delivery = alert.email_delivery
        model.sms_delivery = alert.sms_delivery
        model.active = alert.active
        model.last_triggered_at = ensure_app_naive_datetime(alert.last_triggered_at)
        model.deleted_at = ensure_app_naive_datetime(alert.deleted_at)

    @staticmethod
    def _to_entity(model: AlertModel) -> Alert:
        return Alert(
            id=model.id,
            user_id=model.user_id,
            alert_kind=model.alert_kind,
            name=model.name,
            conditions=model.conditions or {},
            source_type=model.source_type,
            source_id=model.source_id,
            email_delivery=model.email_delivery,
            sms_delivery=model.sms_delivery,
            active=model.active,
            last_triggered_at=ensure_app_timezone(model.last_triggered_at),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["AlertRepository"]
