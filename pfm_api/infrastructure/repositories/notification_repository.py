"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import false, func
from sqlalchemy.orm import Session

from pfm_api.domain.entities import Notification
from pfm_api.infrastructure.models import NotificationModel
from pfm_api.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from ._session import commit_or_rollback


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: int,
        *,
        read: bool | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.deleted_at.is_(None))
        )
        if read is not None:
            query = query.filter(NotificationModel.read == read)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: int, notification_id: int) -> Notification | None:
        model = self._get_model(user_id=user_id, notification_id=notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            alert_id=notification.alert_id,
            event_type=notification.event_type,
            title=notification.title,
            message=notification.message,
            metadata_=dict(notification.metadata or {}),
            read=notification.read,
            read_at=ensure_app_naive_datetime(notification.read_at),
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        commit_or_rollback(self.session)
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, user_id: int, notification_id: int) -> Notification | None:
        model = self._get_model(user_id=user_id, notification_id=notification_id)
        if model is None:
            return None
        model.read = True
        model.read_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        commit_or_rollback(self.session)
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, user_id: int) -> int:
        """Mark every unread notification of ``user_id`` as read; return how many."""

        count = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read == false())
            .filter(NotificationModel.deleted_at.is_(None))
            .update(
                {
                    NotificationModel.read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        commit_or_rollback(self.session)
        return int(count or 0)

    def delete(self, user_id: int, notification_id: int) -> bool:
        model = self._get_model(user_id=user_id, notification_id=notification_id)
        if model is None:
            return False
        model.deleted_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        commit_or_rollback(self.session)
        return True

    def count_unread(self, user_id: int) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read == false())
            .filter(NotificationModel.deleted_at.is_(None))
            .scalar()
        )
        return int(count or 0)

    def _get_model(
        self, *, user_id: int, notification_id: int
    ) -> NotificationModel | None:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            alert_id=model.alert_id,
            event_type=model.event_type,
            title=model.title,
            message=model.message,
            metadata=dict(model.metadata_ or {}),
            read=model.read,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["NotificationRepository"]
