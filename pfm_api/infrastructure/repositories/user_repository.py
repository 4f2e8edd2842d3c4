"""Persistence helpers for users and their alert destinations."""

from __future__ import annotations

from sqlalchemy.orm import Session

from pfm_api.domain.entities import User
from pfm_api.infrastructure.models import UserModel

from ._session import commit_or_rollback


class UserRepository:
    """Provide access to :class:`User` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def update_destinations(
        self, user_id: int, *, email: str | None, preferences: dict
    ) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        if email is not None:
            model.email = email
        # Reassign so the JSON column registers the change.
        model.preferences = dict(preferences)
        self.session.add(model)
        commit_or_rollback(self.session)
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            preferences=dict(model.preferences or {}),
        )


__all__ = ["UserRepository"]
