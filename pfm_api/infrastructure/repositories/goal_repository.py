"""Read access to savings and payoff goals."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Goal
from pfm_api.infrastructure.models import GoalModel
from pfm_api.utils import ensure_app_timezone


class GoalRepository:
    """Resolve goals watched by milestone alerts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, goal_id: int, *, user_id: int | None = None) -> Goal | None:
        query = (
            self.session.query(GoalModel)
            .filter(GoalModel.id == goal_id)
            .filter(GoalModel.deleted_at.is_(None))
        )
        if user_id is not None:
            query = query.filter(GoalModel.user_id == user_id)
        model = query.first()
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: GoalModel) -> Goal:
        return Goal(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            goal_type=model.goal_type,
            target_amount=Decimal(model.target_amount or 0),
            current_amount=Decimal(model.current_amount or 0),
            metadata=dict(model.metadata_ or {}),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["GoalRepository"]
