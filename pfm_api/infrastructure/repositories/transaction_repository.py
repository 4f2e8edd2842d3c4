"""Read access to posted transactions."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Transaction
from pfm_api.infrastructure.models import TransactionModel
from pfm_api.utils import ensure_app_timezone


class TransactionRepository:
    """Load transactions that event-triggered alerts are checked against."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, transaction_id: int, *, user_id: int | None = None) -> Transaction | None:
        query = (
            self.session.query(TransactionModel)
            .filter(TransactionModel.id == transaction_id)
            .filter(TransactionModel.deleted_at.is_(None))
        )
        if user_id is not None:
            query = query.filter(TransactionModel.user_id == user_id)
        model = query.first()
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: TransactionModel) -> Transaction:
        return Transaction(
            id=model.id,
            user_id=model.user_id,
            account_id=model.account_id,
            amount=Decimal(model.amount),
            description=model.description,
            merchant_name=model.merchant_name,
            tag_name=model.tag_name,
            posted_at=ensure_app_timezone(model.posted_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["TransactionRepository"]
