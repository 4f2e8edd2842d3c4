"""Read access to financial accounts."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from pfm_api.domain.entities import Account
from pfm_api.infrastructure.models import AccountModel
from pfm_api.utils import ensure_app_timezone


class AccountRepository:
    """Resolve accounts watched by alerts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, account_id: int, *, user_id: int | None = None) -> Account | None:
        """Return the account, or ``None`` when it is missing or archived."""

        query = (
            self.session.query(AccountModel)
            .filter(AccountModel.id == account_id)
            .filter(AccountModel.archived_at.is_(None))
        )
        if user_id is not None:
            query = query.filter(AccountModel.user_id == user_id)
        model = query.first()
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: AccountModel) -> Account:
        return Account(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            account_type=model.account_type,
            balance=Decimal(model.balance or 0),
            archived_at=ensure_app_timezone(model.archived_at),
        )


__all__ = ["AccountRepository"]
