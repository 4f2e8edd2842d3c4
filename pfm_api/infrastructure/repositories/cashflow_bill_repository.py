"""Read access to recurring bills and their projected due dates."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from pfm_api.domain.calculations import days_until, next_due_date
from pfm_api.domain.entities import BillDue, CashflowBill
from pfm_api.infrastructure.models import CashflowBillModel
from pfm_api.utils import ensure_app_timezone, today_in_app_timezone

logger = logging.getLogger(__name__)


class CashflowBillRepository:
    """Resolve bills watched by upcoming bill alerts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, bill_id: int, *, user_id: int | None = None) -> CashflowBill | None:
        query = (
            self.session.query(CashflowBillModel)
            .filter(CashflowBillModel.id == bill_id)
            .filter(CashflowBillModel.deleted_at.is_(None))
        )
        if user_id is not None:
            query = query.filter(CashflowBillModel.user_id == user_id)
        model = query.first()
        return self._to_entity(model) if model else None

    def get_with_days_until_due(
        self, bill_id: int, today: date | None = None
    ) -> BillDue | None:
        """Return the bill with its next due date relative to ``today``.

        Stopped or inactive bills have no upcoming occurrence and are reported
        as missing.
        """

        bill = self.get(bill_id)
        if bill is None:
            return None
        if not bill.active or bill.stopped_at is not None:
            logger.info("Bill %s is stopped; no upcoming due date", bill_id)
            return None

        current_day = today or today_in_app_timezone()
        due_date = next_due_date(bill.due_day, bill.recurrence, current_day)
        return BillDue(
            bill=bill,
            due_date=due_date,
            days_until_due=days_until(due_date, current_day),
        )

    @staticmethod
    def _to_entity(model: CashflowBillModel) -> CashflowBill:
        return CashflowBill(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            amount=Decimal(model.amount),
            due_day=model.due_day,
            recurrence=model.recurrence,
            account_id=model.account_id,
            active=model.active,
            stopped_at=ensure_app_timezone(model.stopped_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["CashflowBillRepository"]
