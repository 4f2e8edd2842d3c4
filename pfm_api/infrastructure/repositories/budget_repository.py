"""Read access to budgets and the spend recorded against them."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from pfm_api.domain.calculations import budget_period
from pfm_api.domain.entities import Budget, BudgetSpend
from pfm_api.infrastructure.models import BudgetModel, TransactionModel
from pfm_api.utils import ensure_app_timezone, local_day_bounds, today_in_app_timezone


class BudgetRepository:
    """Resolve budgets watched by spending target alerts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, budget_id: int, *, user_id: int | None = None) -> Budget | None:
        query = (
            self.session.query(BudgetModel)
            .filter(BudgetModel.id == budget_id)
            .filter(BudgetModel.deleted_at.is_(None))
        )
        if user_id is not None:
            query = query.filter(BudgetModel.user_id == user_id)
        model = query.first()
        return self._to_entity(model) if model else None

    def get_with_spend(
        self,
        budget_id: int,
        period: tuple[date, date] | None = None,
        *,
        today: date | None = None,
    ) -> BudgetSpend | None:
        """Return the budget with its spend over ``period``.

        When ``period`` is omitted the budget's own dates are used, see
        :func:`~pfm_api.domain.calculations.budget_period`.
        """

        budget = self.get(budget_id)
        if budget is None:
            return None
        if period is None:
            period = budget_period(budget, today or today_in_app_timezone())
        return BudgetSpend(budget=budget, spent=self.calculate_spent(budget, period))

    def calculate_spent(self, budget: Budget, period: tuple[date, date]) -> Decimal:
        """Sum the absolute value of the owner's debits that fall in the budget."""

        start, end = period
        start_at, end_at = local_day_bounds(start, end)
        query = (
            self.session.query(TransactionModel.amount)
            .filter(TransactionModel.user_id == budget.user_id)
            .filter(TransactionModel.deleted_at.is_(None))
            .filter(TransactionModel.amount < 0)
        )
        # Open-ended periods use date.min/date.max and skip that bound.
        if start != date.min:
            query = query.filter(TransactionModel.posted_at >= start_at)
        if end != date.max:
            query = query.filter(TransactionModel.posted_at <= end_at)
        if budget.account_ids:
            query = query.filter(TransactionModel.account_id.in_(budget.account_ids))
        if budget.tag_names:
            query = query.filter(TransactionModel.tag_name.in_(budget.tag_names))

        return sum((abs(Decimal(amount)) for (amount,) in query.all()), Decimal("0"))

    @staticmethod
    def _to_entity(model: BudgetModel) -> Budget:
        return Budget(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            budget_amount=Decimal(model.budget_amount),
            account_ids=[int(value) for value in (model.account_list or [])],
            tag_names=list(model.tag_names or []),
            month=model.month,
            year=model.year,
            start_date=model.start_date,
            end_date=model.end_date,
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["BudgetRepository"]
