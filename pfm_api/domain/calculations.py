"""Calculation helpers shared by the evaluators and the repositories."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from decimal import Decimal

from .entities import (
    GOAL_TYPE_PAYOFF,
    RECURRENCE_BIWEEKLY,
    RECURRENCE_MONTHLY,
    RECURRENCE_WEEKLY,
    Budget,
    Goal,
)

_RECURRENCE_STEPS = {
    RECURRENCE_WEEKLY: timedelta(days=7),
    RECURRENCE_BIWEEKLY: timedelta(days=14),
}


def _clamp_percentage(value: float) -> float:
    return min(100.0, max(0.0, value))


def goal_progress(goal: Goal) -> float:
    """Return how far ``goal`` has progressed, as a percentage in ``[0, 100]``.

    Payoff goals measure the share of the initial balance already paid off. The
    initial balance comes from the goal metadata captured at creation time and
    falls back to the current amount when it was never recorded. Savings goals
    measure the share of the target already saved.
    """

    if goal.goal_type == GOAL_TYPE_PAYOFF:
        initial_value = goal.initial_value
        if initial_value is None:
            initial_value = goal.current_amount
        if initial_value <= 0:
            return 100.0
        paid_off = initial_value - goal.current_amount
        return _clamp_percentage(float(paid_off / initial_value * 100))

    if goal.target_amount <= 0:
        return 0.0
    return _clamp_percentage(float(goal.current_amount / goal.target_amount * 100))


def percent_used(spent: Decimal, budget_amount: Decimal) -> float:
    """Return ``spent`` as a percentage of ``budget_amount``.

    A budget without a positive amount is reported as fully used as soon as
    anything is spent against it.
    """

    if budget_amount <= 0:
        return 100.0 if spent > 0 else 0.0
    return float(spent / budget_amount * 100)


def _day_in_month(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def _add_months(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def next_due_date(due_day: int, recurrence: str, today: date) -> date:
    """Project the first occurrence of a recurring bill on or after ``today``.

    Projection starts from ``due_day`` in the current month. Monthly bills
    due on a day the month does not have fall on its last day instead.
    """

    if not 1 <= due_day <= 31:
        raise ValueError(f"due_day must be between 1 and 31, got {due_day}")

    candidate = _day_in_month(today.year, today.month, due_day)
    if candidate >= today:
        return candidate

    if recurrence in _RECURRENCE_STEPS:
        step = _RECURRENCE_STEPS[recurrence]
        while candidate < today:
            candidate += step
        return candidate

    if recurrence != RECURRENCE_MONTHLY:
        raise ValueError(f"Unsupported recurrence: {recurrence!r}")
    year, month = _add_months(today.year, today.month, 1)
    return _day_in_month(year, month, due_day)


def days_until(due_date: date, today: date) -> int:
    """Return the number of whole days between ``today`` and ``due_date``."""

    return (due_date - today).days


def budget_period(budget: Budget, today: date) -> tuple[date, date]:
    """Return the inclusive date range a budget's spend is measured over.

    Explicit start/end dates take precedence, then the budget's month and year,
    and finally the calendar month containing ``today``.
    """

    if budget.start_date or budget.end_date:
        start = budget.start_date or date.min
        end = budget.end_date or date.max
        return start, end

    if budget.month and budget.year:
        year, month = budget.year, budget.month
    else:
        year, month = today.year, today.month
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


__all__ = [
    "budget_period",
    "days_until",
    "goal_progress",
    "next_due_date",
    "percent_used",
]
