"""SQLAlchemy models for the financial records alerts watch."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)

from pfm_api.infrastructure.database import Base
from pfm_api.utils import now_in_app_timezone

_MONEY = Numeric(14, 2, asdecimal=True)


class AccountModel(Base):
    """Database representation of a financial account."""

    __tablename__ = "account"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    account_type = Column(String(40), nullable=False, default="checking")
    balance = Column(_MONEY, nullable=False, default=0)
    archived_at = Column(DateTime(timezone=True), nullable=True)


class GoalModel(Base):
    """Database representation of a savings or payoff goal."""

    __tablename__ = "goal"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    goal_type = Column(String(20), nullable=False)
    target_amount = Column(_MONEY, nullable=False, default=0)
    current_amount = Column(_MONEY, nullable=False, default=0)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class BudgetModel(Base):
    """Database representation of a spending budget."""

    __tablename__ = "budget"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    budget_amount = Column(_MONEY, nullable=False)
    account_list = Column(JSON, nullable=False, default=list)
    tag_names = Column(JSON, nullable=False, default=list)
    month = Column(Integer, nullable=True)
    year = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class TransactionModel(Base):
    """Database representation of a posted transaction."""

    __tablename__ = "bank_transaction"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("account.id"), nullable=True, index=True)
    amount = Column(_MONEY, nullable=False)
    description = Column(String(255), nullable=True)
    merchant_name = Column(String(255), nullable=True)
    tag_name = Column(String(100), nullable=True)
    posted_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class CashflowBillModel(Base):
    """Database representation of a recurring bill."""

    __tablename__ = "cashflow_bill"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("account.id"), nullable=True)
    name = Column(String(255), nullable=False)
    amount = Column(_MONEY, nullable=False)
    due_day = Column(Integer, nullable=False)
    recurrence = Column(String(20), nullable=False, default="monthly")
    active = Column(Boolean, nullable=False, default=True)
    stopped_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


__all__ = [
    "AccountModel",
    "BudgetModel",
    "CashflowBillModel",
    "GoalModel",
    "TransactionModel",
]
