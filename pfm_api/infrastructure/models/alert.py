"""SQLAlchemy model for user alert rules."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import expression

from pfm_api.infrastructure.database import Base
from pfm_api.utils import now_in_app_timezone


class AlertModel(Base):
    """Database representation of an alert rule."""

    __tablename__ = "alert"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    alert_kind = Column(String(40), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    source_type = Column(String(20), nullable=True)
    source_id = Column(Integer, nullable=True)
    conditions = Column(JSON, nullable=False, default=dict)
    email_delivery = Column(Boolean, nullable=False, default=True)
    sms_delivery = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    active = Column(Boolean, nullable=False, default=True)
    last_triggered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )
    updated_at = Column(
        DateTime(timezone=True), nullable=True, onupdate=now_in_app_timezone
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["AlertModel"]
