"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import expression

from pfm_api.infrastructure.database import Base
from pfm_api.utils import now_in_app_timezone


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    alert_id = Column(Integer, ForeignKey("alert.id"), nullable=True, index=True)
    event_type = Column(String(40), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["NotificationModel"]
