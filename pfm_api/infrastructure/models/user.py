"""SQLAlchemy model for the user table."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, func

from pfm_api.infrastructure.database import Base


class UserModel(Base):
    """Database representation of an end user of the mocked API."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


__all__ = ["UserModel"]
