"""Shared session helpers for the repositories."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


def commit_or_rollback(session: Session) -> None:
    """Commit ``session``, rolling back before re-raising on failure."""

    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
