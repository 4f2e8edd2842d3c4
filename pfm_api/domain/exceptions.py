"""Errors raised by the alert engine and its management use cases."""

from __future__ import annotations

from typing import Any


class AlertConfigurationError(ValueError):
    """Raised when an alert's condition payload does not fit its kind.

    ``errors`` holds one ``{"field": ..., "message": ...}`` entry per problem
    so callers can surface every offending field at once.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DanglingReferenceError(LookupError):
    """Raised when an alert points to a subject that no longer exists."""

    def __init__(self, alert_id: int | None, subject_type: str, subject_id: int | None) -> None:
        super().__init__(
            f"Alert {alert_id} references missing {subject_type} {subject_id}"
        )
        self.alert_id = alert_id
        self.subject_type = subject_type
        self.subject_id = subject_id


class UnknownAlertKindError(RuntimeError):
    """Raised when no evaluator is registered for an alert kind."""

    def __init__(self, kind: Any) -> None:
        super().__init__(f"Unknown alert kind: {kind!r}")
        self.kind = kind


class ResourceNotFoundError(LookupError):
    """Raised by management use cases when a user-owned row is missing."""


__all__ = [
    "AlertConfigurationError",
    "DanglingReferenceError",
    "ResourceNotFoundError",
    "UnknownAlertKindError",
]
