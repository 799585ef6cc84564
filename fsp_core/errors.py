"""Typed error results returned by the core (pure, no transport).

Decision and lifecycle operations return one of these instead of raising, so
callers can branch on ``isinstance(result, CoreError)`` and re-present the
``kind``/``reason`` to the user. ``status_code`` is a hint for an HTTP layer.

``UniqueViolation`` is the one exception: registries raise it from ``insert``
when a uniqueness constraint rejects the row, and the core converts it into
``DuplicateApplicationError``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .types import ApplicationStatus, ReasonCode


class CoreError:
    kind: ClassVar[str]
    status_code: ClassVar[int]


@dataclass(frozen=True)
class ConfigurationError(CoreError):
    """Competition is malformed (time window order, region)."""

    message: str
    competition_id: str | None = None

    kind: ClassVar[str] = "configuration"
    status_code: ClassVar[int] = 422


@dataclass(frozen=True)
class EligibilityError(CoreError):
    reason: ReasonCode
    message: str | None = None

    kind: ClassVar[str] = "eligibility"
    status_code: ClassVar[int] = 403


@dataclass(frozen=True)
class DuplicateApplicationError(CoreError):
    """Insert lost the race against another submission for the same applicant."""

    competition_id: str
    applicant_user_id: str | None = None
    applicant_team_id: str | None = None

    kind: ClassVar[str] = "duplicate_application"
    status_code: ClassVar[int] = 409

    @property
    def reason(self) -> ReasonCode:
        return ReasonCode.ALREADY_APPLIED


@dataclass(frozen=True)
class AuthorizationError(CoreError):
    actor_user_id: str
    message: str | None = None

    kind: ClassVar[str] = "authorization"
    status_code: ClassVar[int] = 403


@dataclass(frozen=True)
class InvalidTransitionError(CoreError):
    current: ApplicationStatus
    target: ApplicationStatus

    kind: ClassVar[str] = "invalid_transition"
    status_code: ClassVar[int] = 409

    @property
    def message(self) -> str:
        return f"cannot move application from {self.current.value} to {self.target.value}"


@dataclass(frozen=True)
class ApplicationNotFoundError(CoreError):
    application_id: str

    kind: ClassVar[str] = "not_found"
    status_code: ClassVar[int] = 404


class UniqueViolation(Exception):
    """Raised by a registry when an insert breaks a uniqueness constraint."""

    def __init__(self, constraint: str, message: str | None = None):
        self.constraint = constraint
        super().__init__(message or f"unique constraint violated: {constraint}")
