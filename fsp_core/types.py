"""Enum and row type definitions for competitions and applications."""
from __future__ import annotations

from enum import Enum
from typing import TypedDict


class _LabelEnum(str, Enum):
    """str-backed enum that also accepts the legacy labels stored by the web UI."""

    @classmethod
    def _legacy_labels(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        canonical = cls._legacy_labels().get(key, key)
        for member in cls:
            if member.value == canonical:
                return member
        return None


class Phase(str, Enum):
    UPCOMING = "upcoming"
    REGISTRATION_OPEN = "registration_open"
    REGISTRATION_CLOSED = "registration_closed"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class CompetitionType(_LabelEnum):
    OPEN = "open"
    REGIONAL = "regional"
    FEDERAL = "federal"

    @classmethod
    def _legacy_labels(cls) -> dict[str, str]:
        return {
            "открытое": "open",
            "региональное": "regional",
            "федеральное": "federal",
        }


class Role(_LabelEnum):
    ATHLETE = "athlete"
    REGIONAL_REP = "regional_rep"
    FSP_ADMIN = "fsp_admin"


class ApplicationType(_LabelEnum):
    INDIVIDUAL = "individual"
    TEAM = "team"

    @classmethod
    def _legacy_labels(cls) -> dict[str, str]:
        return {"индивидуальная": "individual", "командная": "team"}


class ApplicationStatus(_LabelEnum):
    FORMING = "forming"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def _legacy_labels(cls) -> dict[str, str]:
        return {
            "формируется": "forming",
            "на_рассмотрении": "pending_review",
            "одобрена": "approved",
            "отклонена": "rejected",
        }


class ReasonCode(str, Enum):
    OUTSIDE_WINDOW = "outside_window"
    WRONG_REGION = "wrong_region"
    WRONG_ROLE = "wrong_role"
    ALREADY_APPLIED = "already_applied"


class SubmissionPath(str, Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"
    REGIONAL = "regional"


class CompetitionRow(TypedDict, total=False):
    """A competitions row as read from the store."""
    id: str
    name: str
    type: str
    region_id: str | None
    registration_start_date: str
    registration_end_date: str
    start_date: str
    end_date: str
    max_participants_or_teams: int | None
    organizer_user_id: str


class ProfileRow(TypedDict, total=False):
    """A users row; only the fields eligibility needs."""
    id: str
    role: str
    region_id: str | None


class ApplicationRow(TypedDict, total=False):
    """
    An applications row.

    Exactly one of applicant_user_id / applicant_team_id is set.
    additional_data is a JSON string or dict, present only while forming.
    """
    id: str
    competition_id: str
    applicant_user_id: str | None
    applicant_team_id: str | None
    application_type: str
    submitted_by_user_id: str
    status: str
    submitted_at: str
    additional_data: str | dict | None
