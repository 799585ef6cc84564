"""
Boundary models using Pydantic v2
Validates competitions, actors, teams and applications read from the store
"""

import json
import logging
from datetime import datetime
from typing import Any, Self, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .config import settings
from .types import (
    ApplicationRow,
    ApplicationStatus,
    ApplicationType,
    CompetitionRow,
    CompetitionType,
    ProfileRow,
    Role,
    SubmissionPath,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def ensure_aware(value: datetime) -> datetime:
    """Attach the configured zone to naive datetimes; aware ones pass through."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=settings.assumed_tz)
    return value


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = str(v).strip()
    return v or None


# ==================== COMPETITION / ACTOR / TEAM ====================


class Competition(BaseModel):
    """Competition as seen by the core (read-only)."""

    id: str = Field(..., min_length=1)
    name: str = ""
    type: CompetitionType
    region_id: str | None = None
    registration_start: datetime = Field(..., alias="registration_start_date")
    registration_end: datetime = Field(..., alias="registration_end_date")
    event_start: datetime = Field(..., alias="start_date")
    event_end: datetime = Field(..., alias="end_date")
    max_participants_or_teams: int | None = Field(None, ge=1)
    organizer_user_id: str = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("region_id", mode="before")
    @classmethod
    def normalize_region(cls, v: Any) -> str | None:
        return _strip_or_none(v)

    @field_validator(
        "registration_start", "registration_end", "event_start", "event_end"
    )
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class Actor(BaseModel):
    """The authenticated user making a request, with their profile role/region."""

    user_id: str = Field(..., min_length=1)
    role: Role
    region_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("region_id", mode="before")
    @classmethod
    def normalize_region(cls, v: Any) -> str | None:
        return _strip_or_none(v)

    @classmethod
    def from_profile(cls, user_id: str, profile: ProfileRow) -> "Actor":
        """Build an actor from the identity id and a ``users`` profile row."""
        return cls(user_id=user_id, role=profile.get("role"), region_id=profile.get("region_id"))


class Team(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    captain_user_id: str = Field(..., min_length=1)
    member_user_ids: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


# ==================== APPLICATIONS ====================


class FormingDetails(BaseModel):
    """What an incomplete team still needs (stored as additional_data)."""

    required_members: int = Field(..., ge=1, le=1000)
    roles_needed: str = Field("", max_length=2000)

    model_config = ConfigDict(frozen=True)

    @field_validator("roles_needed", mode="before")
    @classmethod
    def normalize_roles(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class Application(BaseModel):
    """A stored (or about to be stored) application."""

    id: str | None = None
    competition_id: str = Field(..., min_length=1)
    applicant_user_id: str | None = None
    applicant_team_id: str | None = None
    application_type: ApplicationType
    submitted_by_user_id: str = Field(..., min_length=1)
    status: ApplicationStatus
    submitted_at: datetime
    additional_data: FormingDetails | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("applicant_user_id", "applicant_team_id", mode="before")
    @classmethod
    def normalize_applicant(cls, v: Any) -> str | None:
        return _strip_or_none(v)

    @field_validator("submitted_at")
    @classmethod
    def normalize_submitted_at(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @field_validator("additional_data", mode="before")
    @classmethod
    def decode_additional_data(cls, v: Any) -> Any:
        """The web UI stored this as a JSON string; accept both forms."""
        if isinstance(v, str):
            stripped = v.strip()
            if not stripped:
                return None
            try:
                return json.loads(stripped)
            except json.JSONDecodeError:
                raise ValueError("additional_data must be a JSON object")
        return v

    @model_validator(mode="after")
    def validate_applicant(self) -> Self:
        """Exactly one applicant, matching the application type."""
        has_user = self.applicant_user_id is not None
        has_team = self.applicant_team_id is not None
        if has_user == has_team:
            raise ValueError(
                "exactly one of applicant_user_id or applicant_team_id must be set"
            )
        if self.application_type == ApplicationType.INDIVIDUAL and not has_user:
            raise ValueError("individual application requires applicant_user_id")
        if self.application_type == ApplicationType.TEAM and not has_team:
            raise ValueError("team application requires applicant_team_id")
        if self.additional_data is not None and self.status != ApplicationStatus.FORMING:
            raise ValueError("additional_data is only allowed while forming")
        return self

    def to_row(self) -> ApplicationRow:
        """Serialize for the store; additional_data stays a structured record."""
        row = self.model_dump(mode="json")
        if self.id is None:
            row.pop("id")
        return row


class SubmissionRequest(BaseModel):
    """
    What the UI sends when the user presses submit.

    - path=individual: the actor applies for themselves (team_id must be absent)
    - path=team: a captain applies for their team
    - path=regional: a regional representative enters a team into a federal competition
    """

    competition_id: str = Field(..., min_length=1)
    path: SubmissionPath
    submitted_by_user_id: str = Field(..., min_length=1)
    team_id: str | None = None
    is_incomplete: bool = False
    forming: FormingDetails | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("team_id", mode="before")
    @classmethod
    def normalize_team(cls, v: Any) -> str | None:
        return _strip_or_none(v)

    @model_validator(mode="after")
    def validate_request_fields(self) -> Self:
        """Validate required fields based on submission path"""
        if self.path == SubmissionPath.INDIVIDUAL:
            if self.team_id is not None:
                raise ValueError("individual submission must not carry team_id")
            if self.is_incomplete:
                raise ValueError("only team submissions can be incomplete")
        elif self.team_id is None:
            raise ValueError(f"{self.path.value} submission requires team_id")

        if self.is_incomplete and self.forming is None:
            raise ValueError("incomplete team requires forming details")
        return self

    @property
    def forming_details(self) -> FormingDetails | None:
        # The form keeps its fields filled after the checkbox is cleared.
        return self.forming if self.is_incomplete else None

    @property
    def application_type(self) -> ApplicationType:
        if self.path == SubmissionPath.INDIVIDUAL:
            return ApplicationType.INDIVIDUAL
        return ApplicationType.TEAM


def parse_row(model: type[ModelT], row: CompetitionRow | ApplicationRow) -> ModelT:
    """
    Validate a store row into a boundary model

    Raises:
        pydantic.ValidationError: unknown labels, missing applicant, etc.
    """
    try:
        return model.model_validate(row)
    except ValidationError as e:
        logger.warning(f"Rejected {model.__name__} row {row.get('id')!r}: {e}")
        raise


__all__ = [
    "Actor",
    "Application",
    "Competition",
    "FormingDetails",
    "SubmissionRequest",
    "Team",
    "ensure_aware",
    "parse_row",
]
