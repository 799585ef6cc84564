"""Submission and review operations (pure decisions + registry calls).

This module wires the evaluators to an ApplicationRegistry:

- submit_application(): validate the competition, re-run eligibility against a
  fresh registry read, derive the initial status, insert atomically
- transition_application(): organizer-only status changes along the allowed edges
- list_competition_applications(): organizer review list with a status filter
- current_application_status(): the status badge shown on a competition page

Decisions come back as typed results (see errors.py). Registry failures other
than a unique violation propagate unchanged; nothing here retries.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from .config import settings
from .eligibility import (
    EligibilityDecision,
    can_submit_as_regional_representative,
    can_submit_individual,
    can_submit_team,
)
from .errors import (
    ApplicationNotFoundError,
    AuthorizationError,
    ConfigurationError,
    DuplicateApplicationError,
    EligibilityError,
    InvalidTransitionError,
    UniqueViolation,
)
from .lifecycle import check_transition, initial_status, is_noop
from .registry import ApplicationRegistry
from .schedule import phase, validate_competition
from .types import ApplicationStatus, Phase, ReasonCode, SubmissionPath
from .validation import Actor, Application, Competition, SubmissionRequest, Team, ensure_aware

logger = logging.getLogger(__name__)


def _check_request_context(
    request: SubmissionRequest,
    actor: Actor,
    competition: Competition,
    team: Team | None,
) -> None:
    """Reject requests that disagree with the context the caller passed in."""
    if request.competition_id != competition.id:
        raise ValueError("request competition_id does not match competition")
    if request.submitted_by_user_id != actor.user_id:
        raise ValueError("submitted_by_user_id must be the acting user")
    if request.path != SubmissionPath.INDIVIDUAL:
        if team is None:
            raise ValueError(f"{request.path.value} submission requires the team")
        if team.id != request.team_id:
            raise ValueError("request team_id does not match team")


def _existing_for(
    registry: ApplicationRegistry, request: SubmissionRequest, actor: Actor
) -> Application | None:
    if request.path == SubmissionPath.INDIVIDUAL:
        return registry.find_one(
            competition_id=request.competition_id, applicant_user_id=actor.user_id
        )
    return registry.find_one(
        competition_id=request.competition_id, applicant_team_id=request.team_id
    )


def _decide(
    request: SubmissionRequest,
    actor: Actor,
    competition: Competition,
    team: Team | None,
    current_phase: Phase,
    existing: Application | None,
) -> EligibilityDecision:
    path = request.path
    if path == SubmissionPath.INDIVIDUAL:
        return can_submit_individual(actor, competition, current_phase, existing)
    if path == SubmissionPath.TEAM:
        return can_submit_team(actor, team, competition, current_phase, existing)
    if path == SubmissionPath.REGIONAL:
        # Same order as the other paths: window, duplicate, then role.
        if current_phase == Phase.REGISTRATION_OPEN and existing is not None:
            return EligibilityDecision(allowed=False, reason=ReasonCode.ALREADY_APPLIED)
        return can_submit_as_regional_representative(actor, competition, current_phase)
    raise ValueError(f"unhandled submission path: {path!r}")


def submit_application(
    registry: ApplicationRegistry,
    request: SubmissionRequest,
    *,
    actor: Actor,
    competition: Competition,
    now: datetime,
    team: Team | None = None,
) -> Application | ConfigurationError | EligibilityError | DuplicateApplicationError:
    """Validate and store a new application.

    Args:
        registry: where applications live
        request: what the user submitted
        actor: the authenticated user (explicit, never read from a session)
        competition: the target competition, freshly read
        now: submission instant; becomes submitted_at
        team: required for team and regional paths

    Returns:
        The stored Application, or a typed error result

    Raises:
        ValueError: request does not match actor/competition/team
    """
    config_error = validate_competition(competition)
    if config_error is not None:
        logger.warning(f"Submission to misconfigured competition {competition.id}: {config_error.message}")
        return config_error

    _check_request_context(request, actor, competition, team)
    now = ensure_aware(now)
    current_phase = phase(competition, now)

    existing = _existing_for(registry, request, actor)
    if existing is not None:
        logger.debug(f"Pre-check found application {existing.id} for {request.path.value} submission")

    decision = _decide(request, actor, competition, team, current_phase, existing)
    if not decision.allowed:
        logger.warning(
            f"Denied {request.path.value} submission by {actor.user_id} "
            f"to {competition.id}: {decision.reason.value}"
        )
        return EligibilityError(reason=decision.reason)

    if request.path == SubmissionPath.INDIVIDUAL:
        applicant = {"applicant_user_id": actor.user_id}
    else:
        applicant = {"applicant_team_id": request.team_id}

    forming = request.forming_details
    application = Application(
        competition_id=competition.id,
        application_type=request.application_type,
        submitted_by_user_id=actor.user_id,
        status=initial_status(forming is not None),
        submitted_at=now,
        additional_data=forming,
        **applicant,
    )

    try:
        stored = registry.insert(application)
    except UniqueViolation as e:
        logger.warning(f"Duplicate application for {competition.id} rejected by {e.constraint}")
        return DuplicateApplicationError(competition_id=competition.id, **applicant)

    logger.info(
        f"Application {stored.id} submitted to {competition.id} "
        f"({request.path.value}, status={stored.status.value})"
    )
    return stored


def _authorize_organizer(actor: Actor, competition: Competition) -> AuthorizationError | None:
    if actor.user_id != competition.organizer_user_id:
        logger.warning(f"User {actor.user_id} is not the organizer of {competition.id}")
        return AuthorizationError(
            actor_user_id=actor.user_id,
            message="only the competition organizer can manage applications",
        )
    return None


def transition_application(
    registry: ApplicationRegistry,
    application_id: str,
    target_status: ApplicationStatus,
    *,
    actor: Actor,
    competition: Competition,
    rewrite_same_status: bool | None = None,
) -> Application | ApplicationNotFoundError | AuthorizationError | InvalidTransitionError:
    """Move an application to ``target_status`` on behalf of the organizer.

    Authorization is decided before legality, so a stranger always gets
    AuthorizationError whatever the requested edge. Re-applying the current
    decided status succeeds without a write unless ``rewrite_same_status``
    (default: settings.FSP_REWRITE_SAME_STATUS) is set.
    """
    target = ApplicationStatus(target_status)
    auth_error = _authorize_organizer(actor, competition)
    if auth_error is not None:
        return auth_error

    application = registry.find_one(id=application_id)
    if application is None:
        return ApplicationNotFoundError(application_id=application_id)
    if application.competition_id != competition.id:
        logger.warning(f"Application {application_id} does not belong to {competition.id}")
        return AuthorizationError(
            actor_user_id=actor.user_id,
            message="application belongs to another competition",
        )

    invalid = check_transition(application.status, target)
    if invalid is not None:
        logger.info(f"Rejected transition for {application_id}: {invalid.message}")
        return invalid

    if rewrite_same_status is None:
        rewrite_same_status = settings.FSP_REWRITE_SAME_STATUS
    if is_noop(application.status, target) and not rewrite_same_status:
        return application

    updated = registry.update_status(application_id, target)
    logger.info(
        f"Application {application_id}: {application.status.value} -> {updated.status.value}"
    )
    return updated


def list_competition_applications(
    registry: ApplicationRegistry,
    competition: Competition,
    *,
    actor: Actor,
    status: ApplicationStatus | None = None,
) -> list[Application] | AuthorizationError:
    """Organizer review list, newest first, optionally one status tab only."""
    auth_error = _authorize_organizer(actor, competition)
    if auth_error is not None:
        return auth_error
    filters = {"competition_id": competition.id}
    if status is not None:
        filters["status"] = ApplicationStatus(status)
    found = registry.find_many(**filters)
    return sorted(found, key=lambda app: app.submitted_at, reverse=True)


def current_application_status(
    registry: ApplicationRegistry,
    competition_id: str,
    *,
    user_id: str,
    team_ids: Iterable[str] = (),
) -> ApplicationStatus | None:
    """Status to show a user on the competition page.

    An application of one of the user's captained teams wins over their
    individual one.
    """
    for team_id in team_ids:
        team_app = registry.find_one(competition_id=competition_id, applicant_team_id=team_id)
        if team_app is not None:
            return team_app.status
    own = registry.find_one(competition_id=competition_id, applicant_user_id=user_id)
    return own.status if own is not None else None
