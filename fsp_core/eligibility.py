"""Submission eligibility (pure decision functions).

Three submission paths exist:

- individual: a user applies for themselves
- team: a captain applies for their team
- regional: a regional representative enters a region's team into a federal
  competition; for federal competitions this is the only path

Every check runs in a fixed order and the first failing gate is reported:
registration window, duplicate application, role, region. fsp_admin bypasses
region checks everywhere. Nothing is cached; callers pass a freshly read
existing application on every call.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .schedule import phase as competition_phase
from .types import CompetitionType, Phase, ReasonCode, Role, SubmissionPath
from .validation import Actor, Application, Competition, Team

_REPRESENTATIVE_ROLES = frozenset({Role.REGIONAL_REP, Role.FSP_ADMIN})


@dataclass(frozen=True)
class EligibilityDecision:
    allowed: bool
    reason: ReasonCode | None = None


@dataclass(frozen=True)
class DeniedPath:
    path: SubmissionPath
    reason: ReasonCode


@dataclass(frozen=True)
class EligibilityReport:
    phase: Phase
    individual: bool
    team: bool
    regional_rep: bool
    reasons: tuple[DeniedPath, ...]


_ALLOWED = EligibilityDecision(allowed=True)


def _deny(reason: ReasonCode) -> EligibilityDecision:
    return EligibilityDecision(allowed=False, reason=reason)


def _region_rule(
    competition: Competition, role: Role, region_id: str | None
) -> EligibilityDecision:
    ctype = competition.type
    if ctype == CompetitionType.OPEN:
        return _ALLOWED
    if ctype == CompetitionType.FEDERAL:
        # Federal entries go through can_submit_as_regional_representative only.
        return _deny(ReasonCode.WRONG_ROLE)
    if ctype == CompetitionType.REGIONAL:
        if role == Role.FSP_ADMIN:
            return _ALLOWED
        if region_id is not None and region_id == competition.region_id:
            return _ALLOWED
        return _deny(ReasonCode.WRONG_REGION)
    raise ValueError(f"unhandled competition type: {ctype!r}")


def can_submit_individual(
    actor: Actor,
    competition: Competition,
    phase: Phase,
    existing_application: Application | None,
) -> EligibilityDecision:
    """May ``actor`` apply to ``competition`` as an individual right now?"""
    if phase != Phase.REGISTRATION_OPEN:
        return _deny(ReasonCode.OUTSIDE_WINDOW)
    if existing_application is not None:
        return _deny(ReasonCode.ALREADY_APPLIED)
    return _region_rule(competition, actor.role, actor.region_id)


def can_submit_team(
    actor: Actor,
    team: Team,
    competition: Competition,
    phase: Phase,
    existing_application: Application | None,
) -> EligibilityDecision:
    """May ``actor`` apply with ``team``? Only the captain submits.

    Region is keyed on the captain, who is the actor once the captain check
    passes; the rest of the roster is not consulted.
    """
    if phase != Phase.REGISTRATION_OPEN:
        return _deny(ReasonCode.OUTSIDE_WINDOW)
    if existing_application is not None:
        return _deny(ReasonCode.ALREADY_APPLIED)
    if actor.user_id != team.captain_user_id:
        return _deny(ReasonCode.WRONG_ROLE)
    return _region_rule(competition, actor.role, actor.region_id)


def can_submit_as_regional_representative(
    actor: Actor,
    competition: Competition,
    phase: Phase,
) -> EligibilityDecision:
    if phase != Phase.REGISTRATION_OPEN:
        return _deny(ReasonCode.OUTSIDE_WINDOW)
    if competition.type != CompetitionType.FEDERAL:
        return _deny(ReasonCode.WRONG_ROLE)
    if actor.role not in _REPRESENTATIVE_ROLES:
        return _deny(ReasonCode.WRONG_ROLE)
    return _ALLOWED


def evaluate_eligibility(
    actor: Actor,
    competition: Competition,
    now: datetime,
    *,
    team: Team | None = None,
    existing_individual: Application | None = None,
    existing_team: Application | None = None,
) -> EligibilityReport:
    """Evaluate all three paths at ``now`` for a competition page.

    ``existing_individual`` is the actor's own application, ``existing_team``
    the one for ``team``. Without a team the team path is denied as wrong_role.
    """
    current = competition_phase(competition, now)
    individual = can_submit_individual(actor, competition, current, existing_individual)
    if team is None:
        team_decision = _deny(ReasonCode.WRONG_ROLE)
    else:
        team_decision = can_submit_team(actor, team, competition, current, existing_team)
    regional = can_submit_as_regional_representative(actor, competition, current)

    reasons = tuple(
        DeniedPath(path=path, reason=decision.reason)
        for path, decision in (
            (SubmissionPath.INDIVIDUAL, individual),
            (SubmissionPath.TEAM, team_decision),
            (SubmissionPath.REGIONAL, regional),
        )
        if not decision.allowed
    )
    return EligibilityReport(
        phase=current,
        individual=individual.allowed,
        team=team_decision.allowed,
        regional_rep=regional.allowed,
        reasons=reasons,
    )
