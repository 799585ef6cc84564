"""Application status state machine.

    forming --(not an organizer edge)--> pending_review
    pending_review -> approved | rejected
    approved -> rejected      (participation cancelled)
    rejected -> approved      (reinstated)

A submission starts in forming when the team is declared incomplete and in
pending_review otherwise. Only organizer edges are modelled here; nothing moves
an application out of forming automatically.
"""
from __future__ import annotations

from types import MappingProxyType

from .errors import InvalidTransitionError
from .types import ApplicationStatus

ORGANIZER_TRANSITIONS = MappingProxyType(
    {
        ApplicationStatus.FORMING: (),
        ApplicationStatus.PENDING_REVIEW: (
            ApplicationStatus.APPROVED,
            ApplicationStatus.REJECTED,
        ),
        ApplicationStatus.APPROVED: (ApplicationStatus.REJECTED,),
        ApplicationStatus.REJECTED: (ApplicationStatus.APPROVED,),
    }
)

# Statuses an organizer can set; re-applying one of these is a no-op.
_DECIDED = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})


def initial_status(is_incomplete: bool) -> ApplicationStatus:
    if is_incomplete:
        return ApplicationStatus.FORMING
    return ApplicationStatus.PENDING_REVIEW


def available_transitions(status: ApplicationStatus) -> tuple[ApplicationStatus, ...]:
    """Targets an organizer may pick for an application in ``status``."""
    return ORGANIZER_TRANSITIONS[ApplicationStatus(status)]


def is_noop(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return current == target and current in _DECIDED


def check_transition(
    current: ApplicationStatus, target: ApplicationStatus
) -> InvalidTransitionError | None:
    """Return InvalidTransitionError unless ``current -> target`` is allowed."""
    if is_noop(current, target):
        return None
    if target in available_transitions(current):
        return None
    return InvalidTransitionError(current=current, target=target)
