"""Competition time windows (pure, no I/O).

A competition carries four timestamps that must be ordered:

    registration_start <= registration_end <= event_start <= event_end

phase() maps an instant onto one of five phases. Both registration bounds are
inclusive to registration_open, so a submission made exactly at
registration_end is still accepted; the event window is inclusive too.
"""
from __future__ import annotations

from datetime import datetime

from .errors import ConfigurationError
from .types import CompetitionType, Phase
from .validation import Competition, ensure_aware


_ORDERED_BOUNDS = (
    ("registration_start", "registration_end"),
    ("registration_end", "event_start"),
    ("event_start", "event_end"),
)


def phase(competition: Competition, now: datetime) -> Phase:
    """Derive the competition phase at ``now``.

    Does not check the window order; call validate_competition() for that.
    """
    now = ensure_aware(now)
    if now < competition.registration_start:
        return Phase.UPCOMING
    if now <= competition.registration_end:
        return Phase.REGISTRATION_OPEN
    if now < competition.event_start:
        return Phase.REGISTRATION_CLOSED
    if now <= competition.event_end:
        return Phase.IN_PROGRESS
    return Phase.FINISHED


def validate_competition(competition: Competition) -> ConfigurationError | None:
    """Check the window order and the regional/region pairing.

    Returns ConfigurationError for the first problem found, None if the
    competition can be published.
    """
    for earlier, later in _ORDERED_BOUNDS:
        if getattr(competition, earlier) > getattr(competition, later):
            return ConfigurationError(
                message=f"{earlier} is after {later}",
                competition_id=competition.id,
            )
    if competition.type == CompetitionType.REGIONAL and not competition.region_id:
        return ConfigurationError(
            message="regional competition requires region_id",
            competition_id=competition.id,
        )
    return None
