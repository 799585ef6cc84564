"""Application registry contract and an in-memory implementation.

The core never stores anything itself. It talks to a registry through the
ApplicationRegistry protocol: equality-filtered reads, an insert that enforces
one application per (competition, applicant user) and per
(competition, applicant team), and a status update by id.

The existence check done before insert is only a fast path for a friendly
message. The registry's unique constraint is what decides; two tabs
submitting for the same team at once must end with exactly one row.
"""
from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable, Protocol

from .errors import UniqueViolation
from .types import ApplicationRow, ApplicationStatus
from .validation import Application, parse_row

logger = logging.getLogger(__name__)

FILTERABLE_FIELDS = frozenset(
    {"id", "competition_id", "applicant_user_id", "applicant_team_id", "status"}
)

USER_CONSTRAINT = "applications_competition_applicant_user_key"
TEAM_CONSTRAINT = "applications_competition_applicant_team_key"


class ApplicationRegistry(Protocol):
    def find_one(self, **filters) -> Application | None:
        ...

    def find_many(self, **filters) -> list[Application]:
        ...

    def insert(self, application: Application) -> Application:
        """Store a new application and return it with ``id`` set.

        Raises:
            UniqueViolation: an application for the same applicant exists
        """
        ...

    def update_status(self, application_id: str, status: ApplicationStatus) -> Application:
        """Overwrite ``status``. Raises KeyError for an unknown id."""
        ...


def _check_filters(filters: dict) -> None:
    unknown = set(filters) - FILTERABLE_FIELDS
    if unknown:
        raise ValueError(f"unsupported filter(s): {sorted(unknown)}")


def _matches(application: Application, filters: dict) -> bool:
    for name, expected in filters.items():
        actual = getattr(application, name)
        if name == "status" and expected is not None:
            expected = ApplicationStatus(expected)
        if actual != expected:
            return False
    return True


class InMemoryRegistry:
    """Dict-backed registry with unique indexes on both applicant keys.

    Suitable for tests and single-process tools. Check-and-insert happens under
    one lock, which gives the same guarantee a database unique index does.
    """

    def __init__(self, applications: Iterable[Application] = ()):
        self._lock = threading.Lock()
        self._rows: dict[str, Application] = {}
        self._by_user: dict[tuple[str, str], str] = {}
        self._by_team: dict[tuple[str, str], str] = {}
        for application in applications:
            self.insert(application)

    @classmethod
    def from_rows(cls, rows: Iterable[ApplicationRow]) -> "InMemoryRegistry":
        """Load rows as written by the web UI (legacy labels, JSON additional_data)."""
        return cls(parse_row(Application, row) for row in rows)

    def __len__(self) -> int:
        return len(self._rows)

    def find_one(self, **filters) -> Application | None:
        found = self.find_many(**filters)
        return found[0] if found else None

    def find_many(self, **filters) -> list[Application]:
        _check_filters(filters)
        with self._lock:
            return [app for app in self._rows.values() if _matches(app, filters)]

    def insert(self, application: Application) -> Application:
        app_id = application.id or str(uuid.uuid4())
        user_key = team_key = None
        if application.applicant_user_id is not None:
            user_key = (application.competition_id, application.applicant_user_id)
        if application.applicant_team_id is not None:
            team_key = (application.competition_id, application.applicant_team_id)

        with self._lock:
            if app_id in self._rows:
                raise UniqueViolation("applications_pkey")
            if user_key is not None and user_key in self._by_user:
                raise UniqueViolation(USER_CONSTRAINT)
            if team_key is not None and team_key in self._by_team:
                raise UniqueViolation(TEAM_CONSTRAINT)
            stored = application.model_copy(update={"id": app_id})
            self._rows[app_id] = stored
            if user_key is not None:
                self._by_user[user_key] = app_id
            if team_key is not None:
                self._by_team[team_key] = app_id
        logger.debug(f"Stored application {app_id} for competition {application.competition_id}")
        return stored

    def update_status(self, application_id: str, status: ApplicationStatus) -> Application:
        with self._lock:
            current = self._rows[application_id]
            updated = current.model_copy(update={"status": ApplicationStatus(status)})
            self._rows[application_id] = updated
        return updated
