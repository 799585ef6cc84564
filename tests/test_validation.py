import json
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
from pydantic import ValidationError

from fsp_core import (
    Actor,
    Application,
    ApplicationRow,
    ApplicationStatus,
    ApplicationType,
    Competition,
    CompetitionRow,
    CompetitionType,
    FormingDetails,
    InMemoryRegistry,
    ProfileRow,
    Role,
    Settings,
    SubmissionRequest,
    UniqueViolation,
    parse_row,
)

UTC = timezone.utc


def _row(**overrides) -> ApplicationRow:
    row = ApplicationRow(
        id="app-1",
        competition_id="comp-1",
        applicant_user_id=None,
        applicant_team_id="team-1",
        application_type="командная",
        submitted_by_user_id="u-1",
        status="на_рассмотрении",
        submitted_at="2025-03-05T12:00:00.000Z",
        additional_data=None,
    )
    row.update(overrides)
    return row


def test_legacy_labels_normalize_to_canonical_values():
    assert CompetitionType("региональное") == CompetitionType.REGIONAL
    assert CompetitionType("Федеральное") == CompetitionType.FEDERAL
    assert ApplicationType("индивидуальная") == ApplicationType.INDIVIDUAL
    assert ApplicationStatus("одобрена") == ApplicationStatus.APPROVED
    assert ApplicationStatus("отклонена") == ApplicationStatus.REJECTED
    assert ApplicationStatus(" PENDING_REVIEW ") == ApplicationStatus.PENDING_REVIEW
    assert Role("regional_rep") == Role.REGIONAL_REP


def test_unknown_labels_are_rejected_at_the_boundary():
    with pytest.raises(ValueError):
        ApplicationStatus("отменена")
    with pytest.raises(ValidationError):
        Actor(user_id="u-1", role="coach")
    with pytest.raises(ValidationError):
        parse_row(Application, _row(status="archived"))


def test_application_row_from_web_ui():
    app = parse_row(Application, _row())
    assert app.application_type == ApplicationType.TEAM
    assert app.status == ApplicationStatus.PENDING_REVIEW
    assert app.submitted_at == datetime(2025, 3, 5, 12, 0, tzinfo=UTC)


def test_forming_row_decodes_json_additional_data():
    payload = json.dumps({"required_members": "2", "roles_needed": " designer "})
    app = parse_row(Application, _row(status="формируется", additional_data=payload))
    assert app.status == ApplicationStatus.FORMING
    assert app.additional_data == FormingDetails(required_members=2, roles_needed="designer")


def test_additional_data_only_while_forming():
    with pytest.raises(ValidationError):
        parse_row(Application, _row(additional_data={"required_members": 2}))


def test_application_requires_exactly_one_applicant():
    with pytest.raises(ValidationError):
        parse_row(Application, _row(applicant_user_id="u-1"))
    with pytest.raises(ValidationError):
        parse_row(Application, _row(applicant_team_id=None))
    with pytest.raises(ValidationError):
        parse_row(Application, _row(applicant_team_id="  "))


def test_application_type_must_match_applicant():
    with pytest.raises(ValidationError):
        parse_row(Application, _row(application_type="individual"))


def test_forming_details_need_at_least_one_member():
    with pytest.raises(ValidationError):
        FormingDetails(required_members=0)
    assert FormingDetails(required_members=1, roles_needed=None).roles_needed == ""


def test_to_row_keeps_structured_additional_data():
    app = parse_row(
        Application,
        _row(status="forming", additional_data={"required_members": 2, "roles_needed": "qa"}),
    )
    row = app.to_row()
    assert row["status"] == "forming"
    assert row["application_type"] == "team"
    assert row["additional_data"] == {"required_members": 2, "roles_needed": "qa"}
    assert parse_row(Application, row) == app

    fresh = app.model_copy(update={"id": None})
    assert "id" not in fresh.to_row()


def test_submission_request_path_rules():
    with pytest.raises(ValidationError):
        SubmissionRequest(
            competition_id="c", path="individual", submitted_by_user_id="u", team_id="t"
        )
    with pytest.raises(ValidationError):
        SubmissionRequest(competition_id="c", path="team", submitted_by_user_id="u")
    with pytest.raises(ValidationError):
        SubmissionRequest(competition_id="c", path="regional", submitted_by_user_id="u")
    with pytest.raises(ValidationError):
        SubmissionRequest(
            competition_id="c", path="team", submitted_by_user_id="u", team_id="t", is_incomplete=True
        )


def test_submission_request_forming_details_only_when_incomplete():
    request = SubmissionRequest(
        competition_id="c",
        path="team",
        submitted_by_user_id="u",
        team_id="t",
        forming={"required_members": 2},
    )
    assert request.forming_details is None
    assert request.application_type == ApplicationType.TEAM


def test_actor_from_profile_row():
    actor = Actor.from_profile("u-1", ProfileRow(id="u-1", role="athlete", region_id=" R1 "))
    assert actor.role == Role.ATHLETE
    assert actor.region_id == "R1"
    assert Actor.from_profile("u-2", {"role": "fsp_admin", "region_id": ""}).region_id is None


def test_competition_row_from_store():
    row = CompetitionRow(
        id="comp-5",
        name="Regional CTF",
        type="региональное",
        region_id=" R1 ",
        registration_start_date="2025-03-01T09:00:00Z",
        registration_end_date="2025-03-10T18:00:00Z",
        start_date="2025-03-15T10:00:00Z",
        end_date="2025-03-17T20:00:00Z",
        max_participants_or_teams=None,
        organizer_user_id="org-1",
    )
    comp = parse_row(Competition, row)
    assert comp.type == CompetitionType.REGIONAL
    assert comp.region_id == "R1"
    assert comp.registration_end == datetime(2025, 3, 10, 18, 0, tzinfo=UTC)

    with pytest.raises(ValidationError):
        parse_row(Competition, CompetitionRow(id="comp-6", type="открытое", organizer_user_id="org-1"))


def test_registry_loads_rows_and_enforces_uniqueness():
    registry = InMemoryRegistry.from_rows(
        [
            _row(),
            _row(id="app-2", applicant_team_id=None, applicant_user_id="u-3", application_type="индивидуальная"),
        ]
    )
    assert len(registry) == 2
    assert registry.find_one(applicant_user_id="u-3").id == "app-2"
    assert [a.id for a in registry.find_many(status="на_рассмотрении")] == ["app-1", "app-2"]

    duplicate = parse_row(Application, _row(id=None))
    with pytest.raises(UniqueViolation) as excinfo:
        registry.insert(duplicate)
    assert excinfo.value.constraint == "applications_competition_applicant_team_key"
    assert len(registry) == 2


def test_registry_rejects_unknown_filters_and_ids():
    registry = InMemoryRegistry()
    with pytest.raises(ValueError):
        registry.find_many(team_name="x")
    with pytest.raises(KeyError):
        registry.update_status("missing", ApplicationStatus.APPROVED)


def test_settings_validate_timezone():
    assert Settings(FSP_ASSUME_TIMEZONE="utc").assumed_tz is UTC
    with pytest.raises(ValidationError):
        Settings(FSP_ASSUME_TIMEZONE="Mars/Olympus_Mons")


def test_settings_accept_fixed_offsets():
    assert Settings(FSP_ASSUME_TIMEZONE="+03:00").assumed_tz == timezone(timedelta(hours=3))
    assert Settings(FSP_ASSUME_TIMEZONE=" -05:30 ").assumed_tz == timezone(-timedelta(hours=5, minutes=30))
    with pytest.raises(ValidationError):
        Settings(FSP_ASSUME_TIMEZONE="+24:00")


def test_settings_accept_iana_zone_names():
    try:
        moscow = ZoneInfo("Europe/Moscow")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not installed")
    assert Settings(FSP_ASSUME_TIMEZONE="Europe/Moscow").assumed_tz == moscow


def test_unknown_timezone_error_keeps_lookup_cause():
    with pytest.raises(ValidationError) as excinfo:
        Settings(FSP_ASSUME_TIMEZONE="Mars/Olympus_Mons")
    error = excinfo.value.errors()[0]["ctx"]["error"]
    assert "Mars/Olympus_Mons" in str(error)
    assert isinstance(error.__cause__, ZoneInfoNotFoundError)
