from .applications import (
    current_application_status,
    list_competition_applications,
    submit_application,
    transition_application,
)
from .config import Settings, settings
from .eligibility import (
    DeniedPath,
    EligibilityDecision,
    EligibilityReport,
    can_submit_as_regional_representative,
    can_submit_individual,
    can_submit_team,
    evaluate_eligibility,
)
from .errors import (
    ApplicationNotFoundError,
    AuthorizationError,
    ConfigurationError,
    CoreError,
    DuplicateApplicationError,
    EligibilityError,
    InvalidTransitionError,
    UniqueViolation,
)
from .lifecycle import available_transitions, check_transition, initial_status
from .registry import ApplicationRegistry, InMemoryRegistry
from .schedule import phase, validate_competition
from .types import (
    ApplicationRow,
    ApplicationStatus,
    ApplicationType,
    CompetitionRow,
    CompetitionType,
    Phase,
    ProfileRow,
    ReasonCode,
    Role,
    SubmissionPath,
)
from .validation import (
    Actor,
    Application,
    Competition,
    FormingDetails,
    SubmissionRequest,
    Team,
    parse_row,
)

__all__ = [
    "Actor",
    "Application",
    "ApplicationNotFoundError",
    "ApplicationRegistry",
    "ApplicationRow",
    "ApplicationStatus",
    "ApplicationType",
    "AuthorizationError",
    "Competition",
    "CompetitionRow",
    "CompetitionType",
    "ConfigurationError",
    "CoreError",
    "DeniedPath",
    "DuplicateApplicationError",
    "EligibilityDecision",
    "EligibilityError",
    "EligibilityReport",
    "FormingDetails",
    "InMemoryRegistry",
    "InvalidTransitionError",
    "Phase",
    "ProfileRow",
    "ReasonCode",
    "Role",
    "Settings",
    "SubmissionPath",
    "SubmissionRequest",
    "Team",
    "UniqueViolation",
    "available_transitions",
    "can_submit_as_regional_representative",
    "can_submit_individual",
    "can_submit_team",
    "check_transition",
    "current_application_status",
    "evaluate_eligibility",
    "initial_status",
    "list_competition_applications",
    "parse_row",
    "phase",
    "settings",
    "submit_application",
    "transition_application",
    "validate_competition",
]
