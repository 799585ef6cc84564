import pytest

from fsp_core import (
    ApplicationStatus,
    InvalidTransitionError,
    available_transitions,
    check_transition,
    initial_status,
)

S = ApplicationStatus

_EDGES = {
    (S.PENDING_REVIEW, S.APPROVED),
    (S.PENDING_REVIEW, S.REJECTED),
    (S.APPROVED, S.REJECTED),
    (S.REJECTED, S.APPROVED),
}


def test_initial_status_depends_on_completeness():
    assert initial_status(True) == S.FORMING
    assert initial_status(False) == S.PENDING_REVIEW


def test_available_transitions_match_review_buttons():
    assert available_transitions(S.PENDING_REVIEW) == (S.APPROVED, S.REJECTED)
    assert available_transitions(S.APPROVED) == (S.REJECTED,)
    assert available_transitions(S.REJECTED) == (S.APPROVED,)
    assert available_transitions(S.FORMING) == ()


def test_approved_can_only_move_to_rejected():
    assert check_transition(S.APPROVED, S.REJECTED) is None
    for target in (S.FORMING, S.PENDING_REVIEW):
        err = check_transition(S.APPROVED, target)
        assert isinstance(err, InvalidTransitionError)
        assert err.current == S.APPROVED
        assert err.target == target


def test_forming_cannot_be_decided_directly():
    err = check_transition(S.FORMING, S.APPROVED)
    assert isinstance(err, InvalidTransitionError)
    assert err.kind == "invalid_transition"
    assert err.message == "cannot move application from forming to approved"


def test_reapplying_decided_status_is_accepted():
    assert check_transition(S.APPROVED, S.APPROVED) is None
    assert check_transition(S.REJECTED, S.REJECTED) is None


@pytest.mark.parametrize("current", list(S))
@pytest.mark.parametrize("target", list(S))
def test_transition_table_is_closed(current, target):
    noop = current == target and current in (S.APPROVED, S.REJECTED)
    legal = (current, target) in _EDGES or noop
    result = check_transition(current, target)
    if legal:
        assert result is None
    else:
        assert isinstance(result, InvalidTransitionError)
