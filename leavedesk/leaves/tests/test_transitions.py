import pytest

from leaves.exceptions import ConflictError
from leaves.models import LeaveApplication
from leaves.services.transitions import Action, TRANSITIONS, allowed_actions, next_state

S = LeaveApplication.Status


@pytest.mark.parametrize("current, action, expected", [
    (S.PENDING, Action.REVIEW, S.REVIEWED),
    (S.PENDING, Action.REJECT, S.REJECTED),
    (S.REVIEWED, Action.APPROVE, S.APPROVED),
    (S.REVIEWED, Action.DECLINE, S.REJECTED),
])
def test_allowed_edges(current, action, expected):
    assert next_state(current, action) == expected


def test_approved_is_unreachable_from_pending():
    with pytest.raises(ConflictError):
        next_state(S.PENDING, Action.APPROVE)
    assert all(target != S.APPROVED for (src, _), target in TRANSITIONS.items() if src == S.PENDING)


@pytest.mark.parametrize("terminal", [S.APPROVED, S.REJECTED])
@pytest.mark.parametrize("action", list(Action))
def test_terminal_states_have_no_exit(terminal, action):
    with pytest.raises(ConflictError, match=f"Cannot {action.value}"):
        next_state(terminal, action)
    assert allowed_actions(terminal) == []


def test_unknown_state_is_a_conflict():
    with pytest.raises(ConflictError):
        next_state("cancelled", Action.REVIEW)
