"""
State machine for the steering controller.
States: SETUP, RUNNING, SETUP_FAILED.
SETUP_FAILED is terminal: fixing calibration needs a restart.
"""
from enum import Enum


class State(Enum):
    SETUP = "setup"
    RUNNING = "running"
    SETUP_FAILED = "setup_failed"


class Event(Enum):
    SETUP_SUCCEEDED = "setup_succeeded"
    SETUP_ERROR = "setup_error"


# Transition table: (state, event) -> new_state
_TRANSITIONS = {
    (State.SETUP, Event.SETUP_SUCCEEDED): State.RUNNING,
    (State.SETUP, Event.SETUP_ERROR): State.SETUP_FAILED,
}


class StateMachine:
    """Single source of truth for controller state."""

    def __init__(self):
        self._state = State.SETUP

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is State.RUNNING

    def dispatch(self, event: Event) -> State:
        """
        Process event and return the new state.
        Unknown (state, event) leaves state unchanged.
        """
        new_state = _TRANSITIONS.get((self._state, event))
        if new_state is not None:
            self._state = new_state
        return self._state
