"""Export execution state machine implementation."""

from enum import Enum, auto
from typing import ClassVar


class ExportState(Enum):
    """Export execution states.

    State transitions:
        PENDING -> VALIDATED: Cross-field checks passed
        VALIDATED -> URL_BUILT: Timestamp resolved and URL serialized
        URL_BUILT -> FETCHING: Request issued
        FETCHING -> COMPLETED: Artifact produced
        Any -> FAILED: Error occurred at any stage
    """

    PENDING = auto()
    VALIDATED = auto()
    URL_BUILT = auto()
    FETCHING = auto()
    COMPLETED = auto()
    FAILED = auto()


class ExportStateError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: ExportState, to_state: ExportState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


class ExportStateMachine:
    """State machine for a single export run."""

    VALID_TRANSITIONS: ClassVar[dict[ExportState, set[ExportState]]] = {
        ExportState.PENDING: {ExportState.VALIDATED, ExportState.FAILED},
        ExportState.VALIDATED: {ExportState.URL_BUILT, ExportState.FAILED},
        ExportState.URL_BUILT: {ExportState.FETCHING, ExportState.FAILED},
        ExportState.FETCHING: {ExportState.COMPLETED, ExportState.FAILED},
        ExportState.COMPLETED: set(),
        ExportState.FAILED: set(),
    }

    def __init__(self) -> None:
        """Initialize the state machine in PENDING state."""
        self._state = ExportState.PENDING

    @property
    def state(self) -> ExportState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: ExportState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: ExportState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            ExportStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            raise ExportStateError(self._state, to_state)
        self._state = to_state

    def fail(self) -> None:
        """Move to FAILED unless already in a terminal state."""
        if not self.is_terminal():
            self._state = ExportState.FAILED

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (ExportState.COMPLETED, ExportState.FAILED)
