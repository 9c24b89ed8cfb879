"""State machine for a batch translation."""

from enum import Enum

import structlog

from src.features.translation.constants import COMPONENT_TRANSLATION


logger = structlog.get_logger()


class BatchState(str, Enum):
    """State of a batch translation.

    - PENDING: Records and directives received
    - VALIDATED: Every directive has a target key
    - DISPATCHED: Work units handed to the worker pool
    - JOINED: Every dispatched unit has settled
    - APPLIED: Successful translations merged into records
    - FAILED: Validation failed or the batch aborted
    """

    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    DISPATCHED = "DISPATCHED"
    JOINED = "JOINED"
    APPLIED = "APPLIED"
    FAILED = "FAILED"


_VALID_TRANSITIONS: dict[BatchState, set[BatchState]] = {
    BatchState.PENDING: {BatchState.VALIDATED, BatchState.FAILED},
    BatchState.VALIDATED: {BatchState.DISPATCHED},
    BatchState.DISPATCHED: {BatchState.JOINED},
    BatchState.JOINED: {BatchState.APPLIED, BatchState.FAILED},
    BatchState.APPLIED: set(),
    BatchState.FAILED: set(),
}

_TERMINAL_STATES = {BatchState.APPLIED, BatchState.FAILED}


class BatchStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        batch_id: str,
        from_state: BatchState,
        to_state: BatchState,
    ) -> None:
        self.batch_id = batch_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal batch state transition for batch '{batch_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class BatchStateMachine:
    """Manages state transitions for one batch translation.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        batch_id: str,
        initial_state: BatchState = BatchState.PENDING,
    ) -> None:
        """Initialize the state machine.

        Args:
            batch_id: Identifier for the batch.
            initial_state: Starting state.
        """
        self._batch_id = batch_id
        self._state = initial_state
        self._log = logger.bind(
            component=COMPONENT_TRANSLATION,
            subcomponent="state_machine",
            batch_id=batch_id,
        )

    @property
    def batch_id(self) -> str:
        """Get the batch identifier."""
        return self._batch_id

    @property
    def state(self) -> BatchState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in _TERMINAL_STATES

    def can_transition_to(self, target: BatchState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: BatchState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            BatchStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_batch_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise BatchStateTransitionError(
                batch_id=self._batch_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "batch_state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )
