"""Recognition engine lifecycle state machine.

uninitialized → initializing → {ready, failed}; ready ⇄ starting ⇄ listening → ready.
Any initialized state drops back to uninitialized on a permanent engine error.

Owned by SpeechController and mutated only on the event-loop thread, so there
is no lock. Observers are called synchronously in the thread that sets the state.
"""

import logging
from typing import Callable

from src.types import LifecycleState

logger = logging.getLogger(__name__)


class SpeechLifecycleState:
    """Lifecycle of the external recognition engine with observer notification.

    Replaces ad hoc ``initializing`` / ``starting`` guard flags: an overlapping
    initialize or start is an invalid transition and raises ValueError.
    """

    _VALID_TRANSITIONS: dict[LifecycleState, set[LifecycleState]] = {
        LifecycleState.UNINITIALIZED: {LifecycleState.INITIALIZING},
        LifecycleState.INITIALIZING: {LifecycleState.READY, LifecycleState.FAILED},
        LifecycleState.FAILED: {LifecycleState.INITIALIZING},
        LifecycleState.READY: {LifecycleState.STARTING, LifecycleState.UNINITIALIZED},
        LifecycleState.STARTING: {
            LifecycleState.LISTENING,
            LifecycleState.READY,
            LifecycleState.UNINITIALIZED,
        },
        LifecycleState.LISTENING: {
            LifecycleState.STARTING,
            LifecycleState.READY,
            LifecycleState.UNINITIALIZED,
        },
    }

    # States in which the engine has been initialized successfully
    _READY_STATES = frozenset({
        LifecycleState.READY,
        LifecycleState.STARTING,
        LifecycleState.LISTENING,
    })

    def __init__(self) -> None:
        self._state = LifecycleState.UNINITIALIZED
        self._observers: list[Callable[[LifecycleState, LifecycleState], None]] = []

    def get_state(self) -> LifecycleState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """True once the engine is initialized and no permanent error occurred."""
        return self._state in self._READY_STATES

    def is_busy(self) -> bool:
        """True while an initialize or start sequence is in flight."""
        return self._state in (LifecycleState.INITIALIZING, LifecycleState.STARTING)

    def set_state(self, new_state: LifecycleState) -> None:
        """Transition to new_state and notify all observers.

        Args:
            new_state: Target state.

        Raises:
            ValueError: If the transition is not permitted by the state machine.
        """
        old_state = self._state
        if new_state not in self._VALID_TRANSITIONS[old_state]:
            raise ValueError(f"Invalid state transition: {old_state.value} -> {new_state.value}")
        self._state = new_state
        logger.debug("Lifecycle: %s -> %s", old_state.value, new_state.value)

        for observer in list(self._observers):
            observer(old_state, new_state)

    def transition_if(self, expected: LifecycleState, new_state: LifecycleState) -> bool:
        """Transition only when currently in the expected state.

        Args:
            expected: Required current state.
            new_state: Target state.

        Returns:
            True if the transition happened.
        """
        if self._state is not expected:
            return False
        self.set_state(new_state)
        return True

    def register_observer(self, observer: Callable[[LifecycleState, LifecycleState], None]) -> None:
        """Register a callback to receive (old_state, new_state) on every transition.

        Args:
            observer: Callable that accepts two LifecycleState arguments.
        """
        self._observers.append(observer)
