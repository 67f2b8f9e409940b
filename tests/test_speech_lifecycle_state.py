"""
Tests for SpeechLifecycleState - engine lifecycle state machine with observers.
"""
import unittest
from unittest.mock import Mock

from src.SpeechLifecycleState import SpeechLifecycleState
from src.types import LifecycleState


class TestSpeechLifecycleState(unittest.TestCase):
    """Test lifecycle transitions, guards and observer notification."""

    def setUp(self):
        self.state = SpeechLifecycleState()

    def _advance_to(self, *states):
        for state in states:
            self.state.set_state(state)

    def test_initial_state_is_uninitialized(self):
        self.assertEqual(self.state.get_state(), LifecycleState.UNINITIALIZED)
        self.assertFalse(self.state.is_ready)
        self.assertFalse(self.state.is_busy())

    def test_full_session_cycle(self):
        self._advance_to(
            LifecycleState.INITIALIZING,
            LifecycleState.READY,
            LifecycleState.STARTING,
            LifecycleState.LISTENING,
            LifecycleState.READY,
        )
        self.assertEqual(self.state.get_state(), LifecycleState.READY)

    def test_ready_states(self):
        self._advance_to(LifecycleState.INITIALIZING)
        self.assertFalse(self.state.is_ready)
        self.assertTrue(self.state.is_busy())

        self._advance_to(LifecycleState.READY)
        self.assertTrue(self.state.is_ready)

        self._advance_to(LifecycleState.STARTING)
        self.assertTrue(self.state.is_ready)
        self.assertTrue(self.state.is_busy())

        self._advance_to(LifecycleState.LISTENING)
        self.assertTrue(self.state.is_ready)
        self.assertFalse(self.state.is_busy())

    def test_failed_initialization_can_be_retried(self):
        self._advance_to(LifecycleState.INITIALIZING, LifecycleState.FAILED, LifecycleState.INITIALIZING)
        self.assertEqual(self.state.get_state(), LifecycleState.INITIALIZING)

    def test_overlapping_initialize_is_invalid(self):
        self._advance_to(LifecycleState.INITIALIZING)
        with self.assertRaises(ValueError):
            self.state.set_state(LifecycleState.INITIALIZING)

    def test_overlapping_start_is_invalid(self):
        self._advance_to(LifecycleState.INITIALIZING, LifecycleState.READY, LifecycleState.STARTING)
        with self.assertRaises(ValueError):
            self.state.set_state(LifecycleState.STARTING)

    def test_cannot_listen_before_initialized(self):
        with self.assertRaises(ValueError):
            self.state.set_state(LifecycleState.LISTENING)

    def test_permanent_error_drops_to_uninitialized(self):
        self._advance_to(LifecycleState.INITIALIZING, LifecycleState.READY,
                         LifecycleState.STARTING, LifecycleState.LISTENING)
        self.state.set_state(LifecycleState.UNINITIALIZED)
        self.assertFalse(self.state.is_ready)

    def test_transition_if_only_applies_from_expected_state(self):
        self._advance_to(LifecycleState.INITIALIZING, LifecycleState.READY)

        self.assertFalse(self.state.transition_if(LifecycleState.LISTENING, LifecycleState.READY))
        self.assertEqual(self.state.get_state(), LifecycleState.READY)

        self.assertTrue(self.state.transition_if(LifecycleState.READY, LifecycleState.STARTING))
        self.assertEqual(self.state.get_state(), LifecycleState.STARTING)

    def test_observers_receive_old_and_new_state(self):
        observer = Mock()
        self.state.register_observer(observer)

        self.state.set_state(LifecycleState.INITIALIZING)

        observer.assert_called_once_with(LifecycleState.UNINITIALIZED, LifecycleState.INITIALIZING)

    def test_invalid_transition_does_not_notify(self):
        observer = Mock()
        self.state.register_observer(observer)

        with self.assertRaises(ValueError):
            self.state.set_state(LifecycleState.READY)

        observer.assert_not_called()
        self.assertEqual(self.state.get_state(), LifecycleState.UNINITIALIZED)


if __name__ == '__main__':
    unittest.main()
