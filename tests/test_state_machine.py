"""
Tests for the validated state machine.
"""

import unittest
from enum import Enum

from fleetsim.state import Action, StateMachine


class Light(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"


class TestStateMachine(unittest.TestCase):
    """Test transitions, effects and validation."""

    def setUp(self):
        self.calls = []
        self.machine = StateMachine(
            Light.RED,
            {
                Light.RED: [Action(Light.GREEN, self.calls.append)],
                Light.GREEN: [Action(Light.YELLOW)],
                Light.YELLOW: [Action(Light.RED)],
            },
        )

    def test_initial_state(self):
        """Test the machine starts in its initial state."""
        self.assertEqual(self.machine.current, Light.RED)

    def test_allowed_transition_runs_effect(self):
        """Test an allowed transition changes state and runs the effect."""
        self.machine.request_transition(Light.GREEN, "go")
        self.assertEqual(self.machine.current, Light.GREEN)
        self.assertEqual(self.calls, ["go"])

    def test_illegal_transition_raises(self):
        """Test an illegal transition raises and keeps the state."""
        with self.assertRaises(ValueError):
            self.machine.request_transition(Light.YELLOW)
        self.assertEqual(self.machine.current, Light.RED)

    def test_can_transition(self):
        """Test reachability checks."""
        self.assertTrue(self.machine.can_transition(Light.GREEN))
        self.assertFalse(self.machine.can_transition(Light.YELLOW))

    def test_effect_sees_new_state(self):
        """Test the effect runs after the state update."""
        seen = []
        machine = StateMachine(Light.RED, {Light.RED: [Action(Light.GREEN, lambda: seen.append(machine.current))]})
        machine.request_transition(Light.GREEN)
        self.assertEqual(seen, [Light.GREEN])

    def test_state_list(self):
        """Test every state of the graph is listed once."""
        self.assertEqual(sorted(s.value for s in self.machine.get_state_list()), ["green", "red", "yellow"])


if __name__ == "__main__":
    unittest.main()
