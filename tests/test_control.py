"""
Tests for manual control input and configuration.
"""

import unittest

from fleetsim.config import SimConfig
from fleetsim.vehicles import NO_INPUT, ControlInput


class TestControlInput(unittest.TestCase):
    """Test ControlInput construction and axes."""

    def test_from_mapping_with_aliases(self):
        """Test input-source spellings map onto fields."""
        control = ControlInput.from_actions({"turnLeft": True, "forward": True, "up": False})
        self.assertTrue(control.turn_left)
        self.assertTrue(control.forward)
        self.assertFalse(control.up)

    def test_from_iterable(self):
        """Test an iterable of active names, snake_case accepted."""
        control = ControlInput.from_actions(["turn_right", "down"])
        self.assertEqual(control.yaw, 1)
        self.assertEqual(control.climb, -1)

    def test_unknown_action(self):
        """Test unknown names are rejected."""
        with self.assertRaises(ValueError):
            ControlInput.from_actions(["barrelRoll"])

    def test_opposing_axes_cancel(self):
        """Test opposite inputs on one axis cancel out."""
        control = ControlInput(forward=True, backward=True, left=True)
        self.assertEqual(control.surge, 0)
        self.assertEqual(control.sway, -1)
        self.assertTrue(control.any_active)

    def test_no_input(self):
        """Test the neutral input."""
        self.assertFalse(NO_INPUT.any_active)
        self.assertEqual((NO_INPUT.climb, NO_INPUT.yaw, NO_INPUT.surge, NO_INPUT.sway), (0, 0, 0, 0))


class TestSimConfig(unittest.TestCase):
    """Test SimConfig validation."""

    def test_defaults(self):
        """Test the documented defaults."""
        config = SimConfig()
        self.assertEqual(config.cruise_speed, 15.0)
        self.assertEqual(config.waypoint_radius, 15.0)
        self.assertEqual(config.rtl_altitude, 50.0)
        self.assertEqual(config.sim_speed_multiplier, 4.0)
        self.assertEqual(config.delivery_wait, 3.0)

    def test_non_positive_cruise_speed(self):
        """Test a zero cruise speed is rejected."""
        with self.assertRaises(ValueError):
            SimConfig(cruise_speed=0.0)

    def test_negative_value(self):
        """Test negative tunables are rejected."""
        with self.assertRaises(ValueError):
            SimConfig(waypoint_radius=-1.0)

    def test_replace(self):
        """Test replace returns a modified copy."""
        config = SimConfig()
        fast = config.replace(sim_speed_multiplier=8.0)
        self.assertEqual(fast.sim_speed_multiplier, 8.0)
        self.assertEqual(config.sim_speed_multiplier, 4.0)


if __name__ == "__main__":
    unittest.main()
