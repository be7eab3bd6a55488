"""
Tests for the physics integrator and manual control.
"""

import unittest

from fleetsim.config import SimConfig
from fleetsim.flight import EventKind, Guidance, apply_manual_control, integrate
from fleetsim.geo import GeoPoint
from fleetsim.mission import generate_route
from fleetsim.vehicles import ControlInput, FlightMode, PhysicsState, Vehicle

HUB = GeoPoint(18.5204, 73.8567)
CONFIG = SimConfig()
DT = 0.4  # one clamped 0.1 s tick at 4x


def armed_state(mode=FlightMode.AUTO, altitude=100.0):
    return PhysicsState(position=HUB.copy(), altitude=altitude, armed=True, flight_mode=mode)


class TestVertical(unittest.TestCase):
    """Test the vertical channel."""

    def test_climb_rate_bounded(self):
        """Test the climb never exceeds the maximum rate."""
        p = armed_state(altitude=0.0)
        for _ in range(50):
            integrate(p, Guidance(HUB.copy(), 100.0), DT, CONFIG)
            self.assertLessEqual(p.vertical_speed, CONFIG.climb_rate_max + 1e-9)
        self.assertGreater(p.altitude, 50.0)

    def test_first_order_lag(self):
        """Test vertical speed follows the command through a lag."""
        p = armed_state(altitude=0.0)
        integrate(p, Guidance(HUB.copy(), 100.0), DT, CONFIG)
        self.assertAlmostEqual(p.vertical_speed, 5.0 * 0.8)
        self.assertAlmostEqual(p.altitude, 4.0 * DT)

    def test_descent_never_below_ground(self):
        """Test altitude is clamped at zero."""
        p = armed_state(altitude=1.0)
        p.vertical_speed = -10.0
        integrate(p, Guidance(HUB.copy(), 0.0), DT, CONFIG)
        self.assertEqual(p.altitude, 0.0)
        self.assertGreaterEqual(p.vertical_speed, 0.0)

    def test_converges_on_target(self):
        """Test the altitude settles on the target."""
        p = armed_state(altitude=0.0, mode=FlightMode.LOITER)
        for _ in range(300):
            integrate(p, Guidance(HUB.copy(), 40.0), DT, CONFIG)
        self.assertAlmostEqual(p.altitude, 40.0, delta=0.1)


class TestHorizontal(unittest.TestCase):
    """Test turning, speed and position updates."""

    def test_turn_rate_bounded(self):
        """Test heading changes at most turn_rate * dt per step."""
        p = armed_state()
        target = HUB.forward(90.0, 5000.0)
        integrate(p, Guidance(target, 100.0), DT, CONFIG)
        self.assertAlmostEqual(p.heading, CONFIG.turn_rate_dps * DT, places=6)
        self.assertGreater(p.roll, 0.0)

    def test_turn_left_wraps(self):
        """Test the shorter turn direction across north."""
        p = armed_state()
        target = HUB.forward(270.0, 5000.0)
        integrate(p, Guidance(target, 100.0), DT, CONFIG)
        self.assertAlmostEqual(p.heading, 360.0 - CONFIG.turn_rate_dps * DT, places=6)
        self.assertLess(p.roll, 0.0)

    def test_cruise_step(self):
        """Test a step at cruise speed along the heading."""
        p = armed_state()
        integrate(p, Guidance(HUB.forward(0.0, 5000.0), 100.0), DT, CONFIG)
        self.assertAlmostEqual(p.ground_speed, CONFIG.cruise_speed)
        self.assertAlmostEqual(HUB.distance_to(p.position), CONFIG.cruise_speed * DT, delta=1e-3)
        self.assertAlmostEqual(p.distance_traveled, CONFIG.cruise_speed * DT)

    def test_captures_target_instead_of_orbiting(self):
        """Test a point abeam inside the turn circle is still captured."""
        p = armed_state()
        target = HUB.forward(90.0, 20.0)
        for _ in range(500):
            integrate(p, Guidance(target, 100.0), DT, CONFIG)
        self.assertLess(p.position.distance_to(target), 1.0)

    def test_no_steering_on_top_of_target(self):
        """Test the heading is kept when the target is underneath."""
        p = armed_state()
        p.heading = 123.0
        integrate(p, Guidance(HUB.copy(), 100.0), DT, CONFIG)
        self.assertEqual(p.heading, 123.0)
        self.assertEqual(p.position, HUB)

    def test_loiter_does_not_move(self):
        """Test LOITER holds position even with a distant target."""
        p = armed_state(mode=FlightMode.LOITER)
        integrate(p, Guidance(HUB.forward(0.0, 1000.0), 100.0), DT, CONFIG)
        self.assertEqual(p.position, HUB)


class TestBatteryAndDisarm(unittest.TestCase):
    """Test battery drain and the disarmed state."""

    def test_passive_drain(self):
        """Test STABILIZE drains 0.01 %/s."""
        p = armed_state(mode=FlightMode.STABILIZE, altitude=0.0)
        integrate(p, Guidance(HUB.copy(), 0.0), 10.0, CONFIG)
        self.assertAlmostEqual(p.battery.percentage, 99.9)

    def test_active_drain(self):
        """Test any other mode drains 0.05 %/s."""
        p = armed_state(mode=FlightMode.LOITER)
        integrate(p, Guidance(HUB.copy(), 100.0), 10.0, CONFIG)
        self.assertAlmostEqual(p.battery.percentage, 99.5)
        self.assertAlmostEqual(p.flight_time, 10.0)

    def test_disarmed_is_frozen(self):
        """Test a disarmed vehicle decays speeds but never moves or drains."""
        p = PhysicsState(position=HUB.copy(), altitude=0.0)
        p.ground_speed = 10.0
        p.vertical_speed = -2.0
        integrate(p, Guidance(HUB.forward(0.0, 1000.0), 100.0), DT, CONFIG)
        self.assertEqual(p.position, HUB)
        self.assertEqual(p.altitude, 0.0)
        self.assertLess(p.ground_speed, 10.0)
        self.assertGreater(p.vertical_speed, -2.0)
        self.assertEqual(p.battery.percentage, 100.0)

    def test_zero_step_is_noop(self):
        """Test a zero step changes nothing."""
        p = armed_state()
        integrate(p, Guidance(HUB.forward(0.0, 1000.0), 0.0), 0.0, CONFIG)
        self.assertEqual(p.altitude, 100.0)
        self.assertEqual(p.battery.percentage, 100.0)


class TestManualControl(unittest.TestCase):
    """Test manual input consumption."""

    def setUp(self):
        self.vehicle = Vehicle("DRONE-1", HUB)
        self.vehicle.assign_mission("T-1", generate_route(HUB, HUB.forward(45.0, 2000.0)))
        self.p = self.vehicle.physics
        self.p.armed = True
        self.p.altitude = 60.0

    def test_preempts_auto(self):
        """Test any input takes AUTO over into GUIDED."""
        self.p.flight_mode = FlightMode.AUTO
        events = apply_manual_control(self.vehicle, ControlInput(turn_left=True), DT, CONFIG)
        self.assertIs(self.p.flight_mode, FlightMode.GUIDED)
        self.assertEqual(self.p.guided_altitude, 60.0)
        self.assertEqual([e.kind for e in events], [EventKind.MANUAL_OVERRIDE])

    def test_cancels_return(self):
        """Test input during the return clears the returning flag."""
        self.p.flight_mode = FlightMode.RTL
        self.p.is_returning_home = True
        apply_manual_control(self.vehicle, ControlInput(up=True), DT, CONFIG)
        self.assertFalse(self.p.is_returning_home)
        self.assertIs(self.p.flight_mode, FlightMode.GUIDED)

    def test_no_input_keeps_mode(self):
        """Test released controls never change the mode."""
        self.p.flight_mode = FlightMode.AUTO
        events = apply_manual_control(self.vehicle, ControlInput(), DT, CONFIG)
        self.assertIs(self.p.flight_mode, FlightMode.AUTO)
        self.assertEqual(events, [])

    def test_land_is_not_preempted(self):
        """Test an ongoing landing ignores input."""
        self.p.flight_mode = FlightMode.LAND
        apply_manual_control(self.vehicle, ControlInput(forward=True), DT, CONFIG)
        self.assertIs(self.p.flight_mode, FlightMode.LAND)
        self.assertEqual(self.p.position, HUB)

    def test_disarmed_ignores_input(self):
        """Test input never moves a disarmed vehicle."""
        self.p.armed = False
        self.p.flight_mode = FlightMode.AUTO
        apply_manual_control(self.vehicle, ControlInput(forward=True, up=True), DT, CONFIG)
        self.assertIs(self.p.flight_mode, FlightMode.AUTO)
        self.assertEqual(self.p.position, HUB)

    def test_guided_axes(self):
        """Test each axis in GUIDED."""
        self.p.flight_mode = FlightMode.GUIDED
        self.p.guided_altitude = 60.0

        apply_manual_control(self.vehicle, ControlInput(up=True), DT, CONFIG)
        self.assertAlmostEqual(self.p.guided_altitude, 60.0 + CONFIG.manual_climb_rate * DT)

        apply_manual_control(self.vehicle, ControlInput(turn_right=True), DT, CONFIG)
        self.assertAlmostEqual(self.p.heading, CONFIG.manual_yaw_rate * DT)

        start = self.p.position.copy()
        apply_manual_control(self.vehicle, ControlInput(forward=True), DT, CONFIG)
        self.assertAlmostEqual(start.distance_to(self.p.position), CONFIG.manual_speed * DT, delta=1e-3)
        self.assertAlmostEqual(start.heading_to(self.p.position), self.p.heading, delta=0.01)

    def test_strafe_right(self):
        """Test sideways input moves across the heading."""
        self.p.flight_mode = FlightMode.GUIDED
        apply_manual_control(self.vehicle, ControlInput(right=True), DT, CONFIG)
        self.assertAlmostEqual(HUB.heading_to(self.p.position), 90.0, delta=0.01)

    def test_guided_altitude_floor(self):
        """Test down input never commands below ground."""
        self.p.flight_mode = FlightMode.GUIDED
        self.p.guided_altitude = 0.5
        apply_manual_control(self.vehicle, ControlInput(down=True), 10.0, CONFIG)
        self.assertEqual(self.p.guided_altitude, 0.0)


if __name__ == "__main__":
    unittest.main()
