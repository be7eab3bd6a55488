"""
Tests for the vehicle lifecycle and telemetry snapshots.
"""

import unittest

from fleetsim.geo import GeoPoint
from fleetsim.mission import generate_route
from fleetsim.vehicles import FlightMode, Telemetry, Vehicle, VehicleStatus

HUB = GeoPoint(18.5204, 73.8567)
CLINIC = GeoPoint(18.5304, 73.8767)


class TestVehicleLifecycle(unittest.TestCase):
    """Test the validated status lifecycle."""

    def setUp(self):
        self.vehicle = Vehicle("DRONE-1", HUB)
        self.route = generate_route(HUB, CLINIC)

    def test_new_vehicle(self):
        """Test a new vehicle is idle, landed and disarmed at home."""
        self.assertTrue(self.vehicle.is_idle)
        self.assertFalse(self.vehicle.is_active)
        self.assertIsNone(self.vehicle.assigned_route)
        self.assertEqual(self.vehicle.physics.position, HUB)
        self.assertIs(self.vehicle.physics.flight_mode, FlightMode.STABILIZE)

    def test_home_is_copied(self):
        """Test moving the vehicle leaves home alone."""
        self.vehicle.physics.position.move_to(0.0, 100.0)
        self.assertEqual(self.vehicle.home, HUB)

    def test_assign_mission(self):
        """Test assignment stores the mission and dispatches."""
        self.vehicle.assign_mission("T-1", self.route)
        self.assertIs(self.vehicle.status, VehicleStatus.DISPATCHED)
        self.assertEqual(self.vehicle.assigned_task_id, "T-1")
        self.assertEqual(self.vehicle.assigned_route, self.route)
        self.assertTrue(self.vehicle.is_active)
        self.assertFalse(self.vehicle.physics.armed)

    def test_assign_twice_raises(self):
        """Test a busy vehicle cannot be assigned again."""
        self.vehicle.assign_mission("T-1", self.route)
        with self.assertRaises(ValueError):
            self.vehicle.assign_mission("T-2", self.route)

    def test_full_cycle_releases_mission(self):
        """Test returning to idle clears route and task."""
        self.vehicle.assign_mission("T-1", self.route)
        for status in (
            VehicleStatus.RUNNING,
            VehicleStatus.COMPLETED,
            VehicleStatus.RETURNING,
            VehicleStatus.IDLE,
        ):
            self.vehicle.transition_to(status)
        self.assertIsNone(self.vehicle.assigned_task_id)
        self.assertIsNone(self.vehicle.assigned_route)

    def test_skipping_states_is_illegal(self):
        """Test the lifecycle cannot skip ahead."""
        self.vehicle.assign_mission("T-1", self.route)
        with self.assertRaises(ValueError):
            self.vehicle.transition_to(VehicleStatus.COMPLETED)
        self.assertFalse(self.vehicle.advance_status(VehicleStatus.IDLE))
        self.assertIs(self.vehicle.status, VehicleStatus.DISPATCHED)

    def test_reroute_idle_raises(self):
        """Test an idle vehicle has no route to replace."""
        with self.assertRaises(ValueError):
            self.vehicle.assigned_route = self.route

    def test_state_list(self):
        """Test every lifecycle status is listed."""
        self.assertEqual(set(self.vehicle.state_list()), set(VehicleStatus))


class TestTelemetry(unittest.TestCase):
    """Test telemetry snapshots."""

    def test_snapshot(self):
        """Test a snapshot copies the vehicle state."""
        vehicle = Vehicle("DRONE-1", HUB)
        vehicle.assign_mission("T-1", generate_route(HUB, CLINIC))
        vehicle.physics.altitude = 42.0
        vehicle.physics.ground_speed = 10.0

        telemetry = Telemetry.from_vehicle(vehicle, 12.5)
        self.assertEqual(telemetry.vehicle_id, "DRONE-1")
        self.assertEqual(telemetry.timestamp, 12.5)
        self.assertEqual(telemetry.position, HUB)
        self.assertEqual(telemetry.altitude, 42.0)
        self.assertAlmostEqual(telemetry.speed_kmh, 36.0)
        self.assertIs(telemetry.status, VehicleStatus.DISPATCHED)
        self.assertAlmostEqual(telemetry.battery_voltage, 25.2)
        self.assertAlmostEqual(telemetry.distance_remaining, HUB.distance_to(CLINIC), delta=1.0)

        vehicle.physics.altitude = 0.0
        self.assertEqual(telemetry.altitude, 42.0)

    def test_idle_vehicle_has_nothing_remaining(self):
        """Test an idle vehicle reports no remaining distance."""
        telemetry = Telemetry.from_vehicle(Vehicle("DRONE-1", HUB), 0.0)
        self.assertEqual(telemetry.distance_remaining, 0.0)


if __name__ == "__main__":
    unittest.main()
