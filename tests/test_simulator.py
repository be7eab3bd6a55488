"""
Tests for the tick driver and post-run analysis.
"""

import unittest

import matplotlib

matplotlib.use("Agg")

from rich.panel import Panel  # noqa: E402

from fleetsim.config import DEFAULT_HOME  # noqa: E402
from fleetsim.flight import EventKind  # noqa: E402
from fleetsim.fleet import FleetCoordinator  # noqa: E402
from fleetsim.mission import DeliveryRequest  # noqa: E402
from fleetsim.simulator import (  # noqa: E402
    FleetSimulator,
    SteppedClock,
    analyze_battery_consumption,
    analyze_mission_times,
    missions_frame,
)
from fleetsim.vehicles import FlightMode, VehicleStatus  # noqa: E402

NEARBY = DEFAULT_HOME.forward(90.0, 200.0)


def launch(fleet, task_id):
    vehicle = fleet.dispatch(DeliveryRequest(task_id, NEARBY))
    fleet.arm(vehicle.id)
    fleet.set_mode(vehicle.id, FlightMode.AUTO)
    return vehicle


class TestSteppedClock(unittest.TestCase):
    """Test the deterministic clock."""

    def test_advance(self):
        """Test the clock moves only when advanced."""
        clock = SteppedClock(0.5, start=2.0)
        self.assertEqual(clock(), 2.0)
        self.assertEqual(clock.advance(), 2.5)
        self.assertEqual(clock(), 2.5)

    def test_invalid_step(self):
        """Test a non-positive step is rejected."""
        with self.assertRaises(ValueError):
            SteppedClock(0.0)


class TestFleetSimulator(unittest.TestCase):
    """Test the driver loop."""

    def test_max_ticks(self):
        """Test a bounded run executes exactly that many ticks."""
        sim = FleetSimulator(FleetCoordinator.create(count=2), clock=SteppedClock())
        self.assertEqual(sim.run(max_ticks=10), 10)
        self.assertAlmostEqual(sim.clock(), 1.0)

    def test_duration(self):
        """Test a run stops after the requested clock time."""
        sim = FleetSimulator(FleetCoordinator.create(count=1), clock=SteppedClock(0.5))
        self.assertEqual(sim.run(duration=5.0), 10)

    def test_until_mission_done(self):
        """Test running a delivery to completion."""
        fleet = FleetCoordinator.create(count=1)
        vehicle = launch(fleet, "T-1")
        sim = FleetSimulator(fleet, clock=SteppedClock())
        sim.run(until=lambda f: f.all_idle, max_ticks=20_000)
        self.assertTrue(vehicle.is_idle)
        self.assertFalse(vehicle.physics.armed)

    def test_stop_from_listener(self):
        """Test stop() ends the loop after the current tick."""
        fleet = FleetCoordinator.create(count=1)
        sim = FleetSimulator(fleet, clock=SteppedClock())

        def on_event(event):
            if event.kind is EventKind.DELIVERED:
                sim.stop()

        fleet.event_listener = on_event
        vehicle = launch(fleet, "T-1")
        sim.run(max_ticks=20_000)
        self.assertIs(vehicle.status, VehicleStatus.COMPLETED)

    def test_render(self):
        """Test the live view renders the fleet."""
        fleet = FleetCoordinator.create(count=3)
        launch(fleet, "T-1")
        sim = FleetSimulator(fleet, clock=SteppedClock())
        sim.run(max_ticks=3)
        self.assertIsInstance(sim.render(), Panel)


class TestAnalysis(unittest.TestCase):
    """Test post-run analysis."""

    @classmethod
    def setUpClass(cls):
        cls.telemetry = []
        cls.fleet = FleetCoordinator.create(count=2, telemetry_sink=cls.telemetry.append)
        launch(cls.fleet, "T-1")
        launch(cls.fleet, "T-2")
        FleetSimulator(cls.fleet, clock=SteppedClock()).run(until=lambda f: f.all_idle, max_ticks=20_000)

    def test_missions_frame(self):
        """Test one row per mission with derived times."""
        df = missions_frame(self.fleet.missions)
        self.assertEqual(list(df["task_id"]), ["T-1", "T-2"])
        self.assertTrue((df["total_time"] > df["delivery_time"]).all())

    def test_mission_times(self):
        """Test per-vehicle statistics."""
        stats = analyze_mission_times(self.fleet.missions)
        self.assertEqual(sorted(stats.index), ["DRONE-1", "DRONE-2"])
        self.assertTrue((stats["n"] == 1).all())
        self.assertTrue((stats["mu"] > 0).all())

    def test_mission_times_empty(self):
        """Test no completed missions yields None."""
        self.assertIsNone(analyze_mission_times([]))

    def test_battery_consumption(self):
        """Test battery used and distance per vehicle."""
        stats = analyze_battery_consumption(self.telemetry)
        self.assertEqual(len(stats), 2)
        self.assertTrue((stats["battery_used"] > 0).all())
        self.assertTrue((stats["distance"] > 300.0).all())

    def test_battery_consumption_empty(self):
        """Test no telemetry yields None."""
        self.assertIsNone(analyze_battery_consumption([]))


if __name__ == "__main__":
    unittest.main()
