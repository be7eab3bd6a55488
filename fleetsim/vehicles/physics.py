"""Per-vehicle physics record and flight modes.

A :class:`PhysicsState` is owned by exactly one vehicle and is only ever
written by that vehicle's tick. Roll and pitch are cosmetic: they are kept
here because their ease/decay depends on the previous value, but nothing in
the flight logic reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fleetsim.energy import BatteryStatus
from fleetsim.geo import GeoPoint


class FlightMode(Enum):
    """Autopilot flight modes.

    STABILIZE: Disarmed/idle ground state.
    LOITER: Hold position and altitude.
    AUTO: Follow the assigned route.
    GUIDED: Manually steered, overrides automation.
    RTL: Fly back to home.
    LAND: Controlled descent at the current position.
    """

    STABILIZE = "STABILIZE"
    LOITER = "LOITER"
    AUTO = "AUTO"
    GUIDED = "GUIDED"
    RTL = "RTL"
    LAND = "LAND"


# Modes in which the integrator flies towards the commanded target.
NAVIGATING_MODES = frozenset({FlightMode.AUTO, FlightMode.RTL, FlightMode.LAND})

# Modes a manual input takes over immediately.
PREEMPTIBLE_MODES = frozenset({FlightMode.AUTO, FlightMode.RTL, FlightMode.LOITER})


@dataclass
class PhysicsState:
    """Kinematic and autopilot state of one vehicle.

    Attributes:
        position (GeoPoint): Current latitude/longitude.
        altitude (float): Meters above the ground at home.
        heading (float): Degrees, wrapped to [0, 360).
        roll (float): Cosmetic bank angle in degrees.
        pitch (float): Cosmetic pitch angle in degrees.
        ground_speed (float): Horizontal speed in m/s.
        vertical_speed (float): Climb rate in m/s, negative when descending.
        battery (BatteryStatus): Remaining charge, non-increasing while armed.
        armed (bool): Motors enabled; gates all motion.
        flight_mode (FlightMode): Current autopilot mode.
        active_waypoint_index (int): -1 before a mission starts, else an
            index into the vehicle's route.
        delivery_wait_elapsed (float): Seconds spent on the ground after a
            delivery landing.
        is_returning_home (bool): True only during the post-delivery return,
            distinguishing the outbound LAND from the return LAND.
        delivery_confirmed (bool): Delivery already reported for the current
            mission.
        guided_altitude (float): Target altitude while in GUIDED.
        last_tick_timestamp (float | None): Wall-clock seconds of the last
            integration step, None before the first tick.
        distance_traveled (float): Horizontal meters flown.
        flight_time (float): Simulated seconds spent armed.
        low_battery_warned (bool): Low battery warning already emitted.
    """

    position: GeoPoint
    altitude: float = 0.0
    heading: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    ground_speed: float = 0.0
    vertical_speed: float = 0.0
    battery: BatteryStatus = field(default_factory=BatteryStatus)
    armed: bool = False
    flight_mode: FlightMode = FlightMode.STABILIZE
    active_waypoint_index: int = -1
    delivery_wait_elapsed: float = 0.0
    is_returning_home: bool = False
    delivery_confirmed: bool = False
    guided_altitude: float = 0.0
    last_tick_timestamp: float | None = None
    distance_traveled: float = 0.0
    flight_time: float = 0.0
    low_battery_warned: bool = False

    def disarm(self) -> None:
        """Cut the motors on the ground.

        Speeds drop to zero at once; roll and pitch keep decaying through the
        integrator.
        """
        self.armed = False
        self.flight_mode = FlightMode.STABILIZE
        self.ground_speed = 0.0
        self.vertical_speed = 0.0

    def reset_mission_progress(self) -> None:
        """Forget everything tied to the mission that just closed."""
        self.active_waypoint_index = -1
        self.delivery_wait_elapsed = 0.0
        self.is_returning_home = False
        self.delivery_confirmed = False
