"""Simulation tunables and fleet defaults.

Every constant the flight core depends on lives in :class:`SimConfig` so that
callers can tune a run without touching the integrator or the state machine.
The module-level ``DEFAULT_*`` names mirror the values a fresh ``SimConfig()``
carries and are what the route generator and fleet factory fall back to.

Example:
    >>> from fleetsim.config import SimConfig
    >>> fast = SimConfig(sim_speed_multiplier=8.0)
    >>> slow_turns = fast.replace(turn_rate_dps=15.0)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from fleetsim.geo import GeoPoint

# Central dispatch hub (Pune).
DEFAULT_HOME = GeoPoint(18.5204, 73.8567)

# Named remote clinics, handy for demos and scenario tests.
REMOTE_LOCATIONS: dict[str, GeoPoint] = {
    "PHC-Village-A": GeoPoint(18.5304, 73.8767),
    "PHC-Village-B": GeoPoint(18.5100, 73.8300),
    "PHC-Village-C": GeoPoint(18.5500, 73.8900),
}

DEFAULT_FLEET_SIZE = 5
DEFAULT_ALTITUDE = 100.0  # m, cruise altitude of generated routes
DEFAULT_LOITER_SECONDS = 5.0

VEHICLE_COLORS = (
    "#10b981",  # emerald
    "#3b82f6",  # blue
    "#f59e0b",  # amber
    "#ec4899",  # pink
    "#8b5cf6",  # violet
    "#06b6d4",  # cyan
)


@dataclass(frozen=True)
class SimConfig:
    """Tunables shared by the state machine, the integrator and the coordinator.

    Distances are meters, speeds meters per second, rates per second and
    durations seconds of *simulated* time.

    Attributes:
        cruise_speed: Ground speed while navigating.
        approach_gain: Ground speed per meter of remaining distance on final
            approach; the commanded speed is ``min(cruise, gain * distance)``.
            Must stay below the turn rate in rad/s for a guaranteed capture.
        waypoint_radius: Horizontal arrival radius for route waypoints.
        waypoint_alt_tolerance: Vertical arrival tolerance for route waypoints.
        home_radius: Horizontal distance to home that ends RTL.
        landed_altitude: Altitude under which a landing counts as touchdown.
        disarm_max_altitude: Highest altitude at which a disarm is accepted.
        rtl_altitude: Minimum altitude flown on return to launch.
        climb_rate_max: Upper bound on commanded vertical speed.
        descent_rate_max: Upper bound on commanded descent speed (positive).
        vertical_lag_gain: First-order gain of the vertical speed response.
        turn_rate_dps: Heading change bound in degrees per second.
        max_roll_deg: Cosmetic bank shown while turning.
        attitude_ease: Ease rate of the cosmetic roll/pitch.
        delivery_wait: Time spent on the ground after a delivery landing.
        sim_speed_multiplier: Uniform scale applied to every elapsed-time step.
        max_tick_seconds: Clamp on wall-clock dt before scaling.
        drain_passive: Battery percent per second in STABILIZE.
        drain_active: Battery percent per second in any other mode.
        low_battery_percent: Threshold for the one-shot low battery warning.
        manual_speed: Horizontal speed produced by manual pitch/roll input.
        manual_climb_rate: Target altitude change per second for manual up/down.
        manual_yaw_rate: Heading change per second for manual yaw.
        manual_tilt_deg: Cosmetic pitch/roll shown under manual input.
        event_log_size: Number of flight events retained by the coordinator.
    """

    cruise_speed: float = 15.0
    approach_gain: float = 0.4
    waypoint_radius: float = 15.0
    waypoint_alt_tolerance: float = 2.0
    home_radius: float = 5.0
    landed_altitude: float = 0.5
    disarm_max_altitude: float = 2.0
    rtl_altitude: float = 50.0
    climb_rate_max: float = 5.0
    descent_rate_max: float = 3.0
    vertical_lag_gain: float = 2.0
    turn_rate_dps: float = 30.0
    max_roll_deg: float = 15.0
    attitude_ease: float = 4.0
    delivery_wait: float = 3.0
    sim_speed_multiplier: float = 4.0
    max_tick_seconds: float = 0.1
    drain_passive: float = 0.01
    drain_active: float = 0.05
    low_battery_percent: float = 20.0
    manual_speed: float = 10.0
    manual_climb_rate: float = 5.0
    manual_yaw_rate: float = 45.0
    manual_tilt_deg: float = 10.0
    event_log_size: int = 50

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                msg = f"Invalid {f.name}: {value} (must be non-negative)"
                raise ValueError(msg)
        for name in ("cruise_speed", "sim_speed_multiplier", "max_tick_seconds", "turn_rate_dps"):
            if getattr(self, name) <= 0:
                msg = f"Invalid {name}: {getattr(self, name)} (must be positive)"
                raise ValueError(msg)

    def replace(self, **overrides) -> SimConfig:
        """Return a copy of this config with ``overrides`` applied."""
        return replace(self, **overrides)
