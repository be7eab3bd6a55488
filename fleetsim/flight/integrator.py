"""Kinematic integrator.

Advances one vehicle's physics by a scaled simulation step towards the target
chosen by the flight-mode state machine:

    • Vertical: commanded climb rate bounded to [-descent, +climb] and
      followed through a first-order lag
    • Horizontal (AUTO, RTL, LAND): bounded-rate turn towards the target,
      then a great-circle step along the new heading
    • Battery: fixed drain per simulated second, depending on the mode
    • Disarmed: speeds and attitude decay, position is frozen

GUIDED horizontal motion is produced by ``fleetsim.flight.manual``; LOITER and
STABILIZE only hold altitude.
"""

from __future__ import annotations

import math

from fleetsim.config import SimConfig
from fleetsim.vehicles import NAVIGATING_MODES, FlightMode, PhysicsState

from .modes import Guidance

# Below this horizontal distance the bearing to the target is meaningless.
BEARING_GUARD_M = 0.5

# Heading errors smaller than this do not bank the vehicle.
ROLL_DEADBAND_DEG = 1.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def wrap_180(angle: float) -> float:
    """Wrap an angle in degrees to [-180, 180)."""
    return (angle + 180.0) % 360.0 - 180.0


def ease(current: float, target: float, rate: float, dt: float) -> float:
    """Move ``current`` a fraction ``rate * dt`` (at most all the way) towards ``target``."""
    return current + (target - current) * min(1.0, rate * dt)


def integrate(physics: PhysicsState, guidance: Guidance, sim_dt: float, config: SimConfig) -> None:
    """Advance ``physics`` by ``sim_dt`` simulated seconds.

    Args:
        physics: State to mutate in place.
        guidance: Target produced by the state machine for this tick.
        sim_dt: Scaled step, already clamped and multiplied by the caller.
        config: Simulation tunables.
    """
    if sim_dt <= 0:
        return

    if not physics.armed:
        _settle(physics, sim_dt, config)
        return

    physics.flight_time += sim_dt
    rate = config.drain_passive if physics.flight_mode is FlightMode.STABILIZE else config.drain_active
    physics.battery.drain(rate, sim_dt)

    _integrate_vertical(physics, guidance.target_altitude, sim_dt, config)

    if physics.flight_mode in NAVIGATING_MODES:
        _integrate_horizontal(physics, guidance, sim_dt, config)
    elif physics.flight_mode is not FlightMode.GUIDED:
        physics.ground_speed = ease(physics.ground_speed, 0.0, config.vertical_lag_gain, sim_dt)
        physics.roll = ease(physics.roll, 0.0, config.attitude_ease, sim_dt)
        physics.pitch = ease(physics.pitch, 0.0, config.attitude_ease, sim_dt)


def _settle(physics: PhysicsState, sim_dt: float, config: SimConfig) -> None:
    physics.ground_speed = ease(physics.ground_speed, 0.0, config.vertical_lag_gain, sim_dt)
    physics.vertical_speed = ease(physics.vertical_speed, 0.0, config.vertical_lag_gain, sim_dt)
    physics.roll = ease(physics.roll, 0.0, config.attitude_ease, sim_dt)
    physics.pitch = ease(physics.pitch, 0.0, config.attitude_ease, sim_dt)


def _integrate_vertical(physics: PhysicsState, target_altitude: float, sim_dt: float, config: SimConfig) -> None:
    desired = clamp(target_altitude - physics.altitude, -config.descent_rate_max, config.climb_rate_max)
    physics.vertical_speed = ease(physics.vertical_speed, desired, config.vertical_lag_gain, sim_dt)
    physics.altitude += physics.vertical_speed * sim_dt

    if physics.altitude < 0.0:
        physics.altitude = 0.0
        physics.vertical_speed = max(physics.vertical_speed, 0.0)


def _integrate_horizontal(physics: PhysicsState, guidance: Guidance, sim_dt: float, config: SimConfig) -> None:
    remaining = physics.position.distance_to(guidance.target)
    speed = min(config.cruise_speed, config.approach_gain * remaining)

    roll_target = 0.0
    if remaining > BEARING_GUARD_M:
        error = wrap_180(physics.position.heading_to(guidance.target) - physics.heading)
        max_turn = config.turn_rate_dps * sim_dt
        physics.heading = (physics.heading + clamp(error, -max_turn, max_turn)) % 360.0
        if abs(error) > ROLL_DEADBAND_DEG:
            roll_target = math.copysign(config.max_roll_deg, error)

    physics.roll = ease(physics.roll, roll_target, config.attitude_ease, sim_dt)
    physics.pitch = ease(physics.pitch, -config.manual_tilt_deg * speed / config.cruise_speed, config.attitude_ease, sim_dt)
    physics.ground_speed = speed

    step = speed * sim_dt
    if step > 0.0:
        physics.position.move_to(physics.heading, step)
        physics.distance_traveled += step
