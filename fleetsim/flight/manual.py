"""Manual control applied at the start of a vehicle's tick.

Input preempts automation: any active axis while the vehicle flies AUTO, RTL
or LOITER switches it to GUIDED before the state machine runs, so the override
takes effect in the same tick. A pending post-delivery return is cancelled and
is not resumed automatically; the operator can request RTL again.
"""

from __future__ import annotations

import math

from fleetsim.config import SimConfig
from fleetsim.errors import Severity
from fleetsim.vehicles import PREEMPTIBLE_MODES, ControlInput, FlightMode, Vehicle

from .events import EventKind, FlightEvent
from .integrator import ease


def apply_manual_control(
    vehicle: Vehicle,
    control: ControlInput,
    sim_dt: float,
    config: SimConfig,
) -> list[FlightEvent]:
    """Consume ``control`` for one tick.

    Axes act only on an armed vehicle in GUIDED:

        up/down         → guided target altitude (never below ground)
        turn_left/right → heading
        forward/back    → translation along the heading
        left/right      → translation across the heading

    Returns:
        list[FlightEvent]: A MANUAL_OVERRIDE event when automation was preempted.
    """
    p = vehicle.physics
    events: list[FlightEvent] = []
    if not p.armed:
        return events

    if control.any_active and p.flight_mode in PREEMPTIBLE_MODES:
        previous = p.flight_mode
        cancelled_return = p.is_returning_home
        p.flight_mode = FlightMode.GUIDED
        p.guided_altitude = p.altitude
        p.is_returning_home = False

        message = f"Manual override: {previous.value} -> GUIDED"
        if cancelled_return:
            message += ", return to launch cancelled"
        events.append(
            FlightEvent(
                vehicle_id=vehicle.id,
                kind=EventKind.MANUAL_OVERRIDE,
                severity=Severity.WARNING,
                message=message,
                timestamp=p.last_tick_timestamp,
                task_id=vehicle.assigned_task_id,
            )
        )

    if p.flight_mode is not FlightMode.GUIDED or sim_dt <= 0:
        return events

    if control.climb:
        p.guided_altitude = max(0.0, p.guided_altitude + control.climb * config.manual_climb_rate * sim_dt)

    if control.yaw:
        p.heading = (p.heading + control.yaw * config.manual_yaw_rate * sim_dt) % 360.0

    surge, sway = control.surge, control.sway
    if surge or sway:
        step = config.manual_speed * sim_dt
        offset = math.degrees(math.atan2(sway, surge))
        p.position.move_to((p.heading + offset) % 360.0, step)
        p.distance_traveled += step
        p.ground_speed = config.manual_speed
    else:
        p.ground_speed = ease(p.ground_speed, 0.0, config.vertical_lag_gain, sim_dt)

    p.pitch = ease(p.pitch, -surge * config.manual_tilt_deg, config.attitude_ease, sim_dt)
    p.roll = ease(p.roll, sway * config.manual_tilt_deg, config.attitude_ease, sim_dt)
    return events
