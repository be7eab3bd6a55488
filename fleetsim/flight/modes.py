"""Flight-mode state machine.

Evaluated once per tick for every armed vehicle, before the integrator. Each
mode handler looks at the vehicle's own route and physics, possibly changes
mode, waypoint index or lifecycle status, and commands a target position and
altitude for the integrator to fly towards.

Mode Rules:
    AUTO:
        • Starts the mission on the first tick (index -1 → 0, status RUNNING)
        • Advances one waypoint per arrival (horizontal and vertical tolerance)
        • On LAND: touch down, report the delivery once, wait, then RTL
    RTL:
        • Flies home at no less than the RTL altitude, then switches to LAND
    LAND:
        • Descends in place; touchdown disarms, and closes the mission if the
          vehicle was returning home after a delivery
    GUIDED:
        • Holds the manually steered altitude; horizontal motion comes from
          ``fleetsim.flight.manual``
    LOITER / STABILIZE:
        • Hold position and altitude

Nothing here reads global state or another vehicle, so the result depends only
on the vehicle, ``sim_dt`` and the config.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from fleetsim.config import SimConfig
from fleetsim.errors import Severity
from fleetsim.geo import GeoPoint
from fleetsim.mission import MavCommand
from fleetsim.vehicles import FlightMode, Vehicle, VehicleStatus

from .events import EventKind, FlightEvent


@dataclass
class Guidance:
    """What one tick of the state machine asks of the integrator.

    Attributes:
        target (GeoPoint): Horizontal target.
        target_altitude (float): Altitude target in meters.
        events (list[FlightEvent]): Events raised during this tick.
        completed_tasks (list[str]): Task ids whose delivery landed this tick.
    """

    target: GeoPoint
    target_altitude: float
    events: list[FlightEvent] = field(default_factory=list)
    completed_tasks: list[str] = field(default_factory=list)

    def emit(
        self,
        vehicle: Vehicle,
        kind: EventKind,
        message: str,
        severity: Severity = Severity.INFO,
        task_id: str | None = None,
    ) -> None:
        self.events.append(
            FlightEvent(
                vehicle_id=vehicle.id,
                kind=kind,
                severity=severity,
                message=message,
                timestamp=vehicle.physics.last_tick_timestamp,
                task_id=task_id if task_id is not None else vehicle.assigned_task_id,
            )
        )


def hold(vehicle: Vehicle) -> Guidance:
    """Guidance that keeps the vehicle where it is."""
    p = vehicle.physics
    return Guidance(p.position.copy(), p.altitude)


def advance_flight_mode(vehicle: Vehicle, sim_dt: float, config: SimConfig) -> Guidance:
    """Run the current mode's rules for one tick.

    Args:
        vehicle: Vehicle to evaluate; its physics and status may be mutated.
        sim_dt: Scaled simulation step in seconds.
        config: Simulation tunables.

    Returns:
        Guidance: Target for the integrator plus events and completions.
    """
    guidance = hold(vehicle)
    if not vehicle.physics.armed:
        return guidance

    handler = _MODE_HANDLERS[vehicle.physics.flight_mode]
    handler(vehicle, sim_dt, config, guidance)
    return guidance


def _hold_position(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    pass


def _guided(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    guidance.target_altitude = vehicle.physics.guided_altitude


def _auto(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    p = vehicle.physics
    route = vehicle.assigned_route

    if not route:
        p.flight_mode = FlightMode.LOITER
        guidance.emit(vehicle, EventKind.NO_MISSION, "AUTO: no mission, holding position", Severity.WARNING)
        return

    if p.active_waypoint_index < 0:
        p.active_waypoint_index = 0
        vehicle.advance_status(VehicleStatus.RUNNING)
        guidance.emit(vehicle, EventKind.MISSION_STARTED, f"Mission started, {len(route)} waypoints")
    elif p.active_waypoint_index >= len(route):
        stale = p.active_waypoint_index
        p.active_waypoint_index = len(route) - 1
        guidance.emit(
            vehicle,
            EventKind.ROUTE_CLAMPED,
            f"Waypoint index {stale} past route end, clamped to {p.active_waypoint_index}",
            Severity.WARNING,
        )

    waypoint = route[p.active_waypoint_index]
    guidance.target = waypoint.position
    guidance.target_altitude = waypoint.altitude

    horizontal = p.position.distance_to(waypoint.position)
    vertical = abs(p.altitude - waypoint.altitude)
    if horizontal >= config.waypoint_radius or vertical >= config.waypoint_alt_tolerance:
        return

    if waypoint.command is MavCommand.LAND:
        guidance.target_altitude = 0.0
        if p.altitude < config.landed_altitude:
            _delivery_touchdown(vehicle, sim_dt, config, guidance)
    elif p.active_waypoint_index < len(route) - 1:
        p.active_waypoint_index += 1
        guidance.emit(
            vehicle,
            EventKind.WAYPOINT_REACHED,
            f"Reached WP {waypoint.sequence}, proceeding to WP {route[p.active_waypoint_index].sequence}",
        )


def _delivery_touchdown(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    p = vehicle.physics

    if not p.delivery_confirmed:
        p.delivery_confirmed = True
        p.delivery_wait_elapsed = 0.0
        vehicle.advance_status(VehicleStatus.COMPLETED)
        task_id = vehicle.assigned_task_id
        if task_id is not None:
            guidance.completed_tasks.append(task_id)
        guidance.emit(vehicle, EventKind.DELIVERED, "Package delivered, waiting before return")
        return

    if p.is_returning_home:
        return

    p.delivery_wait_elapsed += sim_dt
    if p.delivery_wait_elapsed < config.delivery_wait:
        return

    p.is_returning_home = True
    p.flight_mode = FlightMode.RTL
    vehicle.advance_status(VehicleStatus.RETURNING)
    guidance.emit(vehicle, EventKind.RTL_INITIATED, "Delivery complete, returning to launch")


def _rtl(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    p = vehicle.physics
    guidance.target = vehicle.home.copy()
    guidance.target_altitude = max(p.altitude, config.rtl_altitude)

    if p.position.distance_to(vehicle.home) < config.home_radius:
        p.flight_mode = FlightMode.LAND
        guidance.emit(vehicle, EventKind.MODE_CHANGED, "Home reached, landing")


def _land(vehicle: Vehicle, sim_dt: float, config: SimConfig, guidance: Guidance) -> None:
    p = vehicle.physics
    guidance.target_altitude = 0.0
    if p.altitude >= config.landed_altitude:
        return

    p.disarm()
    guidance.emit(vehicle, EventKind.LANDED, "Landed, motors disarmed")

    if p.is_returning_home:
        task_id = vehicle.assigned_task_id
        # A COMPLETED vehicle only gets here through an explicit RTL request.
        vehicle.advance_status(VehicleStatus.RETURNING)
        vehicle.advance_status(VehicleStatus.IDLE)
        p.reset_mission_progress()
        guidance.emit(vehicle, EventKind.MISSION_COMPLETED, "Mission complete, vehicle available", task_id=task_id)


_MODE_HANDLERS: dict[FlightMode, Callable[[Vehicle, float, SimConfig, Guidance], None]] = {
    FlightMode.STABILIZE: _hold_position,
    FlightMode.LOITER: _hold_position,
    FlightMode.GUIDED: _guided,
    FlightMode.AUTO: _auto,
    FlightMode.RTL: _rtl,
    FlightMode.LAND: _land,
}
