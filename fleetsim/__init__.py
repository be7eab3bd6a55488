"""Fleet flight-simulation core for autonomous delivery drones.

fleetsim simulates a small fleet of multirotor delivery drones flying
waypoint missions. Each vehicle runs its own autopilot (flight-mode state
machine), kinematic integrator and battery model; a fleet coordinator owns
every vehicle, validates operator requests and advances the whole fleet once
per tick from wall-clock time.

Framework Architecture:
    Layered Design:
        • Geodesy (fleetsim.geo): great-circle distance, bearing and forward
          projection on a spherical Earth, backed by ``pyproj.Geod``
        • Lifecycle (fleetsim.state): validated state machine driving each
          vehicle's coarse status (idle → dispatched → running → completed →
          returning → idle)
        • Missions (fleetsim.mission): waypoint commands, the canonical
          five-step delivery route and in-flight route edits
        • Vehicles (fleetsim.vehicles): physics record, manual control input
          and telemetry snapshots
        • Flight (fleetsim.flight): mode rules, integrator, manual override and
          flight events
        • Fleet (fleetsim.fleet): dispatch, operator requests and the tick
        • Simulator (fleetsim.simulator): cancellable driver with a rich live
          view, plus pandas analysis of finished runs

Mission Flow:
    1. Dispatch: a delivery request goes to the first idle vehicle with a
       generated route (TAKEOFF, midpoint, destination, LOITER, LAND)
    2. Arm + AUTO: operator requests, rejected without GPS fix or mission
    3. Flight: waypoints are captured one by one at cruise altitude
    4. Delivery: touchdown reports the task once, waits, then returns home
    5. Closure: landing at home disarms and frees the vehicle

Quick Start:
    >>> from fleetsim import DeliveryRequest, FleetCoordinator, FlightMode, GeoPoint
    >>> fleet = FleetCoordinator.create(count=2)
    >>> drone = fleet.dispatch(DeliveryRequest("T-1", GeoPoint(18.5304, 73.8767)))
    >>> fleet.arm(drone.id), fleet.set_mode(drone.id, FlightMode.AUTO)
    (CommandResult(accepted=True, reason=None), CommandResult(accepted=True, reason=None))
    >>> now = 0.0
    >>> while not fleet.get(drone.id).is_idle:
    ...     _ = fleet.tick(now)
    ...     now += 0.1

The simulator package is not imported here since its analysis helpers pull
in pandas and matplotlib; import ``fleetsim.simulator`` explicitly.
"""

from fleetsim.geo import GeoPoint
from fleetsim.config import DEFAULT_HOME, REMOTE_LOCATIONS, SimConfig
from fleetsim.errors import CommandResult, Severity, UnknownVehicleError
from fleetsim.energy import BatteryStatus
from fleetsim.mission import DeliveryRequest, MavCommand, Priority, WaypointCommand, generate_route
from fleetsim.vehicles import ControlInput, FlightMode, PhysicsState, Telemetry, Vehicle, VehicleStatus
from fleetsim.flight import EventKind, FlightEvent
from fleetsim.fleet import FleetCoordinator, MissionRecord

__version__ = "0.1.0"

__all__ = [
    "GeoPoint",
    "SimConfig",
    "DEFAULT_HOME",
    "REMOTE_LOCATIONS",
    "CommandResult",
    "Severity",
    "UnknownVehicleError",
    "BatteryStatus",
    "DeliveryRequest",
    "Priority",
    "MavCommand",
    "WaypointCommand",
    "generate_route",
    "Vehicle",
    "VehicleStatus",
    "PhysicsState",
    "FlightMode",
    "ControlInput",
    "Telemetry",
    "EventKind",
    "FlightEvent",
    "FleetCoordinator",
    "MissionRecord",
]
