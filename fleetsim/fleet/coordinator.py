"""Fleet coordinator: the single owner of every vehicle in a simulation.

The coordinator replaces process-wide mutable state with one explicit object.
External collaborators talk to it only: the task source hands it delivery
requests, the operator issues arm/disarm/mode requests and manual input, and a
driver calls :meth:`FleetCoordinator.tick` with the current wall-clock time.

Tick Pipeline (per active vehicle, fully committed before the next one):
    1. dt since the vehicle's own last tick, clamped, then scaled
    2. Manual control (selected vehicle only), may preempt automation
    3. Flight-mode state machine, chooses the target
    4. Physics integrator, moves towards it
    5. Telemetry snapshot published to the sink
    6. Flight events and task completions delivered to listeners

Vehicles never read each other's state, so a tick's outcome for one vehicle
does not depend on the order in which the fleet is iterated.

Example:
    >>> from fleetsim.config import REMOTE_LOCATIONS
    >>> from fleetsim.fleet import FleetCoordinator
    >>> from fleetsim.mission import DeliveryRequest
    >>> from fleetsim.vehicles import FlightMode
    >>> fleet = FleetCoordinator.create()
    >>> vehicle = fleet.dispatch(DeliveryRequest("T-1", REMOTE_LOCATIONS["PHC-Village-A"]))
    >>> fleet.arm(vehicle.id).accepted
    True
    >>> fleet.set_mode(vehicle.id, FlightMode.AUTO).accepted
    True
    >>> snapshots = fleet.tick(0.0)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from fleetsim.config import DEFAULT_FLEET_SIZE, DEFAULT_HOME, VEHICLE_COLORS, SimConfig
from fleetsim.errors import CommandResult, Severity, UnknownVehicleError
from fleetsim.flight import (
    EventKind,
    EventListener,
    EventLog,
    FlightEvent,
    Guidance,
    advance_flight_mode,
    apply_manual_control,
    integrate,
)
from fleetsim.geo import GeoPoint
from fleetsim.mission import DeliveryRequest, TaskCompletionListener, WaypointCommand, generate_route
from fleetsim.vehicles import (
    NO_INPUT,
    ControlInput,
    FlightMode,
    Telemetry,
    TelemetrySink,
    Vehicle,
    VehicleStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class MissionRecord:
    """Timing of one task, filled in as the mission progresses.

    Times are tick timestamps; ``None`` until the milestone is reached. A
    task assigned before the first tick is stamped by its first event.
    """

    task_id: str
    vehicle_id: str
    dispatched_at: float | None = None
    delivered_at: float | None = None
    completed_at: float | None = None
    distance: float = 0.0

    @property
    def delivery_time(self) -> float | None:
        if self.dispatched_at is None or self.delivered_at is None:
            return None
        return self.delivered_at - self.dispatched_at

    @property
    def total_time(self) -> float | None:
        if self.dispatched_at is None or self.completed_at is None:
            return None
        return self.completed_at - self.dispatched_at


class FleetCoordinator:
    """Owns the fleet, validates operator requests and runs the tick.

    Attributes:
        config (SimConfig): Tunables shared by every vehicle.
        events (EventLog): Most recent flight events.
        on_task_completed (TaskCompletionListener | None): Called once per task
            at delivery touchdown.
        telemetry_sink (TelemetrySink | None): Receives every snapshot.
        event_listener (EventListener | None): Receives every flight event.
        _vehicles (dict[str, Vehicle]): Fleet in discovery order.
        _selected_id (str | None): Vehicle receiving manual input.
        _now (float | None): Timestamp of the latest tick.
        _missions (dict[str, MissionRecord]): Timing per task id.
    """

    config: SimConfig
    events: EventLog
    on_task_completed: TaskCompletionListener | None
    telemetry_sink: TelemetrySink | None
    event_listener: EventListener | None

    _vehicles: dict[str, Vehicle]
    _selected_id: str | None
    _now: float | None
    _missions: dict[str, MissionRecord]

    def __init__(
        self,
        vehicles: Iterable[Vehicle] = (),
        config: SimConfig | None = None,
        on_task_completed: TaskCompletionListener | None = None,
        telemetry_sink: TelemetrySink | None = None,
        event_listener: EventListener | None = None,
    ):
        """
        Raises:
            ValueError: If two vehicles share an id.
        """
        self.config = config if config is not None else SimConfig()
        self.events = EventLog(self.config.event_log_size)
        self.on_task_completed = on_task_completed
        self.telemetry_sink = telemetry_sink
        self.event_listener = event_listener
        self._vehicles = {}
        self._selected_id = None
        self._now = None
        self._missions = {}

        for vehicle in vehicles:
            self.add_vehicle(vehicle)

    @classmethod
    def create(
        cls,
        count: int = DEFAULT_FLEET_SIZE,
        home: GeoPoint = DEFAULT_HOME,
        **kwargs,
    ) -> FleetCoordinator:
        """Build a fleet of ``count`` landed vehicles at ``home``.

        Vehicles are named ``DRONE-1`` … ``DRONE-n`` and coloured from the
        fixed palette in order.
        """
        vehicles = [
            Vehicle(
                f"DRONE-{i}",
                home,
                name=f"Drone {i}",
                color=VEHICLE_COLORS[(i - 1) % len(VEHICLE_COLORS)],
            )
            for i in range(1, count + 1)
        ]
        return cls(vehicles, **kwargs)

    def add_vehicle(self, vehicle: Vehicle) -> None:
        if vehicle.id in self._vehicles:
            msg = f"Duplicate vehicle id: {vehicle.id}"
            raise ValueError(msg)
        self._vehicles[vehicle.id] = vehicle

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def vehicles(self) -> list[Vehicle]:
        return list(self._vehicles.values())

    def get(self, vehicle_id: str) -> Vehicle:
        """
        Raises:
            UnknownVehicleError: If the fleet has no such vehicle.
        """
        try:
            return self._vehicles[vehicle_id]
        except KeyError:
            raise UnknownVehicleError(vehicle_id) from None

    def find_available(self) -> Vehicle | None:
        """First idle vehicle in discovery order, or None."""
        for vehicle in self._vehicles.values():
            if vehicle.is_idle:
                return vehicle
        return None

    def vehicle_for_task(self, task_id: str) -> Vehicle | None:
        for vehicle in self._vehicles.values():
            if vehicle.assigned_task_id == task_id:
                return vehicle
        return None

    def telemetry(self, vehicle_id: str) -> Telemetry | None:
        """Last published snapshot of ``vehicle_id``, None before its first tick."""
        return self.get(vehicle_id).telemetry

    def snapshot_positions(self) -> np.ndarray:
        """Fleet positions as an ``(n, 3)`` array of lat, lng, altitude."""
        if not self._vehicles:
            return np.empty((0, 3))
        return np.array(
            [
                (v.physics.position.lat, v.physics.position.lng, v.physics.altitude)
                for v in self._vehicles.values()
            ],
            dtype=float,
        )

    def status_counts(self) -> dict[VehicleStatus, int]:
        counts = dict.fromkeys(VehicleStatus, 0)
        for vehicle in self._vehicles.values():
            counts[vehicle.status] += 1
        return counts

    @property
    def all_idle(self) -> bool:
        return all(v.is_idle and not v.physics.armed for v in self._vehicles.values())

    @property
    def selected_vehicle(self) -> Vehicle | None:
        return self._vehicles.get(self._selected_id) if self._selected_id else None

    @property
    def missions(self) -> list[MissionRecord]:
        return list(self._missions.values())

    # ------------------------------------------------------------------
    # Mission assignment
    # ------------------------------------------------------------------

    def assign(
        self,
        vehicle_id: str,
        task: DeliveryRequest | str,
        route: Iterable[WaypointCommand],
    ) -> CommandResult:
        """Give ``vehicle_id`` a task and its route.

        The vehicle moves to DISPATCHED but stays disarmed; arming and AUTO are
        separate operator requests. A :class:`DeliveryRequest` with an origin
        override relocates the vehicle's home (and the vehicle) to it.

        Returns:
            CommandResult: Rejected when the vehicle is busy or the route is
            empty.
        """
        vehicle = self.get(vehicle_id)
        if isinstance(task, DeliveryRequest):
            task_id, origin = task.task_id, task.origin_override
        else:
            task_id, origin = task, None

        route = list(route)
        if not vehicle.is_idle:
            return self._reject(vehicle, f"ASSIGN FAIL: VEHICLE BUSY ({vehicle.status.value})")
        if not route:
            return self._reject(vehicle, "ASSIGN FAIL: EMPTY ROUTE")

        vehicle.assign_mission(task_id, route, origin=origin)
        self._missions[task_id] = MissionRecord(task_id, vehicle.id, dispatched_at=self._now)
        self._emit(vehicle, EventKind.DISPATCHED, f"Assigned task {task_id}, {len(route)} waypoints")
        return CommandResult.ok()

    def dispatch(self, request: DeliveryRequest, altitude: float | None = None) -> Vehicle | None:
        """Assign ``request`` to the first available vehicle with a generated route.

        Returns:
            Vehicle | None: The dispatched vehicle, or None if none is idle.
        """
        vehicle = self.find_available()
        if vehicle is None:
            logger.warning("No vehicle available for task %s", request.task_id)
            return None

        origin = request.origin_override or vehicle.home
        kwargs = {} if altitude is None else {"altitude": altitude}
        route = generate_route(origin, request.destination, **kwargs)
        if not self.assign(vehicle.id, request, route):
            return None
        return vehicle

    def set_route(self, vehicle_id: str, route: Iterable[WaypointCommand]) -> CommandResult:
        """Replace the route of a vehicle with a mission, keeping its index.

        An index left past the end of the new route is clamped on the next
        tick. An empty route makes AUTO fall back to LOITER.
        """
        vehicle = self.get(vehicle_id)
        if vehicle.is_idle:
            return self._reject(vehicle, "ROUTE FAIL: NO MISSION ASSIGNED")

        vehicle.assigned_route = route
        self._emit(vehicle, EventKind.ROUTE_UPDATED, f"Route updated, {len(vehicle.assigned_route)} waypoints")
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Operator requests
    # ------------------------------------------------------------------

    def arm(self, vehicle_id: str) -> CommandResult:
        vehicle = self.get(vehicle_id)
        if not vehicle.gps_fix:
            return self._reject(vehicle, "ARM FAIL: NO GPS FIX")
        if vehicle.is_idle:
            return self._reject(vehicle, "ARM FAIL: NO MISSION")
        if vehicle.physics.armed:
            return CommandResult.ok()

        vehicle.physics.armed = True
        self._emit(vehicle, EventKind.ARMED, "Motors armed", Severity.WARNING)
        return CommandResult.ok()

    def disarm(self, vehicle_id: str) -> CommandResult:
        vehicle = self.get(vehicle_id)
        p = vehicle.physics
        if p.altitude > self.config.disarm_max_altitude:
            return self._reject(vehicle, "DISARM REJECTED: VEHICLE AIRBORNE", Severity.CRITICAL)
        if not p.armed:
            return CommandResult.ok()

        p.disarm()
        self._emit(vehicle, EventKind.DISARMED, "Motors disarmed")
        return CommandResult.ok()

    def set_mode(self, vehicle_id: str, mode: FlightMode) -> CommandResult:
        vehicle = self.get(vehicle_id)
        p = vehicle.physics

        if mode is FlightMode.AUTO:
            if not vehicle.assigned_route:
                return self._reject(vehicle, "AUTO FAIL: NO MISSION")
            if not p.armed:
                return self._reject(vehicle, "AUTO FAIL: ARM FIRST")

        if mode is FlightMode.RTL and vehicle.status in (VehicleStatus.COMPLETED, VehicleStatus.RETURNING):
            p.is_returning_home = True
            vehicle.advance_status(VehicleStatus.RETURNING)
        if mode is FlightMode.GUIDED:
            p.guided_altitude = p.altitude

        previous = p.flight_mode
        p.flight_mode = mode
        self._emit(vehicle, EventKind.MODE_CHANGED, f"Mode {previous.value} -> {mode.value}")
        return CommandResult.ok()

    def set_gps_fix(self, vehicle_id: str, fix: bool) -> None:
        self.get(vehicle_id).gps_fix = fix

    def select_vehicle(self, vehicle_id: str | None) -> None:
        """Route manual input to ``vehicle_id``; None deselects.

        The previously selected vehicle's input is released.
        """
        if vehicle_id is not None:
            self.get(vehicle_id)
        previous = self.selected_vehicle
        if previous is not None:
            previous.control = NO_INPUT
        self._selected_id = vehicle_id

    def set_control_input(self, actions: ControlInput | Mapping[str, bool] | Iterable[str]) -> CommandResult:
        """Publish the current manual axis state for the selected vehicle.

        Raises:
            ValueError: For an unknown action name.
        """
        control = actions if isinstance(actions, ControlInput) else ControlInput.from_actions(actions)
        vehicle = self.selected_vehicle
        if vehicle is None:
            if control.any_active:
                logger.debug("Manual input ignored, no vehicle selected")
            return CommandResult.rejected("NO VEHICLE SELECTED")
        vehicle.control = control
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, now: float) -> list[Telemetry]:
        """Advance every active vehicle to wall-clock time ``now``.

        Idle, disarmed vehicles only have their timestamp refreshed.

        Returns:
            list[Telemetry]: Snapshots published during this tick.
        """
        self._now = now
        published = []
        for vehicle in self._vehicles.values():
            dt = self._elapsed(vehicle, now)
            if not vehicle.is_active:
                continue
            sim_dt = dt * self.config.sim_speed_multiplier
            events, completed = self._step(vehicle, sim_dt)

            telemetry = Telemetry.from_vehicle(vehicle, now)
            vehicle.telemetry = telemetry
            published.append(telemetry)
            self._publish(telemetry, events, completed)
        return published

    def _elapsed(self, vehicle: Vehicle, now: float) -> float:
        p = vehicle.physics
        last, p.last_tick_timestamp = p.last_tick_timestamp, now
        if last is None:
            return 0.0
        return min(max(now - last, 0.0), self.config.max_tick_seconds)

    def _step(self, vehicle: Vehicle, sim_dt: float) -> tuple[list[FlightEvent], list[str]]:
        control = vehicle.control if vehicle.id == self._selected_id else NO_INPUT
        events = apply_manual_control(vehicle, control, sim_dt, self.config)

        guidance: Guidance = advance_flight_mode(vehicle, sim_dt, self.config)
        events.extend(guidance.events)

        integrate(vehicle.physics, guidance, sim_dt, self.config)
        events.extend(self._check_battery(vehicle))
        return events, guidance.completed_tasks

    def _check_battery(self, vehicle: Vehicle) -> list[FlightEvent]:
        p = vehicle.physics
        if p.low_battery_warned or p.battery.percentage >= self.config.low_battery_percent:
            return []
        p.low_battery_warned = True
        return [
            self._event(
                vehicle,
                EventKind.LOW_BATTERY,
                f"Low battery: {p.battery.percentage:.1f}%",
                Severity.WARNING,
            )
        ]

    def _publish(self, telemetry: Telemetry, events: list[FlightEvent], completed: list[str]) -> None:
        if self.telemetry_sink is not None:
            try:
                self.telemetry_sink(telemetry)
            except Exception:
                logger.exception("Telemetry sink failed for %s", telemetry.vehicle_id)

        for event in events:
            self._record(event)
            self._track(event, telemetry)

        for task_id in completed:
            if self.on_task_completed is None:
                continue
            try:
                self.on_task_completed(task_id, telemetry.vehicle_id)
            except Exception:
                logger.exception("Task completion listener failed for %s", task_id)

    def _track(self, event: FlightEvent, telemetry: Telemetry) -> None:
        record = self._missions.get(event.task_id) if event.task_id else None
        if record is None:
            return
        if record.dispatched_at is None:
            record.dispatched_at = event.timestamp
        if event.kind is EventKind.DELIVERED:
            record.delivered_at = event.timestamp
        elif event.kind is EventKind.MISSION_COMPLETED:
            record.completed_at = event.timestamp
            record.distance = telemetry.distance_traveled

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _event(
        self,
        vehicle: Vehicle,
        kind: EventKind,
        message: str,
        severity: Severity = Severity.INFO,
    ) -> FlightEvent:
        return FlightEvent(
            vehicle_id=vehicle.id,
            kind=kind,
            severity=severity,
            message=message,
            timestamp=self._now,
            task_id=vehicle.assigned_task_id,
        )

    def _emit(self, vehicle: Vehicle, kind: EventKind, message: str, severity: Severity = Severity.INFO) -> None:
        self._record(self._event(vehicle, kind, message, severity))

    def _reject(self, vehicle: Vehicle, reason: str, severity: Severity = Severity.ERROR) -> CommandResult:
        self._emit(vehicle, EventKind.COMMAND_REJECTED, reason, severity)
        return CommandResult.rejected(reason)

    def _record(self, event: FlightEvent) -> None:
        self.events.append(event)
        logger.log(event.severity, "%s", event)
        if self.event_listener is None:
            return
        try:
            self.event_listener(event)
        except Exception:
            logger.exception("Event listener failed for %s", event.vehicle_id)
