"""Fleet vehicle with a validated mission lifecycle.

This module provides the Vehicle class, the unit the fleet coordinator
assigns missions to and ticks. A vehicle couples three kinds of state:

Core Architecture:
    Lifecycle State Machine:
        • VehicleStatus enum: IDLE, DISPATCHED, RUNNING, COMPLETED, RETURNING
        • Validated transitions through ``fleetsim.state.StateMachine``
        • Releasing the mission is the effect of the RETURNING → IDLE transition

    Mission Assignment:
        • External task id and route, present iff the vehicle is not idle
        • Home location fixed for the duration of a mission

    Physics:
        • One exclusively owned PhysicsState, mutated only by the tick
        • Manual control input consumed by the tick, never applied directly

Lifecycle:
    IDLE → DISPATCHED → RUNNING → COMPLETED → RETURNING → IDLE

    DISPATCHED: task and route stored, motors still disarmed.
    RUNNING: AUTO has started the first waypoint.
    COMPLETED: the package is down at the destination (task reported).
    RETURNING: flying back home after the delivery.

Example:
    >>> from fleetsim.geo import GeoPoint
    >>> from fleetsim.mission import generate_route
    >>> hub = GeoPoint(18.5204, 73.8567)
    >>> vehicle = Vehicle("DRONE-1", hub)
    >>> vehicle.assign_mission("task-1", generate_route(hub, GeoPoint(18.53, 73.87)))
    >>> vehicle.status
    <VehicleStatus.DISPATCHED: 'dispatched'>
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from fleetsim.config import VEHICLE_COLORS
from fleetsim.energy import BatteryStatus
from fleetsim.geo import GeoPoint
from fleetsim.mission import WaypointCommand
from fleetsim.state import Action, StateMachine

from .control import NO_INPUT, ControlInput
from .physics import PhysicsState

if TYPE_CHECKING:
    from .telemetry import Telemetry


class VehicleStatus(Enum):
    """Coarse lifecycle state visible to external collaborators."""

    IDLE = "idle"
    DISPATCHED = "dispatched"
    RUNNING = "running"
    COMPLETED = "completed"
    RETURNING = "returning"


class Vehicle:
    """One fleet slot: identity, mission assignment and physics.

    Attributes:
        id (str): Stable unique identifier.
        name (str): Display name.
        color (str): Cosmetic colour, fixed at creation.
        home (GeoPoint): Launch/return point; only replaced at dispatch.
        physics (PhysicsState): Exclusively owned kinematic state.
        gps_fix (bool): External precondition gate for arming.
        control (ControlInput): Manual axis state for the coming tick.
        telemetry (Telemetry | None): Last published snapshot.
        _task_id (str | None): Assigned external task.
        _route (list[WaypointCommand] | None): Assigned route.
        _state_machine (StateMachine): Lifecycle transitions.
    """

    id: str
    name: str
    color: str
    home: GeoPoint
    physics: PhysicsState
    gps_fix: bool
    control: ControlInput
    telemetry: Telemetry | None

    _task_id: str | None
    _route: list[WaypointCommand] | None
    _state_machine: StateMachine

    def __init__(
        self,
        vehicle_id: str,
        home: GeoPoint,
        name: str | None = None,
        color: str = VEHICLE_COLORS[0],
        battery: BatteryStatus | None = None,
        gps_fix: bool = True,
    ):
        self.id = vehicle_id
        self.name = name or vehicle_id
        self.color = color
        self.home = home.copy()
        self.physics = PhysicsState(
            position=home.copy(),
            battery=battery if battery is not None else BatteryStatus(),
        )
        self.gps_fix = gps_fix
        self.control = NO_INPUT
        self.telemetry = None
        self._task_id = None
        self._route = None

        self.init_state_machine(
            VehicleStatus.IDLE,
            {
                VehicleStatus.IDLE: [Action(VehicleStatus.DISPATCHED)],
                VehicleStatus.DISPATCHED: [Action(VehicleStatus.RUNNING)],
                VehicleStatus.RUNNING: [Action(VehicleStatus.COMPLETED)],
                VehicleStatus.COMPLETED: [Action(VehicleStatus.RETURNING)],
                VehicleStatus.RETURNING: [Action(VehicleStatus.IDLE, self._release)],
            },
        )

    def init_state_machine(self, initial_state: VehicleStatus, nodes_graph) -> None:
        self._state_machine = StateMachine(initial_state, nodes_graph)

    def transition_to(self, next_state: VehicleStatus) -> None:
        """Move the lifecycle to ``next_state``.

        Raises:
            ValueError: If the transition is not part of the lifecycle.
        """
        self._state_machine.request_transition(next_state)

    def advance_status(self, next_state: VehicleStatus) -> bool:
        """Transition only if ``next_state`` directly follows the current status.

        Returns:
            bool: True if the status changed.
        """
        if not self._state_machine.can_transition(next_state):
            return False
        self.transition_to(next_state)
        return True

    @property
    def status(self) -> VehicleStatus:
        return self._state_machine.current

    def state_list(self) -> list[VehicleStatus]:
        return self._state_machine.get_state_list()

    @property
    def is_idle(self) -> bool:
        return self.status is VehicleStatus.IDLE

    @property
    def assigned_task_id(self) -> str | None:
        return self._task_id

    @property
    def assigned_route(self) -> list[WaypointCommand] | None:
        return self._route

    @assigned_route.setter
    def assigned_route(self, route: Sequence[WaypointCommand]):
        if self.is_idle:
            msg = f"Vehicle {self.id} is idle and has no mission to re-route"
            raise ValueError(msg)
        self._route = list(route)

    def assign_mission(
        self,
        task_id: str,
        route: Sequence[WaypointCommand],
        origin: GeoPoint | None = None,
    ) -> None:
        """Store a mission and move to DISPATCHED.

        ``origin`` replaces the home location and relocates the (idle, landed)
        vehicle onto it. Arming is left to the operator.

        Raises:
            ValueError: If the vehicle is not idle.
        """
        self.transition_to(VehicleStatus.DISPATCHED)
        self._task_id = task_id
        self._route = list(route)
        if origin is not None:
            self.home = origin.copy()
            self.physics.position = origin.copy()
        self.physics.reset_mission_progress()

    def _release(self) -> None:
        self._task_id = None
        self._route = None
        self.physics.reset_mission_progress()

    @property
    def is_active(self) -> bool:
        """True when the tick has something to do for this vehicle."""
        return self._route is not None or self.physics.armed

    def __repr__(self) -> str:
        return f"Vehicle({self.id!r}, status={self.status.value}, mode={self.physics.flight_mode.value})"
