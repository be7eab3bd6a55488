"""Flight events and the bounded event log.

Every mode change, mission milestone and rejected operator request becomes a
:class:`FlightEvent`. Events are keyed by vehicle (and task where one is
involved), so listeners can consume notifications from many vehicles in any
order without mixing them up.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from fleetsim.errors import Severity


class EventKind(Enum):
    DISPATCHED = "dispatched"
    ROUTE_UPDATED = "route_updated"
    ARMED = "armed"
    DISARMED = "disarmed"
    MODE_CHANGED = "mode_changed"
    MISSION_STARTED = "mission_started"
    WAYPOINT_REACHED = "waypoint_reached"
    DELIVERED = "delivered"
    RTL_INITIATED = "rtl_initiated"
    LANDED = "landed"
    MISSION_COMPLETED = "mission_completed"
    MANUAL_OVERRIDE = "manual_override"
    ROUTE_CLAMPED = "route_clamped"
    NO_MISSION = "no_mission"
    LOW_BATTERY = "low_battery"
    COMMAND_REJECTED = "command_rejected"


@dataclass(frozen=True)
class FlightEvent:
    """A discrete, severity-tagged notification about one vehicle.

    Attributes:
        vehicle_id (str): Vehicle the event belongs to.
        kind (EventKind): What happened.
        severity (Severity): How loud to be about it.
        message (str): Operator-facing text.
        timestamp (float | None): Tick time, None before the first tick.
        task_id (str | None): Task in progress, if any.
    """

    vehicle_id: str
    kind: EventKind
    severity: Severity
    message: str
    timestamp: float | None = None
    task_id: str | None = None

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.vehicle_id}: {self.message}"


class EventListener(Protocol):
    def __call__(self, event: FlightEvent) -> None: ...


class EventLog:
    """Most recent flight events, oldest dropped first."""

    def __init__(self, maxlen: int = 50):
        self._events: deque[FlightEvent] = deque(maxlen=maxlen)

    def append(self, event: FlightEvent) -> None:
        self._events.append(event)

    def latest(self, n: int | None = None) -> list[FlightEvent]:
        """Newest first."""
        events = list(reversed(self._events))
        return events if n is None else events[:n]

    def for_vehicle(self, vehicle_id: str) -> list[FlightEvent]:
        return [e for e in self._events if e.vehicle_id == vehicle_id]

    def of_kind(self, kind: EventKind) -> list[FlightEvent]:
        return [e for e in self._events if e.kind is kind]

    def clear(self) -> None:
        self._events.clear()

    def __iter__(self) -> Iterator[FlightEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)
