"""Delivery requests as handed to the fleet by an external task source."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from fleetsim.geo import GeoPoint


class Priority(Enum):
    NORMAL = "Normal"
    EMERGENCY = "Emergency"


@dataclass(frozen=True)
class DeliveryRequest:
    """A dispatch request from the task source.

    Attributes:
        task_id (str): External task identifier, echoed back on completion.
        destination (GeoPoint): Delivery point.
        origin_override (GeoPoint | None): Launch point replacing the
            vehicle's home for this mission.
        priority (Priority): Cosmetic for the core; first-fit ignores it.
        payload (tuple[str, ...]): Free-form item list carried along.
    """

    task_id: str
    destination: GeoPoint
    origin_override: GeoPoint | None = None
    priority: Priority = Priority.NORMAL
    payload: tuple[str, ...] = field(default_factory=tuple)


class TaskCompletionListener(Protocol):
    """Callback the core invokes exactly once per task, at delivery touchdown."""

    def __call__(self, task_id: str, vehicle_id: str) -> None: ...
