"""Mission definitions: waypoint commands, routes and delivery requests.

Exports:
    MavCommand: Navigation command enumeration
    WaypointCommand: Immutable route element
    Route: Type alias for an ordered list of waypoint commands
    generate_route: Canonical five-step delivery route
    insert_before_land, change_destination, emergency_landing, change_altitude:
        Route edits for in-flight replanning
    DeliveryRequest, Priority: Task source records
"""

from .route import (
    Route,
    change_altitude,
    change_destination,
    emergency_landing,
    generate_route,
    insert_before_land,
    resequence,
    route_length,
)
from .task import DeliveryRequest, Priority, TaskCompletionListener
from .waypoint import MavCommand, WaypointCommand

__all__ = [
    "MavCommand",
    "WaypointCommand",
    "Route",
    "generate_route",
    "resequence",
    "insert_before_land",
    "change_destination",
    "emergency_landing",
    "change_altitude",
    "route_length",
    "DeliveryRequest",
    "Priority",
    "TaskCompletionListener",
]
