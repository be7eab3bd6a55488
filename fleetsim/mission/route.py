"""Route generation and in-flight route edits.

The generator produces the canonical five-step delivery route the flight
state machine is built around (TAKEOFF, two WAYPOINTs, LOITER_TIME, LAND).
The edit helpers return new routes and never mutate their input; hand the
result to ``FleetCoordinator.set_route`` to apply it to a vehicle.
"""

from collections.abc import Sequence

from fleetsim.config import DEFAULT_ALTITUDE, DEFAULT_LOITER_SECONDS
from fleetsim.geo import GeoPoint

from .waypoint import MavCommand, WaypointCommand

Route = list[WaypointCommand]


def generate_route(
    origin: GeoPoint,
    destination: GeoPoint,
    altitude: float = DEFAULT_ALTITUDE,
    loiter_seconds: float = DEFAULT_LOITER_SECONDS,
) -> Route:
    """Build the canonical delivery route from ``origin`` to ``destination``.

    Args:
        origin: Launch point; the vehicle climbs over it first.
        destination: Delivery point; the route ends landing there.
        altitude: Cruise altitude ``H`` in meters.
        loiter_seconds: Hold time recorded on the LOITER_TIME step.

    Returns:
        Route: TAKEOFF@origin H, WAYPOINT@midpoint H, WAYPOINT@destination H,
        LOITER_TIME@destination H, LAND@destination 0.
    """
    mid = origin.midpoint(destination)
    return [
        WaypointCommand(1, MavCommand.TAKEOFF, origin.lat, origin.lng, altitude),
        WaypointCommand(2, MavCommand.WAYPOINT, mid.lat, mid.lng, altitude),
        WaypointCommand(3, MavCommand.WAYPOINT, destination.lat, destination.lng, altitude),
        WaypointCommand(
            4,
            MavCommand.LOITER_TIME,
            destination.lat,
            destination.lng,
            altitude,
            loiter_seconds=loiter_seconds,
        ),
        WaypointCommand(5, MavCommand.LAND, destination.lat, destination.lng, 0.0),
    ]


def resequence(route: Sequence[WaypointCommand]) -> Route:
    """Renumber ``route`` so sequences run 1..n in list order."""
    return [wp.with_sequence(i + 1) for i, wp in enumerate(route)]


def insert_before_land(
    route: Sequence[WaypointCommand], point: GeoPoint, altitude: float = DEFAULT_ALTITUDE
) -> Route:
    """Add a WAYPOINT just before the terminal LAND (or at the end if none)."""
    items = list(route)
    new_wp = WaypointCommand(0, MavCommand.WAYPOINT, point.lat, point.lng, altitude)
    if items and items[-1].command is MavCommand.LAND:
        items.insert(len(items) - 1, new_wp)
    else:
        items.append(new_wp)
    return resequence(items)


def change_destination(
    route: Sequence[WaypointCommand], point: GeoPoint, keep: int = 2
) -> Route:
    """Move every waypoint after the first ``keep`` onto ``point``.

    With the canonical route and ``keep=2`` the takeoff and the midpoint leg
    stay untouched and the remaining legs, loiter and landing retarget.
    """
    return [wp if i < keep else wp.moved_to(point) for i, wp in enumerate(route)]


def emergency_landing(point: GeoPoint) -> Route:
    """Single-step route landing at ``point``."""
    return [WaypointCommand(1, MavCommand.LAND, point.lat, point.lng, 0.0)]


def change_altitude(route: Sequence[WaypointCommand], altitude: float) -> Route:
    """Set every non-LAND waypoint to ``altitude``."""
    return [wp if wp.command is MavCommand.LAND else wp.at_altitude(altitude) for wp in route]


def route_length(start: GeoPoint, route: Sequence[WaypointCommand]) -> float:
    """Horizontal length in meters of flying ``route`` from ``start``."""
    total = 0.0
    prev = start
    for wp in route:
        point = wp.position
        total += prev.distance_to(point)
        prev = point
    return total
