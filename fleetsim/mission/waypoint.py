"""Waypoint commands, the elements of a vehicle route.

A route is an ordered ``Sequence[WaypointCommand]``; list order is execution
order and ``sequence`` is the 1-based position shown to operators.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from fleetsim.geo import GeoPoint


class MavCommand(Enum):
    """MAVLink-style navigation commands understood by the flight core.

    Only ``LAND`` has dedicated handling in AUTO; the others are reached and
    passed. ``LOITER_TIME`` does not hold for its ``loiter_seconds`` and
    ``RETURN_TO_LAUNCH`` does not divert home mid-route. Generated routes
    always end with ``LAND``.
    """

    TAKEOFF = "NAV_TAKEOFF"
    WAYPOINT = "NAV_WAYPOINT"
    LOITER_TIME = "NAV_LOITER"
    RETURN_TO_LAUNCH = "NAV_RTL"
    LAND = "NAV_LAND"


@dataclass(frozen=True)
class WaypointCommand:
    """One commanded position/altitude/action of a route.

    Attributes:
        sequence (int): 1-based position in the route.
        command (MavCommand): What to do at this waypoint.
        lat (float): Target latitude in degrees.
        lng (float): Target longitude in degrees.
        altitude (float): Target altitude in meters above home.
        loiter_seconds (float | None): Hold time for LOITER_TIME (param 1).
        radius (float | None): Acceptance radius hint (param 2).
        yaw (float | None): Desired yaw in degrees (param 4).

    ``loiter_seconds``, ``radius`` and ``yaw`` are carried on the route but
    have no effect on flight. Arrival always uses
    ``SimConfig.waypoint_radius`` and the heading follows the track.
    """

    sequence: int
    command: MavCommand
    lat: float
    lng: float
    altitude: float
    loiter_seconds: float | None = None
    radius: float | None = None
    yaw: float | None = None

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    def with_sequence(self, sequence: int) -> WaypointCommand:
        return replace(self, sequence=sequence)

    def moved_to(self, point: GeoPoint) -> WaypointCommand:
        return replace(self, lat=point.lat, lng=point.lng)

    def at_altitude(self, altitude: float) -> WaypointCommand:
        return replace(self, altitude=altitude)
