"""Geographic coordinate utilities for fleet simulation.

This package provides the great-circle geodesy used by the flight-mode state
machine and the physics integrator. Everything is expressed in decimal degrees
and meters on a spherical Earth (radius 6,371,000 m).

Components:
    GeoPoint: Geographic point with latitude/longitude coordinates
    distance: Great-circle distance between two points
    bearing: Initial bearing from one point to another
    destination: Forward projection along a bearing

Typical Usage:
    >>> from fleetsim.geo import GeoPoint, bearing, destination, distance
    >>>
    >>> hub = GeoPoint(18.5204, 73.8567)
    >>> clinic = GeoPoint(18.5304, 73.8767)
    >>>
    >>> leg = distance(hub, clinic)
    >>> course = bearing(hub, clinic)
    >>> arrival = destination(hub, course, leg)  # ~= clinic
"""

from .geo_point import EARTH_RADIUS_M, GeoPoint, bearing, destination, distance

__all__ = ["GeoPoint", "EARTH_RADIUS_M", "bearing", "destination", "distance"]
