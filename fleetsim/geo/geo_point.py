"""Great-circle geodesy for fleet navigation.

All calculations run on a spherical Earth of radius 6,371,000 m through a
``pyproj.Geod`` configured with a zero flattening. On a sphere the geodesic
solution is the great-circle (Haversine) solution, so distances, initial
bearings and forward projections agree with the classic closed-form formulas
while staying consistent with each other (a forward projection along
``bearing(a, b)`` for ``distance(a, b)`` lands back on ``b``).

Functions:
    distance: Great-circle distance in meters.
    bearing: Initial bearing in degrees, normalized to [0, 360).
    destination: Forward projection from a point along a bearing.

Classes:
    GeoPoint: Mutable latitude/longitude pair with navigation helpers.

Example:
    >>> home = GeoPoint(18.5204, 73.8567)
    >>> target = GeoPoint(18.5304, 73.8767)
    >>> round(home.distance_to(target))
    2384
    >>> home.forward(home.heading_to(target), home.distance_to(target))
    GeoPoint(lat=18.5304..., lng=73.8767...)
"""

from __future__ import annotations

from dataclasses import dataclass

from pyproj import Geod

EARTH_RADIUS_M = 6_371_000.0

# Sphere, not WGS84: the flight model works in great-circle terms.
_SPHERE = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def _normalize_bearing(deg: float) -> float:
    deg = deg % 360.0
    # -1e-15 % 360.0 yields 360.0
    return 0.0 if deg >= 360.0 else deg


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in meters.

    Symmetric, and zero for identical points.
    """
    _, _, dist = _SPHERE.inv(a.lng, a.lat, b.lng, b.lat)
    return float(dist)


def bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing from ``a`` towards ``b`` in degrees [0, 360).

    The bearing is meaningless for identical or antipodal points; callers
    guard against near-zero distances before steering on it.
    """
    az12, _, _ = _SPHERE.inv(a.lng, a.lat, b.lng, b.lat)
    return _normalize_bearing(float(az12))


def destination(origin: GeoPoint, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Project ``origin`` forward along ``bearing_deg`` for ``distance_m`` meters."""
    lng, lat, _ = _SPHERE.fwd(origin.lng, origin.lat, bearing_deg, distance_m)
    return GeoPoint(float(lat), float(lng))


@dataclass
class GeoPoint:
    """Geographic point in decimal degrees.

    Mutable so a vehicle can move its own position in place each tick without
    allocating; use :meth:`copy` whenever a point is handed to another owner.

    Attributes:
        lat (float): Latitude in degrees, positive north.
        lng (float): Longitude in degrees, positive east.
    """

    lat: float
    lng: float

    def distance_to(self, other: GeoPoint) -> float:
        """Great-circle distance to ``other`` in meters."""
        return distance(self, other)

    def heading_to(self, other: GeoPoint) -> float:
        """Initial bearing to ``other`` in degrees [0, 360)."""
        return bearing(self, other)

    def forward(self, bearing_deg: float, distance_m: float) -> GeoPoint:
        """Return the point reached by travelling along ``bearing_deg``.

        This method returns a new GeoPoint without modifying the current
        instance. For in-place modification, use :meth:`move_to` instead.
        """
        return destination(self, bearing_deg, distance_m)

    def move_to(self, bearing_deg: float, distance_m: float) -> None:
        """Move this point in place along ``bearing_deg`` for ``distance_m``."""
        moved = destination(self, bearing_deg, distance_m)
        self.lat = moved.lat
        self.lng = moved.lng

    def midpoint(self, other: GeoPoint) -> GeoPoint:
        """Arithmetic midpoint in degrees.

        Good enough for the short legs of a delivery route, and it is what
        the route generator has always produced for its middle waypoint.
        """
        return GeoPoint((self.lat + other.lat) / 2.0, (self.lng + other.lng) / 2.0)

    def copy(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)
