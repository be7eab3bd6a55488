"""Read-only telemetry snapshots published to external observers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from fleetsim.geo import GeoPoint
from fleetsim.mission import route_length

from .physics import FlightMode
from .vehicle import Vehicle, VehicleStatus


@dataclass(frozen=True)
class Telemetry:
    """Immutable snapshot of one vehicle, taken after its tick committed.

    Attributes:
        vehicle_id (str): Owning vehicle.
        timestamp (float): Wall-clock seconds of the tick.
        lat (float): Latitude in degrees.
        lng (float): Longitude in degrees.
        altitude (float): Meters above home ground.
        speed (float): Ground speed in m/s.
        vertical_speed (float): Climb rate in m/s.
        battery_percent (float): Remaining charge.
        heading (float): Degrees [0, 360).
        status (VehicleStatus): Lifecycle state.
        flight_mode (FlightMode): Autopilot mode.
        armed (bool): Motors enabled.
        battery_voltage (float): Derived pack voltage.
        roll (float): Cosmetic bank angle.
        pitch (float): Cosmetic pitch angle.
        active_waypoint_index (int): -1 or index into the route.
        distance_traveled (float): Horizontal meters flown.
        distance_remaining (float): Horizontal meters left on the route.
        flight_time (float): Simulated seconds armed.
    """

    vehicle_id: str
    timestamp: float
    lat: float
    lng: float
    altitude: float
    speed: float
    vertical_speed: float
    battery_percent: float
    heading: float
    status: VehicleStatus
    flight_mode: FlightMode = FlightMode.STABILIZE
    armed: bool = False
    battery_voltage: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    active_waypoint_index: int = -1
    distance_traveled: float = 0.0
    distance_remaining: float = 0.0
    flight_time: float = 0.0

    @property
    def speed_kmh(self) -> float:
        return self.speed * 3.6

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle, timestamp: float) -> Telemetry:
        p = vehicle.physics
        return cls(
            vehicle_id=vehicle.id,
            timestamp=timestamp,
            lat=p.position.lat,
            lng=p.position.lng,
            altitude=p.altitude,
            speed=p.ground_speed,
            vertical_speed=p.vertical_speed,
            battery_percent=p.battery.percentage,
            heading=p.heading,
            status=vehicle.status,
            flight_mode=p.flight_mode,
            armed=p.armed,
            battery_voltage=p.battery.voltage,
            roll=p.roll,
            pitch=p.pitch,
            active_waypoint_index=p.active_waypoint_index,
            distance_traveled=p.distance_traveled,
            distance_remaining=_distance_remaining(vehicle),
            flight_time=p.flight_time,
        )


def _distance_remaining(vehicle: Vehicle) -> float:
    route = vehicle.assigned_route
    if not route:
        return 0.0
    start = max(vehicle.physics.active_waypoint_index, 0)
    if start >= len(route):
        start = len(route) - 1
    return route_length(vehicle.physics.position, route[start:])


class TelemetrySink(Protocol):
    """Receives one snapshot per vehicle per tick; throttling is the sink's job."""

    def __call__(self, telemetry: Telemetry) -> None: ...
