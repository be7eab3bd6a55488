"""Vehicle models for fleet simulation.

This package provides the per-vehicle state the flight core operates on:

Exports:
    Vehicle: Fleet slot with mission lifecycle and owned physics
    VehicleStatus: Lifecycle enumeration (idle … returning)
    PhysicsState: Kinematic/autopilot record owned by one vehicle
    FlightMode: Autopilot modes (STABILIZE, LOITER, AUTO, GUIDED, RTL, LAND)
    ControlInput: Manual axis state consumed once per tick
    Telemetry: Immutable snapshot published after each tick
"""

from .control import NO_INPUT, ControlInput
from .physics import NAVIGATING_MODES, PREEMPTIBLE_MODES, FlightMode, PhysicsState
from .telemetry import Telemetry, TelemetrySink
from .vehicle import Vehicle, VehicleStatus

__all__ = [
    "Vehicle",
    "VehicleStatus",
    "PhysicsState",
    "FlightMode",
    "NAVIGATING_MODES",
    "PREEMPTIBLE_MODES",
    "ControlInput",
    "NO_INPUT",
    "Telemetry",
    "TelemetrySink",
]
