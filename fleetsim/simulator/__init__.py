"""Simulation driver and post-run analysis.

Exports:
    FleetSimulator: Cancellable tick loop with an optional rich live view
    SteppedClock: Deterministic clock for tests and batch runs
    analyze_mission_times, analyze_battery_consumption: pandas summaries
"""

from .analyze import analyze_battery_consumption, analyze_mission_times, missions_frame
from .simulator import FleetSimulator, SteppedClock

__all__ = [
    "FleetSimulator",
    "SteppedClock",
    "analyze_mission_times",
    "analyze_battery_consumption",
    "missions_frame",
]
