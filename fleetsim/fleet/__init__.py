"""Fleet ownership, dispatch and the per-tick pipeline.

Exports:
    FleetCoordinator: Owns all vehicles, validates requests and runs ticks
    MissionRecord: Timing of one dispatched task
"""

from .coordinator import FleetCoordinator, MissionRecord

__all__ = ["FleetCoordinator", "MissionRecord"]
