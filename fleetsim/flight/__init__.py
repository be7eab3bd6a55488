"""Per-tick flight logic: mode rules, physics integration and manual control.

Exports:
    advance_flight_mode: Mode state machine, returns a Guidance
    integrate: Kinematic step towards a Guidance
    apply_manual_control: Manual input consumption and preemption
    FlightEvent, EventKind, EventLog: Notifications and their bounded log
"""

from .events import EventKind, EventListener, EventLog, FlightEvent
from .integrator import integrate
from .manual import apply_manual_control
from .modes import Guidance, advance_flight_mode

__all__ = [
    "advance_flight_mode",
    "Guidance",
    "integrate",
    "apply_manual_control",
    "FlightEvent",
    "EventKind",
    "EventListener",
    "EventLog",
]
