"""Error taxonomy of the flight core.

Operator requests never raise for flight conditions: they return a
:class:`CommandResult` and the coordinator records a flight event with the
matching :class:`Severity`. Exceptions are reserved for caller bugs such as an
unknown vehicle id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    """Event severity, ordered and mapped onto :mod:`logging` levels."""

    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class UnknownVehicleError(KeyError):
    """Raised when an operation names a vehicle the fleet does not own."""

    def __init__(self, vehicle_id: str):
        super().__init__(vehicle_id)
        self.vehicle_id = vehicle_id

    def __str__(self) -> str:
        return f"Unknown vehicle id: {self.vehicle_id}"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an operator request (arm, disarm, mode change, assignment).

    Truthy when accepted, so callers can write ``if fleet.arm(vid): ...``.
    """

    accepted: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def ok(cls) -> CommandResult:
        return cls(True)

    @classmethod
    def rejected(cls, reason: str) -> CommandResult:
        return cls(False, reason)
