"""Tick driver for a fleet coordinator.

The driver owns nothing but time: it reads a clock, calls
``FleetCoordinator.tick`` and optionally renders the fleet with a rich live
table. It can be stopped from another thread between ticks; a tick in
progress always completes for every vehicle.

Clocks:
    • Wall clock (``time.monotonic``): ticks are paced by sleeping until the
      next update interval, the coordinator clamps late ticks itself
    • :class:`SteppedClock`: deterministic, advances by a fixed step after each
      tick and never sleeps, for tests and accelerated batch runs

Example:
    >>> from fleetsim.fleet import FleetCoordinator
    >>> from fleetsim.simulator import FleetSimulator, SteppedClock
    >>> fleet = FleetCoordinator.create()
    >>> sim = FleetSimulator(fleet, clock=SteppedClock(0.1))
    >>> sim.run(max_ticks=10)
    10
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fleetsim.fleet import FleetCoordinator
from fleetsim.vehicles import VehicleStatus

CONSOLE = Console()
DEFAULT_UPDATE_INTERVAL = 0.1  # seconds between ticks on the wall clock

logger = logging.getLogger(__name__)


class SteppedClock:
    """Deterministic clock advanced explicitly by the driver."""

    def __init__(self, step: float = DEFAULT_UPDATE_INTERVAL, start: float = 0.0):
        if step <= 0:
            msg = f"Invalid step: {step} (must be positive)"
            raise ValueError(msg)
        self.step = step
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self) -> float:
        self.now += self.step
        return self.now


class FleetSimulator:
    """Cancellable tick loop with an optional live fleet view.

    Attributes:
        fleet (FleetCoordinator): Coordinator being driven.
        clock (Callable[[], float]): Source of tick timestamps in seconds.
        update_interval (float): Wall-clock pacing between ticks.
        display (bool): Render a rich live table while running.
        ticks (int): Ticks executed so far.
        shutdown_event (threading.Event): Set by :meth:`stop`.
        pause_event (threading.Event): Cleared while paused.
    """

    def __init__(
        self,
        fleet: FleetCoordinator,
        clock: Callable[[], float] | None = None,
        update_interval: float = DEFAULT_UPDATE_INTERVAL,
        display: bool = False,
        console: Console = CONSOLE,
    ):
        self.fleet = fleet
        self.clock = clock if clock is not None else time.monotonic
        self.update_interval = update_interval
        self.display = display
        self.console = console
        self.ticks = 0
        self.shutdown_event = threading.Event()
        self.pause_event = threading.Event()
        self.pause_event.set()

    @property
    def stepped(self) -> bool:
        return isinstance(self.clock, SteppedClock)

    def stop(self):
        """Ask the loop to exit after the tick in progress."""
        self.shutdown_event.set()
        self.pause_event.set()

    def pause(self):
        self.pause_event.clear()

    def resume(self):
        self.pause_event.set()

    def run(
        self,
        duration: float | None = None,
        until: Callable[[FleetCoordinator], bool] | None = None,
        max_ticks: int | None = None,
    ) -> int:
        """Tick until stopped, ``duration`` clock seconds elapse, ``until``
        holds or ``max_ticks`` ticks ran.

        KeyboardInterrupt stops the loop cleanly between ticks.

        Returns:
            int: Number of ticks executed by this call.
        """
        self.shutdown_event.clear()
        start_ticks = self.ticks
        start = self.clock()

        def finished() -> bool:
            if self.shutdown_event.is_set():
                return True
            if max_ticks is not None and self.ticks - start_ticks >= max_ticks:
                return True
            if duration is not None and self.clock() - start >= duration:
                return True
            return until is not None and until(self.fleet)

        try:
            if self.display:
                with Live(self.render(), console=self.console, auto_refresh=False) as live:
                    while not finished():
                        self._step()
                        live.update(self.render(), refresh=True)
            else:
                while not finished():
                    self._step()
        except KeyboardInterrupt:
            logger.info("Simulation interrupted after %d ticks", self.ticks)
            self.shutdown_event.set()

        return self.ticks - start_ticks

    def _step(self):
        self.pause_event.wait()
        if self.shutdown_event.is_set():
            return

        started = time.monotonic()
        self.fleet.tick(self.clock())
        self.ticks += 1

        if self.stepped:
            self.clock.advance()
            return
        remaining = self.update_interval - (time.monotonic() - started)
        if remaining > 0:
            self.shutdown_event.wait(remaining)

    def render(self) -> Panel:
        """Fleet table plus status counts and the newest events."""
        table = Table(expand=True)
        for column in ("Vehicle", "Status", "Mode", "Armed", "Lat", "Lng", "Alt (m)", "Speed (m/s)", "Battery", "WP"):
            table.add_column(column)

        for vehicle in self.fleet.vehicles:
            p = vehicle.physics
            table.add_row(
                Text(vehicle.name, style=vehicle.color),
                vehicle.status.value,
                p.flight_mode.value,
                "[red]ARMED[/red]" if p.armed else "safe",
                f"{p.position.lat:.5f}",
                f"{p.position.lng:.5f}",
                f"{p.altitude:.1f}",
                f"{p.ground_speed:.1f}",
                f"{p.battery.percentage:.1f}%",
                str(p.active_waypoint_index),
            )

        counts = self.fleet.status_counts()
        summary = Table.grid(padding=(0, 2))
        for status in VehicleStatus:
            summary.add_row(f"[b]Vehicle - {status.name}[/b]: ", str(counts[status]))

        events = Text("\n".join(str(e) for e in self.fleet.events.latest(5)))
        return Panel(Group(table, summary, events), title=f"Fleet • tick {self.ticks}", padding=(1, 2))
