"""Demo dispatch: ``python -m fleetsim``.

Dispatches one delivery per destination from the central hub, arms the
assigned vehicles, switches them to AUTO and runs the fleet until every
vehicle is home again (or the time limit is hit).

Examples:
    $ python -m fleetsim
    $ python -m fleetsim --destination PHC-Village-B --destination 18.53,73.87
    $ python -m fleetsim --stepped --no-display --speed 8
"""

import argparse
import logging

from rich.logging import RichHandler

from fleetsim.config import DEFAULT_FLEET_SIZE, REMOTE_LOCATIONS, SimConfig
from fleetsim.fleet import FleetCoordinator
from fleetsim.geo import GeoPoint
from fleetsim.mission import DeliveryRequest
from fleetsim.simulator import FleetSimulator, SteppedClock, analyze_mission_times
from fleetsim.simulator.simulator import CONSOLE
from fleetsim.vehicles import FlightMode

logger = logging.getLogger("fleetsim")


def parse_destination(value: str) -> tuple[str, GeoPoint]:
    """Accept a named remote location or ``lat,lng``."""
    if value in REMOTE_LOCATIONS:
        return value, REMOTE_LOCATIONS[value]
    try:
        lat, lng = (float(part) for part in value.split(","))
    except ValueError:
        known = ", ".join(REMOTE_LOCATIONS)
        msg = f"expected lat,lng or one of: {known}"
        raise argparse.ArgumentTypeError(msg) from None
    return value, GeoPoint(lat, lng)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fleetsim", description="Fleet delivery flight simulation demo")
    parser.add_argument("--vehicles", type=int, default=DEFAULT_FLEET_SIZE, help="fleet size")
    parser.add_argument(
        "--destination",
        action="append",
        type=parse_destination,
        help="named location or lat,lng (repeatable, default: every remote location)",
    )
    parser.add_argument("--speed", type=float, default=SimConfig.sim_speed_multiplier, help="sim speed multiplier")
    parser.add_argument("--duration", type=float, default=None, help="stop after this many clock seconds")
    parser.add_argument("--stepped", action="store_true", help="deterministic clock, no sleeping")
    parser.add_argument("--no-display", action="store_true", help="disable the live fleet table")
    parser.add_argument("-v", "--verbose", action="store_true", help="log INFO flight events")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=CONSOLE, rich_tracebacks=True)],
    )

    fleet = FleetCoordinator.create(count=args.vehicles, config=SimConfig(sim_speed_multiplier=args.speed))
    destinations = args.destination or list(REMOTE_LOCATIONS.items())

    for i, (name, point) in enumerate(destinations, start=1):
        vehicle = fleet.dispatch(DeliveryRequest(f"TASK-{i:03d}", point))
        if vehicle is None:
            logger.warning("No vehicle left for %s", name)
            continue
        fleet.arm(vehicle.id)
        fleet.set_mode(vehicle.id, FlightMode.AUTO)
        logger.info("%s dispatched to %s", vehicle.name, name)

    simulator = FleetSimulator(
        fleet,
        clock=SteppedClock() if args.stepped else None,
        display=not args.no_display,
    )
    ticks = simulator.run(duration=args.duration, until=lambda f: f.all_idle)
    CONSOLE.print(f"[green]Simulation finished after {ticks} ticks")

    stats = analyze_mission_times(fleet.missions)
    if stats is not None:
        CONSOLE.print(stats.to_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
