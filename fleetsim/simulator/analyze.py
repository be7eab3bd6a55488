"""Post-run analysis of mission timing and battery use.

Both helpers take plain records collected during a run (mission records from
the coordinator, telemetry snapshots from a sink) and return per-vehicle
statistics as a pandas DataFrame. Plotting is optional.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict

import matplotlib.pyplot as plt
import pandas as pd

from fleetsim.fleet import MissionRecord
from fleetsim.vehicles import Telemetry


def missions_frame(records: Iterable[MissionRecord]) -> pd.DataFrame:
    """One row per task with derived delivery and total times (seconds)."""
    rows = []
    for record in records:
        row = asdict(record)
        row["delivery_time"] = record.delivery_time
        row["total_time"] = record.total_time
        rows.append(row)
    columns = [
        "task_id",
        "vehicle_id",
        "dispatched_at",
        "delivered_at",
        "completed_at",
        "distance",
        "delivery_time",
        "total_time",
    ]
    return pd.DataFrame(rows, columns=columns)


def analyze_mission_times(
    records: Iterable[MissionRecord],
    title: str = "Mission Time Analysis",
    plot: bool = False,
    output: str | None = None,
) -> pd.DataFrame | None:
    """Per-vehicle statistics of completed missions.

    Args:
        records: Mission records, e.g. ``FleetCoordinator.missions``.
        title: Title for the plot.
        plot: Draw a boxplot of total mission time per vehicle.
        output: Save the plot here instead of showing it.

    Returns:
        pandas.DataFrame: ``mu``/``sigma``/``n`` of total mission time and
        mean distance per vehicle, or None if no mission completed.
    """
    df = missions_frame(records)
    print("=== Mission Time Analysis ===")
    print(f"Missions recorded: {len(df)}")

    done = df.dropna(subset=["total_time"])
    print(f"Completed missions: {len(done)}")
    if done.empty:
        return None

    stats = done.groupby("vehicle_id").agg(
        mu=("total_time", "mean"),
        sigma=("total_time", "std"),  # ddof=1, NaN for a single mission
        n=("total_time", "count"),
        distance=("distance", "mean"),
        delivery_mu=("delivery_time", "mean"),
    )

    if plot:
        fig, ax = plt.subplots(1, 1, figsize=(10, 5))
        groups = [group["total_time"].to_numpy() for _, group in done.groupby("vehicle_id")]
        ax.boxplot(groups, tick_labels=list(stats.index), showmeans=True)
        ax.set_title(title)
        ax.set_xlabel("Vehicle")
        ax.set_ylabel("Mission time (s)")
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        if output is not None:
            fig.savefig(output)
            plt.close(fig)
        else:
            plt.show()

    return stats


def analyze_battery_consumption(telemetry: Iterable[Telemetry]) -> pd.DataFrame | None:
    """Battery used, flight time and distance per vehicle over a run.

    Returns:
        pandas.DataFrame: Indexed by vehicle id, or None without telemetry.
    """
    df = pd.DataFrame(
        [
            {
                "vehicle_id": t.vehicle_id,
                "timestamp": t.timestamp,
                "battery_percent": t.battery_percent,
                "flight_time": t.flight_time,
                "distance_traveled": t.distance_traveled,
            }
            for t in telemetry
        ]
    )
    print("=== Vehicle Battery Consumption Analysis ===")
    print(f"Telemetry samples: {len(df)}")
    if df.empty:
        return None

    df = df.sort_values("timestamp")
    grouped = df.groupby("vehicle_id")
    stats = pd.DataFrame(
        {
            "battery_used": grouped["battery_percent"].first() - grouped["battery_percent"].last(),
            "flight_time": grouped["flight_time"].max(),
            "distance": grouped["distance_traveled"].max(),
        }
    )
    stats["percent_per_km"] = stats["battery_used"] / (stats["distance"] / 1000.0)
    return stats
