"""Energy management for fleet vehicles.

Exports:
    BatteryStatus: Percent-based battery with derived pack voltage

Example:
    >>> from fleetsim.energy import BatteryStatus
    >>> battery = BatteryStatus()
    >>> battery.drain(0.05, 10.0)
    0.5
    >>> print(f"{battery.percentage:.1f}% at {battery.voltage:.2f} V")
    99.5% at 25.18 V
"""

from .battery import BatteryStatus

__all__ = ["BatteryStatus"]
