"""Battery model for vehicle energy simulation.

The flight core tracks charge as a remaining percentage that drains at a
mode-dependent rate; pack voltage is derived from it with a simple affine
curve. Recharge is not modelled: a completed mission resets the vehicle's
lifecycle, not its battery.
"""

from __future__ import annotations

EMPTY_VOLTAGE = 22.0  # V at 0 %
VOLTAGE_SPAN = 3.2  # V between empty and full (6S pack, 25.2 V full)


class BatteryStatus:
    """Manages the remaining charge of a vehicle battery.

    Attributes:
        _percent (float): Remaining charge in percent, always within [0, 100].
    """

    _percent: float

    def __init__(self, percent: float = 100.0):
        """Initialize with ``percent`` remaining charge.

        Raises:
            ValueError: If ``percent`` is outside [0, 100].
        """
        if percent < 0.0 or percent > 100.0:
            msg = f"Invalid battery percentage: {percent}"
            raise ValueError(msg)
        self._percent = float(percent)

    @property
    def percentage(self) -> float:
        """Remaining charge from 0.0 to 100.0."""
        return self._percent

    @property
    def voltage(self) -> float:
        """Pack voltage derived from the remaining charge."""
        return EMPTY_VOLTAGE + (self._percent / 100.0) * VOLTAGE_SPAN

    def drain(self, rate_per_second: float, dt: float) -> float:
        """Consume ``rate_per_second`` percent for ``dt`` seconds.

        The result is clamped at zero; draining never raises.

        Returns:
            float: Percent actually consumed.
        """
        if rate_per_second <= 0.0 or dt <= 0.0:
            return 0.0
        before = self._percent
        self._percent = min(100.0, max(0.0, before - rate_per_second * dt))
        return before - self._percent

    def is_empty(self) -> bool:
        """Check if the battery is completely discharged."""
        return self._percent <= 0.0

    def copy(self) -> BatteryStatus:
        return BatteryStatus(self._percent)

    def __repr__(self) -> str:
        return f"BatteryStatus({self._percent:.2f}%, {self.voltage:.2f} V)"
