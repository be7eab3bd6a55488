"""Manual control input channel.

The input source publishes the current boolean state of eight logical
actions for the selected vehicle. The coordinator stores it on the vehicle
and the tick consumes it; input handlers never touch physics directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields

# Action names as published by the input source, mapped to field names.
ACTION_ALIASES = {
    "up": "up",
    "down": "down",
    "turnLeft": "turn_left",
    "turnRight": "turn_right",
    "forward": "forward",
    "backward": "backward",
    "left": "left",
    "right": "right",
}


@dataclass(frozen=True)
class ControlInput:
    up: bool = False
    down: bool = False
    turn_left: bool = False
    turn_right: bool = False
    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_actions(cls, actions: Mapping[str, bool] | Iterable[str]) -> ControlInput:
        """Build from ``{"turnLeft": True, ...}`` or an iterable of active names.

        Both the input-source spelling (``turnLeft``) and the attribute
        spelling (``turn_left``) are accepted.

        Raises:
            ValueError: For an action name that is not one of the eight axes.
        """
        if isinstance(actions, Mapping):
            active = [name for name, pressed in actions.items() if pressed]
        else:
            active = list(actions)

        valid = {f.name for f in fields(cls)}
        kwargs = {}
        for name in active:
            attr = ACTION_ALIASES.get(name, name)
            if attr not in valid:
                msg = f"Unknown control action: {name}"
                raise ValueError(msg)
            kwargs[attr] = True
        return cls(**kwargs)

    @property
    def any_active(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    @property
    def climb(self) -> int:
        return int(self.up) - int(self.down)

    @property
    def yaw(self) -> int:
        return int(self.turn_right) - int(self.turn_left)

    @property
    def surge(self) -> int:
        return int(self.forward) - int(self.backward)

    @property
    def sway(self) -> int:
        return int(self.right) - int(self.left)


NO_INPUT = ControlInput()
