"""State machine implementation for managing validated state transitions.

This module provides a finite state machine implementation that enforces transition rules and can
execute associated actions when transitions occur. The fleet uses it for the coarse vehicle
lifecycle (idle → dispatched → running → completed → returning → idle) so that a skipped or
duplicated lifecycle step surfaces as an error instead of a silently stuck vehicle.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

State = TypeVar("State", bound=Enum)
"""Type variable for state enumerations that extend Enum."""

ActionFn = Callable[..., Any]
"""Type alias for action effect functions."""

StateGraph = dict[Enum, Iterable["Action"]]
"""Mapping of each state to the actions (outgoing transitions) allowed from it."""


@dataclass(frozen=True)
class Action:
    """Represents a state transition action with an optional effect function.

    An Action defines a transition to a specific state and can optionally
    execute a side effect when the transition occurs.

    Attributes:
        state: The target state this action transitions to.
        effect: Optional function to execute when this action is performed.
    """

    state: Enum
    effect: ActionFn | None = None

    def __call__(self, *args, **kwargs) -> Any:
        """Execute the action's effect function if it exists.

        Args:
            *args: Arguments to pass to the effect function.
            **kwargs: Keyword arguments to pass to the effect function.

        Returns:
            The result of the effect function, or None if no effect is defined.
        """
        if self.effect:
            return self.effect(*args, **kwargs)
        return None


class StateMachine:
    """A finite state machine that manages state transitions with validation.

    Each transition can have an associated action that is executed after the
    state has been updated, so effects observe the new state.

    Attributes:
        _state: The current state of the state machine.
        _allowed: Dictionary mapping states to their allowed transitions.
    """

    _allowed: StateGraph
    _state: Enum

    def __init__(self, initial_state: Enum, nodes_graph: StateGraph):
        """Initialize the state machine with an initial state and transition rules.

        Args:
            initial_state: The starting state for the state machine.
            nodes_graph: Dictionary mapping each state to its allowed actions/transitions.
        """
        self._state = initial_state
        self._allowed = nodes_graph

    def request_transition(self, next_state: Enum, *args, **kwargs) -> Any:
        """Request a state transition to the specified next state.

        Validates that the transition is allowed according to the state machine
        rules, updates the current state, then executes any associated effect.

        Args:
            next_state: The target state to transition to.

        Returns:
            The result of executing the transition action's effect function,
            or None if the action has no effect.

        Raises:
            ValueError: If the transition from current state to next_state
                       is not allowed by the state machine rules.
        """
        next_action = self._validate_transition(self._state, next_state)
        self._state = next_action.state
        return next_action(*args, **kwargs)

    def can_transition(self, next_state: Enum) -> bool:
        """Return True if ``next_state`` is reachable from the current state."""
        return any(a.state == next_state for a in self._allowed.get(self._state, ()))

    @property
    def current(self) -> Enum:
        """Get the current state of the state machine."""
        return self._state

    def get_state_list(self) -> list[Enum]:
        """Return every state that appears in the transition graph."""
        states = list(self._allowed)
        for actions in self._allowed.values():
            for action in actions:
                if action.state not in states:
                    states.append(action.state)
        return states

    def _validate_transition(self, frm: Enum, to: Enum) -> Action:
        """Validate that a state transition is allowed by the state machine rules.

        Args:
            frm: The current state to transition from.
            to: The target state to transition to.

        Returns:
            The Action object that handles the transition from frm to to.

        Raises:
            ValueError: If no valid transition exists from frm to to.
        """
        for action in self._allowed.get(frm, ()):
            if action.state == to:
                return action

        msg = f"Illegal transition {frm.name} → {to.name}"
        raise ValueError(msg)
