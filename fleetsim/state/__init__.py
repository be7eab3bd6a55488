"""State management module for fleet simulation.

This module provides state machine functionality for managing the vehicle
lifecycle and other stateful components in the fleet simulation.

Exports:
    StateMachine: Finite state machine with transition validation
    State: Type variable for state enumerations
    Action: State transition action with optional effects
    StateGraph: Type alias for state transition graph definitions
"""

from .state_machine import Action, ActionFn, State, StateGraph, StateMachine

__all__ = ["StateMachine", "State", "Action", "StateGraph", "ActionFn"]
