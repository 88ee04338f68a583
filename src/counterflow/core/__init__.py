"""
counterflow Core Module

Domain layer: the state snapshot, the closed action set and the engine
that applies actions to state.
"""

from .state import CounterState, MIN_LIMIT, MAX_LIMIT, clamp
from .signals import SignalDescriptor, SignalModel
from .actions import CounterAction, ActionInfo, action, discover_actions
from .errors import CounterError, StaleTimerFire, EngineClosedError
from .engine import CounterEngine, PendingReset

__all__ = [
    "CounterState",
    "MIN_LIMIT",
    "MAX_LIMIT",
    "clamp",
    "SignalDescriptor",
    "SignalModel",
    "CounterAction",
    "ActionInfo",
    "action",
    "discover_actions",
    "CounterError",
    "StaleTimerFire",
    "EngineClosedError",
    "CounterEngine",
    "PendingReset",
]
