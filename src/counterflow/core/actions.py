"""
Action Decorator System

The closed set of user actions the engine accepts, plus the @action
decorator that binds each one to an engine method. The decorator only
stores metadata; the engine and the web adapter both read it back through
discover_actions().
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional


class CounterAction(str, Enum):
    """User-originated actions."""
    INCREMENT = "increment"
    DECREMENT = "decrement"
    CLEAR = "clear"
    CANCEL_CLEAR = "cancel_clear"
    MESSAGE_CONSUMED = "message_consumed"


@dataclass
class ActionInfo:
    """Metadata about an action handler stored by the @action decorator."""
    kind: CounterAction
    name: str
    description: str
    method: str
    path: Optional[str] = None

    @property
    def route(self) -> str:
        return self.path or f"/counter/{self.kind.value}"


def action(
    kind: CounterAction,
    *,
    description: str = "",
    method: str = "POST",
    path: Optional[str] = None,
):
    """
    Mark an engine method as the handler for ``kind``.

    Args:
        kind: Action this method handles
        description: Human readable summary, logged when the route is registered
        method: HTTP method the web adapter registers for it
        path: Custom route path (defaults to /counter/<action>)

    Returns:
        Decorated function with _action_info attribute
    """
    def decorator(func):
        func._action_info = ActionInfo(
            kind=CounterAction(kind),
            name=func.__name__,
            description=description or (inspect.getdoc(func) or "").split("\n")[0],
            method=method.upper(),
            path=path,
        )
        return func

    return decorator


def discover_actions(owner: type) -> Dict[CounterAction, ActionInfo]:
    """Discover all @action decorated methods on a class."""
    actions = {}
    for name in dir(owner):
        method = getattr(owner, name)
        info: Optional[ActionInfo] = getattr(method, "_action_info", None)
        if info is None:
            continue
        if info.kind in actions:
            raise TypeError(
                f"{owner.__name__} binds {info.kind.value!r} twice "
                f"({actions[info.kind].name} and {name})"
            )
        actions[info.kind] = info
    return actions


def handler_for(owner: object, info: ActionInfo) -> Callable:
    """Return the bound handler ``info`` describes on ``owner``."""
    return getattr(owner, info.name)
