"""
State Stream

Single-writer / multi-reader broadcast of immutable CounterState snapshots.
The engine is the only writer; the presentation layer subscribes with a
callback or iterates updates() from an async task.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable, List, Optional

from ..core.state import CounterState

logger = logging.getLogger(__name__)

StateHandler = Callable[[CounterState], None]


class StateStream(ABC):
    """Abstract base class for state streams."""

    @property
    @abstractmethod
    def value(self) -> Optional[CounterState]:
        """Latest published snapshot."""
        pass

    @abstractmethod
    def publish(self, state: CounterState) -> None:
        """Publish a snapshot to all subscribers."""
        pass

    @abstractmethod
    def subscribe(self, handler: StateHandler) -> Callable[[], None]:
        """Subscribe a handler to every future snapshot; returns an unsubscribe callable."""
        pass

    @abstractmethod
    def updates(self) -> AsyncIterator[CounterState]:
        """Iterate the current snapshot followed by every later one."""
        pass


class InProcessStateStream(StateStream):
    """
    In-process state stream for single-instance applications.

    publish() is synchronous: it never awaits a subscriber, so a slow
    reader cannot delay the next state transition. Callback handlers run
    inline and in subscription order; async readers get their own queue.
    """

    def __init__(self, initial: Optional[CounterState] = None):
        self._value: Optional[CounterState] = initial
        self._version = 0 if initial is None else 1
        self._subscribers: List[StateHandler] = []
        self._queues: List[asyncio.Queue] = []

    @property
    def value(self) -> Optional[CounterState]:
        return self._value

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        return self._version

    def publish(self, state: CounterState) -> None:
        """
        Publish a snapshot to all subscribers.

        Args:
            state: New snapshot; replaces the current value
        """
        self._value = state
        self._version += 1

        for handler in list(self._subscribers):
            try:
                handler(state)
            except Exception:
                # One broken reader must not stop the others
                logger.exception(f"State handler {handler!r} raised while handling version {self._version}")

        for queue in list(self._queues):
            queue.put_nowait(state)

    def subscribe(self, handler: StateHandler) -> Callable[[], None]:
        """
        Subscribe a handler to receive all future snapshots.

        Args:
            handler: Function that accepts a CounterState
        """
        self._subscribers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: StateHandler) -> None:
        """
        Unsubscribe a handler from receiving snapshots.

        Args:
            handler: Handler function to remove
        """
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    async def updates(self) -> AsyncIterator[CounterState]:
        queue: asyncio.Queue = asyncio.Queue()
        if self._value is not None:
            queue.put_nowait(self._value)
        self._queues.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.remove(queue)

    def clear_subscribers(self) -> None:
        """Remove all callback subscribers."""
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        """Get the number of active subscribers, async readers included."""
        return len(self._subscribers) + len(self._queues)
