"""
Counter Engine

Owns the counter state, the delayed-cancellable clear and the audit
hand-off. Every action and every deferred reset runs under one asyncio
lock, so snapshots are published in exactly the order actions arrived.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING, Union

from ..config import EngineConfig
from ..app.bus import InProcessStateStream, StateStream
from .actions import ActionInfo, CounterAction, action, discover_actions, handler_for
from .errors import EngineClosedError, StaleTimerFire
from .state import CounterState, clamp

if TYPE_CHECKING:
    from ..app.audit import AuditRecorder

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PendingReset:
    """The single in-flight deferred reset. Compared by identity."""
    generation: int
    task: Optional[asyncio.Task] = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True
        if self.task is not None and not self.task.done():
            self.task.cancel()


class CounterEngine:
    """
    Counter view-model.

    Actions go in through submit(); snapshots come out through ``stream``.
    A Clear publishes a pending state immediately and resets the count
    after ``config.reset_delay`` seconds unless something supersedes it
    first. Increment, Decrement, Clear and CancelClear all cancel the
    outstanding reset, so at most one is ever alive.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        stream: Optional[StateStream] = None,
        audit: Optional["AuditRecorder"] = None,
        initial_count: int = 0,
    ):
        self.config = config or EngineConfig()
        self.stream = stream or InProcessStateStream()
        self.audit = audit
        self._lock = asyncio.Lock()
        self._pending: Optional[PendingReset] = None
        self._generation = 0
        self._closed = False
        self._actions: Dict[CounterAction, ActionInfo] = discover_actions(type(self))

        self.stream.publish(self._build(initial_count))

    # ------------------------------------------------------------------ #
    # Public surface

    @property
    def state(self) -> CounterState:
        """Current snapshot."""
        return self.stream.value

    @property
    def is_clear_pending(self) -> bool:
        return self._pending is not None

    @property
    def actions(self) -> Dict[CounterAction, ActionInfo]:
        """Action table, keyed by action kind."""
        return dict(self._actions)

    async def submit(self, kind: Union[CounterAction, str]) -> CounterState:
        """
        Apply one action and return the resulting snapshot.

        Args:
            kind: A CounterAction or its string value

        Raises:
            ValueError: ``kind`` is not a known action
            EngineClosedError: the engine has been closed
        """
        kind = CounterAction(kind)
        handler = handler_for(self, self._actions[kind])
        async with self._lock:
            if self._closed:
                raise EngineClosedError(f"Cannot {kind.value}: engine is closed")
            handler()
            return self.state

    async def message_consumed(self) -> CounterState:
        """Acknowledge that the presentation layer displayed the transient message."""
        return await self.submit(CounterAction.MESSAGE_CONSUMED)

    async def aclose(self) -> None:
        """Cancel any pending reset and stop accepting actions."""
        async with self._lock:
            self._closed = True
            pending = self._pending
            if self._cancel_pending():
                self._publish(self.state.evolve(is_clear_pending=False, transient_message=None))
        if pending is not None and pending.task is not None:
            await asyncio.gather(pending.task, return_exceptions=True)
        if self.audit is not None:
            await self.audit.aclose()

    # ------------------------------------------------------------------ #
    # Action handlers (always called with the lock held)

    @action(CounterAction.INCREMENT)
    def increment(self) -> None:
        """Add one, saturating at max_limit."""
        self._cancel_pending()
        self._publish(self._build(self.state.count + 1))
        if self.audit is not None:
            self.audit.record(self.config.audit_message)

    @action(CounterAction.DECREMENT)
    def decrement(self) -> None:
        """Subtract one, saturating at min_limit."""
        self._cancel_pending()
        self._publish(self._build(self.state.count - 1))

    @action(CounterAction.CLEAR)
    def clear(self) -> None:
        """Schedule a reset to zero after the reset delay."""
        self._cancel_pending()
        self._publish(self.state.evolve(
            is_clear_pending=True,
            transient_message=self.config.scheduled_message(),
        ))
        self._schedule_reset()

    @action(CounterAction.CANCEL_CLEAR)
    def cancel_clear(self) -> None:
        """Abort the scheduled reset, keeping the current count."""
        if self._cancel_pending():
            self._publish(self.state.evolve(
                is_clear_pending=False,
                transient_message=self.config.reset_cancelled_message,
            ))
        elif self.state.transient_message is not None:
            self._publish(self.state.evolve(transient_message=None))

    @action(CounterAction.MESSAGE_CONSUMED)
    def consume_message(self) -> None:
        """Drop the one-shot message once it has been shown."""
        if self.state.transient_message is not None:
            self._publish(self.state.evolve(transient_message=None))

    # ------------------------------------------------------------------ #
    # Internals

    def _build(self, count: int, **changes) -> CounterState:
        return CounterState.build(
            count,
            min_limit=self.config.min_limit,
            max_limit=self.config.max_limit,
            **changes,
        )

    def _publish(self, state: CounterState) -> None:
        self.stream.publish(state)

    def _cancel_pending(self) -> bool:
        """Cancel the outstanding reset. Returns True if there was one."""
        pending, self._pending = self._pending, None
        if pending is None:
            return False
        pending.cancel()
        logger.debug(f"Deferred reset #{pending.generation} cancelled")
        return True

    def _schedule_reset(self) -> None:
        self._generation += 1
        pending = PendingReset(generation=self._generation)
        pending.task = asyncio.get_running_loop().create_task(
            self._run_reset(pending), name=f"counterflow-reset-{pending.generation}"
        )
        self._pending = pending
        logger.debug(f"Deferred reset #{pending.generation} scheduled in {self.config.reset_delay}s")

    async def _run_reset(self, pending: PendingReset) -> None:
        try:
            await asyncio.sleep(self.config.reset_delay)
            async with self._lock:
                self._fire(pending)
        except StaleTimerFire as e:
            logger.debug(str(e))
        except asyncio.CancelledError:
            logger.debug(f"Deferred reset #{pending.generation} stopped before firing")
            raise

    def _fire(self, pending: PendingReset) -> None:
        # Re-checked under the lock: a cancel that won the race leaves nothing to do
        if pending.cancelled or self._pending is not pending:
            raise StaleTimerFire(pending.generation)
        self._pending = None
        self._publish(self._build(clamp(0, self.config.min_limit, self.config.max_limit)))
        logger.debug(f"Deferred reset #{pending.generation} fired")
