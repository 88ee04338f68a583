"""
Counter State

Immutable snapshot of everything the presentation layer renders.
One snapshot is built per mutation; the engine only ever replaces it.
"""

from typing import ClassVar, Optional

from pydantic import ConfigDict

from .signals import SignalModel

MIN_LIMIT = 0
MAX_LIMIT = 10


def clamp(value: int, min_limit: int = MIN_LIMIT, max_limit: int = MAX_LIMIT) -> int:
    """Saturate ``value`` into ``[min_limit, max_limit]``."""
    if value < min_limit:
        return min_limit
    if value > max_limit:
        return max_limit
    return value


class CounterState(SignalModel):
    """Published counter snapshot."""

    model_config = ConfigDict(frozen=True)
    namespace: ClassVar[str] = "counter"

    count: int = MIN_LIMIT
    is_increment_enabled: bool = True
    is_decrement_enabled: bool = False
    is_clear_pending: bool = False
    transient_message: Optional[str] = None

    @classmethod
    def build(
        cls,
        count: int,
        *,
        min_limit: int = MIN_LIMIT,
        max_limit: int = MAX_LIMIT,
        is_clear_pending: bool = False,
        transient_message: Optional[str] = None,
    ) -> "CounterState":
        """
        Build a snapshot with ``count`` clamped and the enablement flags derived.

        This is the only place the flags are computed, so a published state
        can never carry flags that disagree with its count.
        """
        clamped = clamp(count, min_limit, max_limit)
        return cls(
            count=clamped,
            is_increment_enabled=clamped < max_limit,
            is_decrement_enabled=clamped > min_limit,
            is_clear_pending=is_clear_pending,
            transient_message=transient_message,
        )

    def evolve(self, **changes) -> "CounterState":
        """Copy with non-count fields replaced (pending flag, message)."""
        return self.model_copy(update=changes)
