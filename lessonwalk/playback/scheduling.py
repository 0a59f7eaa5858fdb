"""One-shot timer scheduling with explicit cancellation tokens.

Every scheduled callback is guarded by a :class:`CancellationToken`. Cancelling
a :class:`ScheduledCall` invalidates its token before the backend timer is
touched, so a timer that has already been dequeued by the event loop still
cannot run its callback afterwards.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ScheduledCall:
    """Handle for a pending one-shot callback."""

    def __init__(self, delay_ms: float, callback: Callback) -> None:
        self.delay_ms = delay_ms
        self.token = CancellationToken()
        self._callback = callback
        self._backend_cancel: Optional[Callback] = None
        self._fired = False

    @property
    def pending(self) -> bool:
        return not self._fired and not self.token.cancelled

    def cancel(self) -> None:
        if self.token.cancelled:
            return
        self.token.cancel()
        if self._backend_cancel is not None:
            self._backend_cancel()
            self._backend_cancel = None

    def fire(self) -> None:
        """Run the callback once, unless the token was invalidated."""
        if not self.pending:
            return
        self._fired = True
        self._backend_cancel = None
        self._callback()

    def _bind(self, backend_cancel: Callback) -> None:
        self._backend_cancel = backend_cancel


class Scheduler:
    """Interface for one-shot timers measured in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Timers on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(delay_ms, callback)
        handle = self.loop.call_later(max(0.0, delay_ms) / 1000.0, call.fire)
        call._bind(handle.cancel)
        return call


class VirtualScheduler(Scheduler):
    """Deterministic scheduler driven by a virtual millisecond clock.

    Nothing fires until :meth:`advance` or :meth:`run_until_idle` is called.
    Due timers fire in due-time order, ties in the order they were scheduled.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._queue if call.pending)

    def next_due_ms(self) -> Optional[float]:
        self._drop_dead()
        if not self._queue:
            return None
        return self._queue[0][0]

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(delay_ms, callback)
        due = self._now + max(0.0, delay_ms)
        heapq.heappush(self._queue, (due, next(self._counter), call))
        return call

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward, firing everything that comes due."""
        if delta_ms < 0:
            raise ValueError("Cannot move the virtual clock backwards")
        target = self._now + delta_ms
        fired = 0
        while True:
            due = self.next_due_ms()
            if due is None or due > target:
                break
            _, _, call = heapq.heappop(self._queue)
            self._now = due
            call.fire()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_calls: int = 10_000) -> int:
        """Fire timers until none are pending; returns how many fired."""
        fired = 0
        while fired < max_calls:
            due = self.next_due_ms()
            if due is None:
                return fired
            _, _, call = heapq.heappop(self._queue)
            self._now = due
            call.fire()
            fired += 1
        logger.warning("Virtual scheduler stopped after %d calls", max_calls)
        return fired

    def _drop_dead(self) -> None:
        while self._queue and not self._queue[0][2].pending:
            heapq.heappop(self._queue)
