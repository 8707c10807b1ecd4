"""
Debounced re-validation for real-time mode.

The engine only needs a cancelable timer: schedule(delay_ms, fn) -> handle and
cancel(handle). Hosts provide one through a Scheduler. Two are shipped:

- AsyncioScheduler - timers on an asyncio event loop (loop.call_later)
- ManualScheduler  - a virtual millisecond clock advanced by the host, for
                     hosts that drive their own frame loop and for tests

Each field owns one Debouncer, so at most one validation is pending per field.
A new change cancels the pending one (last write wins). A delay of 0 runs the
action immediately, without going through the scheduler at all.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Cancelable-timer capability supplied by the hosting environment."""

    @abstractmethod
    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> Any:
        """Arrange for fn to run once after delay_ms; return a handle for cancel()."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a scheduled call. Cancelling a fired or cancelled handle is a no-op."""

    def check_ready(self) -> None:
        """Raise RuntimeError if schedule() cannot arm timers right now."""


class AsyncioScheduler(Scheduler):
    """
    Runs timers on an asyncio event loop.

    Without an explicit loop the running loop is looked up when a timer is
    scheduled, which is always the case for change events dispatched from
    inside the loop. Debounced real-time validation must therefore be enabled
    from inside the loop too, or with loop= given.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise RuntimeError(
                "AsyncioScheduler needs a running event loop; pass loop= "
                "or use a different Scheduler"
            ) from e

    def check_ready(self) -> None:
        self._resolve_loop()

    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> asyncio.TimerHandle:
        return self._resolve_loop().call_later(delay_ms / 1000, fn)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class ManualScheduler(Scheduler):
    """
    Virtual clock. Nothing fires until advance() moves time forward.

    Timers due at the same instant fire in the order they were scheduled.
    """

    def __init__(self):
        self.now_ms = 0
        self._ids = itertools.count(1)
        self._timers: Dict[int, Tuple[int, Callable[[], None]]] = {}

    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._timers[handle] = (self.now_ms + delay_ms, fn)
        return handle

    def cancel(self, handle: int) -> None:
        self._timers.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def advance(self, ms: int) -> None:
        """Move the clock forward by ms, firing every timer that falls due."""
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards ({ms} ms)")
        target = self.now_ms + ms
        while True:
            due = [(when, handle) for handle, (when, _) in self._timers.items() if when <= target]
            if not due:
                break
            when, handle = min(due)
            _, fn = self._timers.pop(handle)
            self.now_ms = when
            fn()
        self.now_ms = target


class Debouncer:
    """Keeps at most one pending action, replacing it on every schedule()."""

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self._scheduler = scheduler
        self._handle: Any = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay_ms: int, action: Callable[[], None]) -> None:
        """
        Cancel any pending action and arm a new one.

        Args:
            delay_ms: Milliseconds to wait; 0 runs action synchronously
            action: Zero-argument callable

        Raises:
            ValueError: If delay_ms is negative
            RuntimeError: If delay_ms > 0 and no scheduler was supplied
        """
        if delay_ms < 0:
            raise ValueError(f"Debounce delay cannot be negative: {delay_ms}")
        self.cancel()

        if delay_ms == 0:
            action()
            return

        self.check_ready(delay_ms)

        def _fire():
            self._handle = None
            action()

        self._handle = self._scheduler.schedule(delay_ms, _fire)

    def check_ready(self, delay_ms: int) -> None:
        """
        Raise RuntimeError if a delay of delay_ms could not be armed now.

        A delay of 0 never needs a scheduler.
        """
        if delay_ms == 0:
            return
        if self._scheduler is None:
            raise RuntimeError(f"A {delay_ms} ms debounce needs a Scheduler")
        self._scheduler.check_ready()

    def cancel(self) -> None:
        """Drop the pending action, if any, without running it."""
        if self._handle is not None:
            logger.debug("Cancelling pending debounced action")
            self._scheduler.cancel(self._handle)
            self._handle = None
