"""Timers for the game loop

Periodic tickers and cancellable one-shot tasks on top of a minimal
``call_later`` scheduler. Two schedulers are provided: one bound to the
asyncio event loop the web server runs on, and a manual virtual clock
for tests and headless simulation.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TaskHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs callbacks after a delay, one at a time."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio loop (the running loop when none is given)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self, callback: Callback) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Virtual clock; callbacks only run inside advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> TaskHandle:
        handle = _ManualHandle(callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, handle = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if not handle.cancelled:
                handle.cancelled = True
                handle.callback()
        self.now = target


class Ticker:
    """Fixed-interval repeating task."""

    def __init__(self, scheduler: Scheduler, name: str) -> None:
        self.name = name
        self.interval: Optional[float] = None
        self._scheduler = scheduler
        self._callback: Optional[Callback] = None
        self._handle: Optional[TaskHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, interval: float, callback: Callback) -> None:
        """(Re)start the ticker; the first tick fires after one interval."""
        self.stop()
        self.interval = interval
        self._callback = callback
        self._schedule()

    def stop(self) -> None:
        """Idempotent, and safe before the first start()."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        # re-arm first so the callback is free to stop or restart us
        self._schedule()
        self._callback()


class Deferred:
    """Cancellable one-shot task; scheduling again replaces the pending one."""

    def __init__(self, scheduler: Scheduler, name: str) -> None:
        self.name = name
        self._scheduler = scheduler
        self._handle: Optional[TaskHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callback) -> None:
        self.cancel()

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(delay, fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class TickerSet:
    """Named tickers that are started and stopped together."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._tickers: Dict[str, Ticker] = {}

    def start(self, name: str, interval: float, callback: Callback) -> None:
        ticker = self._tickers.get(name)
        if ticker is None:
            ticker = self._tickers[name] = Ticker(self._scheduler, name)
        ticker.start(interval, callback)
        logger.debug("ticker %s started (%.3fs)", name, interval)

    def stop_all(self) -> None:
        for ticker in self._tickers.values():
            ticker.stop()

    def running(self) -> list[str]:
        return sorted(name for name, ticker in self._tickers.items() if ticker.running)

    def interval(self, name: str) -> Optional[float]:
        ticker = self._tickers.get(name)
        return ticker.interval if ticker and ticker.running else None
