"""
Repeating callbacks on the asyncio event loop.

A callback returns True to keep repeating and False to stop. Cancelling a
handle guarantees the callback is never invoked again.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)

TickCallback = Callable[[], bool]


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Ticker(Protocol):
    def call_every(self, period: float, callback: TickCallback) -> TickHandle: ...


class RepeatingCall:
    def __init__(self, loop: asyncio.AbstractEventLoop, period: float, callback: TickCallback):
        self._loop = loop
        self._period = period
        self._callback = callback
        self._cancelled = False
        # fire at start + n * period so late firings do not push later ones back
        self._next_at = loop.time() + period
        self._pending: Optional[asyncio.TimerHandle] = loop.call_at(self._next_at, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        self._pending = None
        if self._cancelled:
            return
        if not self._callback():
            self._cancelled = True
            return
        if self._cancelled:
            # callback cancelled us
            return
        self._next_at += self._period
        now = self._loop.time()
        if self._next_at < now:
            log.debug("Tick running %.3fs late", now - self._next_at)
        self._pending = self._loop.call_at(self._next_at, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class LoopTicker:
    """Ticker bound to an event loop (the running one when not given)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, period: float, callback: TickCallback) -> RepeatingCall:
        loop = self._loop or asyncio.get_running_loop()
        return RepeatingCall(loop, period, callback)
