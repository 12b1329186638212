"""Wall-clock tickers driving the elapsed-time counter."""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol

TickCallback = Callable[[], None]


class Ticker(Protocol):
    """A repeating timer. ``clear()`` must be idempotent."""

    @property
    def active(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def clear(self) -> None: ...


class AsyncioTicker:
    """Repeating timer scheduled on the running asyncio event loop."""

    def __init__(self, interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s!r}")
        self._interval_s = interval_s
        self._handle: asyncio.TimerHandle | None = None
        self._callback: TickCallback | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: TickCallback) -> None:
        self.clear()
        self._callback = callback
        self._schedule(asyncio.get_running_loop())

    def clear(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = loop.call_later(self._interval_s, self._fire, loop)

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        callback = self._callback
        if callback is None:
            return
        # Reschedule first so the callback may clear() us.
        self._schedule(loop)
        callback()


class ManualTicker:
    """Deterministic ticker advanced explicitly (replays and tests)."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self.start_calls = 0
        self.clear_calls = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self.start_calls += 1
        self._callback = callback

    def clear(self) -> None:
        self.clear_calls += 1
        self._callback = None

    def advance(self, ticks: int = 1) -> int:
        """Fire up to ``ticks`` ticks; returns how many fired while active."""

        fired = 0
        for _ in range(max(0, ticks)):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired
