"""Run session state machine.

States: idle -> running <-> paused -> (stop) -> stopped -> (save|discard) -> idle.

All mutation happens on one event loop. Location fixes and timer ticks are
applied by small reducers bound to the "epoch" in which their subscription or
timer was opened; every release bumps the epoch, so late callbacks from a
closed subscription are dropped instead of reading a stale route.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from typing import Callable

from run_tracker.config import TrackerConfig
from run_tracker.errors import InvalidTransitionError, LocationPermissionError
from run_tracker.finalizer import PendingRun, RunRejected, build_record, build_summary, finalize
from run_tracker.geo import initial_region
from run_tracker.metrics import RunMetrics
from run_tracker.models import Coordinate, Region, RunRecord, RunSummary, SessionStatus
from run_tracker.route import Route, RouteAccumulator
from run_tracker.sampler import LocationProvider, SubscriptionHandle
from run_tracker.store import RunStore
from run_tracker.timer import AsyncioTicker, Ticker

logger = logging.getLogger(__name__)


class RunTracker:
    """Owns one tracking session and the resources feeding it.

    Args:
        provider: Location capability.
        ticker: Wall-clock timer; one tick is one elapsed second. Defaults to
            an ``AsyncioTicker`` firing every ``config.tick_seconds``.
        store: Where saved runs are prepended (optional).
        user_id: Key of the run collection in ``store``.
        config: Thresholds and sampler options.
        on_summary: Receives the route and metrics of every saved run.
    """

    def __init__(
        self,
        provider: LocationProvider,
        ticker: Ticker | None = None,
        *,
        store: RunStore | None = None,
        user_id: str = "local",
        config: TrackerConfig | None = None,
        on_summary: Callable[[RunSummary], None] | None = None,
    ) -> None:
        self.config = config or TrackerConfig()
        self.status = SessionStatus.IDLE
        self.elapsed_seconds = 0
        self.region: Region | None = None
        self.requesting_permission = False
        self._provider = provider
        self._ticker: Ticker = ticker if ticker is not None else AsyncioTicker(self.config.tick_seconds)
        self._store = store
        self._user_id = user_id
        self._on_summary = on_summary
        self._acc = RouteAccumulator()
        self._subscription: SubscriptionHandle | None = None
        self._pending: PendingRun | None = None
        self._epoch = 0
        self._busy = False
        self._closed = False

    @property
    def route(self) -> Route:
        return self._acc.route

    @property
    def distance_m(self) -> float:
        return self._acc.distance_m

    @property
    def closed(self) -> bool:
        return self._closed

    def metrics(self) -> RunMetrics:
        return RunMetrics(distance_m=self._acc.distance_m, elapsed_s=self.elapsed_seconds)

    # ---- transitions ----

    async def start(self) -> None:
        """Begin a new session from idle.

        Raises:
            LocationPermissionError: Permission denied; the session stays idle.
            LocationServiceError: The first fix could not be obtained.
        """

        self._require("start", SessionStatus.IDLE)
        self._busy = True
        self._release()
        token = self._epoch
        try:
            await self._ensure_permission()
            if self._stale(token):
                return
            first = await self._provider.get_current_position(self.config.start_accuracy)
            if self._stale(token):
                return

            self._reset()
            self._acc.add(first)
            self.region = initial_region(first, self.config.region_delta)

            if not await self._open_subscription(token):
                self._reset()
                return
            self.status = SessionStatus.RUNNING
            self._ticker.start(partial(self._on_tick, token))
            logger.info("run started at %.6f,%.6f", first.latitude, first.longitude)
        except BaseException:
            self._release()
            self._reset()
            raise
        finally:
            self._busy = False

    def pause(self) -> None:
        """Stop sampling and timing; route and distance are kept."""

        self._require("pause", SessionStatus.RUNNING)
        self._release()
        self.status = SessionStatus.PAUSED
        logger.info("run paused at %ss, %.1f m", self.elapsed_seconds, self._acc.distance_m)

    async def resume(self) -> None:
        """Continue a paused session with a fresh subscription.

        Raises:
            LocationPermissionError: Permission denied; the session stays paused.
        """

        self._require("resume", SessionStatus.PAUSED)
        self._busy = True
        self._release()
        token = self._epoch
        try:
            await self._ensure_permission()
            if self._stale(token):
                return
            if not await self._open_subscription(token):
                return
            self.status = SessionStatus.RUNNING
            self._ticker.start(partial(self._on_tick, token))
            logger.info("run resumed")
        except BaseException:
            self._release()
            raise
        finally:
            self._busy = False

    def stop(self) -> RunRejected | PendingRun | None:
        """Stop the session and run the finalizer.

        Returns:
            None when the session was idle (reset only), RunRejected when the run
            is too short (session reset), or PendingRun when the run awaits
            ``save()`` / ``discard()``.
        """

        if self._closed:
            raise InvalidTransitionError("stop", "closed")
        if self.status is SessionStatus.IDLE:
            self._release()
            self._reset()
            return None
        if self.status is SessionStatus.STOPPED:
            raise InvalidTransitionError("stop", self.status.value)

        self._release()
        outcome = finalize(self._acc.route.to_list(), self._acc.distance_m, self.elapsed_seconds, self.config)
        if isinstance(outcome, RunRejected):
            logger.info(
                "run rejected: %s point(s), %.1f m (minimum %.1f m)",
                outcome.points,
                outcome.distance_m,
                self.config.min_run_distance_m,
            )
            self._reset()
            return outcome

        self._pending = outcome
        self.status = SessionStatus.STOPPED
        return outcome

    def save(self, now: datetime | None = None) -> RunRecord:
        """Persist the stopped run, hand off its summary and reset to idle."""

        pending = self._take_pending("save")
        record = build_record(pending, now)
        if self._store is not None:
            self._store.prepend(self._user_id, record)
        self._pending = None
        self._reset()
        if self._on_summary is not None:
            self._on_summary(build_summary(pending))
        return record

    def discard(self) -> None:
        """Drop the stopped run without persisting anything."""

        self._take_pending("discard")
        self._reset()
        logger.info("run discarded")

    def close(self) -> None:
        """Tear down (screen unmount). Releases subscription and timer from any state."""

        self._closed = True
        self._release()
        self._reset()

    # ---- reducers ----

    def _on_location(self, epoch: int, coord: Coordinate) -> None:
        if epoch != self._epoch or self._closed:
            logger.debug("dropping fix from closed subscription (epoch %s)", epoch)
            return
        self._acc.add(coord)

    def _on_tick(self, epoch: int) -> None:
        if epoch != self._epoch or self.status is not SessionStatus.RUNNING:
            return
        self.elapsed_seconds += 1

    # ---- helpers ----

    def _require(self, action: str, expected: SessionStatus) -> None:
        if self._closed:
            raise InvalidTransitionError(action, "closed")
        if self._busy:
            raise InvalidTransitionError(action, "busy")
        if self.status is not expected:
            raise InvalidTransitionError(action, self.status.value)

    def _stale(self, token: int) -> bool:
        """True when the session was stopped or closed while we were awaiting."""

        if self._closed or token != self._epoch:
            logger.debug("transition abandoned (epoch %s -> %s)", token, self._epoch)
            return True
        return False

    async def _ensure_permission(self) -> None:
        self.requesting_permission = True
        try:
            granted = await self._provider.request_permission()
        finally:
            self.requesting_permission = False
        if not granted:
            logger.warning("location permission denied")
            raise LocationPermissionError()

    async def _open_subscription(self, token: int) -> bool:
        handle = await self._provider.subscribe(self.config.sampler, partial(self._on_location, token))
        if self._stale(token):
            self._provider.unsubscribe(handle)
            return False
        self._subscription = handle
        return True

    def _release(self) -> None:
        """Close the subscription and the timer together. Idempotent."""

        self._epoch += 1
        handle, self._subscription = self._subscription, None
        try:
            if handle is not None:
                self._provider.unsubscribe(handle)
        finally:
            self._ticker.clear()

    def _reset(self) -> None:
        self.status = SessionStatus.IDLE
        self._acc.reset()
        self.elapsed_seconds = 0
        self.region = None
        self._pending = None

    def _take_pending(self, action: str) -> PendingRun:
        if self.status is not SessionStatus.STOPPED or self._pending is None:
            raise InvalidTransitionError(action, self.status.value)
        return self._pending
