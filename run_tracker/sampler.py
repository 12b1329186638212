"""Location sampling contract and a replaying implementation.

The tracker never talks to a GPS directly. It consumes a ``LocationProvider``:
a permission check, a single-shot fix, and a push subscription that delivers
coordinates until unsubscribed. ``ReplayLocationProvider`` implements the same
contract from recorded coordinates so that routes can be replayed offline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from run_tracker.errors import LocationServiceError
from run_tracker.geo import distance_m
from run_tracker.models import Coordinate

logger = logging.getLogger(__name__)

LocationCallback = Callable[[Coordinate], None]


class Accuracy(str, Enum):
    """Requested positioning accuracy."""

    BALANCED = "balanced"
    HIGH = "high"
    HIGHEST = "highest"


@dataclass(frozen=True, slots=True)
class SamplerOptions:
    """Options for a continuous location subscription."""

    accuracy: Accuracy = Accuracy.HIGHEST
    min_time_ms: int = 1000
    # Minimum movement between two reports, in meters.
    min_distance_m: float = 3.0


@dataclass(frozen=True, slots=True)
class SubscriptionHandle:
    """Opaque handle identifying one live subscription."""

    id: int


class LocationProvider(Protocol):
    """Device location capability as seen by the tracker."""

    async def request_permission(self) -> bool:
        """Ask for foreground location permission; True when granted."""

    async def get_current_position(self, accuracy: Accuracy) -> Coordinate:
        """Return a single fix. Raises LocationServiceError on failure."""

    async def subscribe(self, options: SamplerOptions, on_update: LocationCallback) -> SubscriptionHandle:
        """Start delivering fixes to ``on_update`` until unsubscribed."""

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """Stop a subscription. Safe to call for an already closed handle."""


class ReplayLocationProvider:
    """Location provider fed by ``emit()`` calls instead of hardware.

    Notes:
        ``min_distance_m`` is honoured against the last fix delivered to each
        subscription. ``min_time_ms`` is not simulated: the caller decides when
        fixes are emitted.
    """

    def __init__(
        self,
        current: Coordinate | None = None,
        *,
        granted: bool = True,
        fail_fix: bool = False,
    ) -> None:
        self.granted = granted
        self.fail_fix = fail_fix
        self._current = current
        self._next_id = 1
        self._subs: dict[int, tuple[SamplerOptions, LocationCallback]] = {}
        self._last_delivered: dict[int, Coordinate | None] = {}
        self.permission_requests = 0
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0

    @property
    def active_subscriptions(self) -> int:
        return len(self._subs)

    @property
    def current(self) -> Coordinate | None:
        return self._current

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    async def get_current_position(self, accuracy: Accuracy) -> Coordinate:
        if self.fail_fix or self._current is None:
            raise LocationServiceError(f"no position fix available (accuracy={accuracy.value})")
        return self._current

    async def subscribe(self, options: SamplerOptions, on_update: LocationCallback) -> SubscriptionHandle:
        handle = SubscriptionHandle(self._next_id)
        self._next_id += 1
        self._subs[handle.id] = (options, on_update)
        self._last_delivered[handle.id] = self._current
        self.subscribe_calls += 1
        logger.debug("subscription %s opened (%s)", handle.id, options)
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self.unsubscribe_calls += 1
        if self._subs.pop(handle.id, None) is not None:
            self._last_delivered.pop(handle.id, None)
            logger.debug("subscription %s closed", handle.id)

    def emit(self, coord: Coordinate) -> int:
        """Move the simulated device and deliver the fix.

        Returns:
            Number of subscriptions the fix was delivered to.
        """

        self._current = coord
        delivered = 0
        # Copy: a callback may unsubscribe.
        for sub_id, (options, callback) in list(self._subs.items()):
            last = self._last_delivered.get(sub_id)
            if last is not None and distance_m(last, coord) < options.min_distance_m:
                continue
            self._last_delivered[sub_id] = coord
            callback(coord)
            delivered += 1
        return delivered
