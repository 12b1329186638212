"""
Shared pytest fixtures for the run tracker tests.
"""

import asyncio
import math

import pytest

from run_tracker.config import TrackerConfig
from run_tracker.geo import EARTH_RADIUS_M
from run_tracker.models import Coordinate
from run_tracker.sampler import ReplayLocationProvider, SamplerOptions
from run_tracker.session import RunTracker
from run_tracker.store import JsonRunStore
from run_tracker.timer import ManualTicker

# Meters per degree of latitude on the haversine sphere.
M_PER_DEG = EARTH_RADIUS_M * math.pi / 180.0

ORIGIN = Coordinate(latitude=48.2082, longitude=16.3738)


def north_of(coord, meters):
    """Coordinate exactly `meters` north of `coord` (same meridian)."""
    return Coordinate(latitude=coord.latitude + meters / M_PER_DEG, longitude=coord.longitude)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def provider():
    return ReplayLocationProvider(ORIGIN)


@pytest.fixture
def ticker():
    return ManualTicker()


@pytest.fixture
def store(tmp_path):
    return JsonRunStore(tmp_path / "runs.json")


@pytest.fixture
def summaries():
    return []


@pytest.fixture
def tracker(provider, ticker, store, summaries):
    # min_distance_m=0 so every emitted fix reaches the tracker
    config = TrackerConfig(sampler=SamplerOptions(min_distance_m=0.0))
    return RunTracker(provider, ticker, store=store, user_id="alice", config=config, on_summary=summaries.append)
