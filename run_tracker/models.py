"""Data models for coordinates, routes and saved runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Sequence

from run_tracker.timeutils import parse_iso


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A recorded geographic point in decimal degrees."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single timestamped location sample from a recorded route.

    Attributes:
        geo_time_ms: Unix epoch milliseconds.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
    """

    geo_time_ms: int
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class SessionStatus(str, Enum):
    """Lifecycle state of a tracking session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    # Resources released, waiting for the save/discard decision.
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class Region:
    """A map viewing region (centre plus span in degrees)."""

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


@dataclass(frozen=True, slots=True)
class RunRecord:
    """A persisted run.

    Note:
        JSON keys follow the mobile client's record shape
        (``dateISO``, ``distanceMeters``, ``durationSec``).
    """

    id: str
    date_iso: str
    distance_meters: float
    duration_sec: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "dateISO": self.date_iso,
            "distanceMeters": self.distance_meters,
            "durationSec": self.duration_sec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        """Build a record from stored JSON.

        Raises:
            KeyError: If ``id`` or ``dateISO`` is missing.
            ValueError: If ``dateISO`` is not an ISO-8601 timestamp.
        """

        date_iso = str(data["dateISO"])
        parse_iso(date_iso)
        return cls(
            id=str(data["id"]),
            date_iso=date_iso,
            distance_meters=float(data.get("distanceMeters", 0.0) or 0.0),
            duration_sec=int(data.get("durationSec", 0) or 0),
        )


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Payload handed to the summary/sharing stage after a run is saved."""

    distance_meters: float
    duration_sec: int
    route: Sequence[Coordinate] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "distanceMeters": self.distance_meters,
            "durationSec": self.duration_sec,
            "coords": [c.to_dict() for c in self.route],
        }


DEFAULT_TZ: Final[str] = "UTC"
