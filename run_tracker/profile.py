"""Runner profile resolution across several sources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable


class SourceKind(IntEnum):
    """Where profile fields come from; higher value wins."""

    DEFAULT = 0
    CACHE = 1
    REMOTE = 2


@dataclass(frozen=True, slots=True)
class ProfileSource:
    """Partial profile from one source. Empty strings count as missing."""

    kind: SourceKind
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class Profile:
    username: str
    display_name: str
    avatar_url: str | None


DEFAULT_USERNAME = "runner"


def _pick(sources: list[ProfileSource], attr: str) -> str | None:
    for src in sources:
        value = getattr(src, attr)
        if value:
            return value
    return None


def resolve_profile(sources: Iterable[ProfileSource]) -> Profile:
    """Merge profile sources field by field, freshest authoritative source first.

    Remote beats cache beats defaults. The display name falls back to the
    username, which itself falls back to ``"runner"``.
    """

    ordered = sorted(sources, key=lambda s: s.kind, reverse=True)
    username = _pick(ordered, "username") or DEFAULT_USERNAME
    return Profile(
        username=username,
        display_name=_pick(ordered, "display_name") or username,
        avatar_url=_pick(ordered, "avatar_url"),
    )
