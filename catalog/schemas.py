"""Shared data models for the LocalPulse events service."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple


class EventCategory(str, Enum):
    """Fixed set of categories an event can belong to."""

    MUSIC = "Music"
    FOOD = "Food & Drink"
    ART = "Arts & Culture"
    SPORTS = "Sports"
    COMMUNITY = "Community"
    TECH = "Technology"
    NIGHTLIFE = "Nightlife"
    OUTDOORS = "Outdoors"


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class EventRecord:
    """A single local event as shown in the feed."""

    id: str
    title: str
    description: str
    date: str  # ISO datetime string
    location: str
    category: EventCategory
    image_url: str
    attendees: int = 0
    rating: float = 0.0
    coordinates: Optional[Coordinate] = None
    distance_km: Optional[float] = None
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EventDraft:
    """Best-effort structured event produced from free text."""

    title: str
    description: str
    category: EventCategory
    tags: Tuple[str, ...] = ()
    suggested_time: Optional[str] = None


@dataclass(frozen=True)
class UserPreferences:
    """Liked events plus a per-category like tally.

    The tally is a heuristic: it is adjusted on every toggle rather than
    recomputed, so it can drift if an event changes category after a like.
    """

    liked_event_ids: FrozenSet[str] = frozenset()
    liked_categories: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "liked_event_ids", frozenset(self.liked_event_ids))
        object.__setattr__(self, "liked_categories", MappingProxyType(dict(self.liked_categories)))

    def __hash__(self):
        return hash((self.liked_event_ids, tuple(sorted(self.liked_categories.items()))))

    def is_liked(self, event_id: str) -> bool:
        return event_id in self.liked_event_ids

    def top_categories(self, limit: int = 3) -> list[str]:
        """Return the most-liked categories, highest count first."""
        ranked = sorted(self.liked_categories.items(), key=lambda item: item[1], reverse=True)
        return [category for category, _ in ranked[:limit]]

    def to_dict(self) -> dict:
        return {
            "likedEventIds": sorted(self.liked_event_ids),
            "likedCategories": dict(self.liked_categories),
        }
