"""Contract for the service that parses, searches and recommends events."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from catalog.schemas import Coordinate, EventDraft, EventRecord, UserPreferences

from .geo import format_distance


def search_summary(event: EventRecord) -> dict[str, Any]:
    """Lightweight projection of ``event`` sent with a search query."""
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "tags": ", ".join(event.tags),
        "category": event.category.value,
        "date": event.date,
    }


def recommendation_summary(event: EventRecord) -> dict[str, Any]:
    """Lightweight projection of ``event`` sent for recommendations."""
    return {
        "id": event.id,
        "title": event.title,
        "category": event.category.value,
        "tags": ", ".join(event.tags),
        "distance": format_distance(event.distance_km),
        "rating": event.rating,
        "attendees": event.attendees,
    }


def profile_summary(prefs: UserPreferences, events: Iterable[EventRecord]) -> dict[str, str]:
    """Describe the user's tastes: top categories and liked event titles."""
    liked_titles = [e.title for e in events if prefs.is_liked(e.id)]
    return {
        "favorite_categories": ", ".join(prefs.top_categories(3)) or "None yet",
        "liked_events": ", ".join(liked_titles) or "None yet",
    }


class RankingProvider(ABC):
    """Interprets free text and ranks candidate events.

    Implementations should return ``None`` or an empty list on failure,
    but callers must still guard against exceptions.
    """

    @abstractmethod
    def parse_freeform_event(self, text: str) -> Optional[EventDraft]:
        """Turn a loose description into a structured draft."""

    @abstractmethod
    def search_by_query(self, query: str, candidates: List[EventRecord]) -> List[str]:
        """Return candidate ids matching ``query``, most relevant first."""

    @abstractmethod
    def recommend(
        self,
        prefs: UserPreferences,
        location: Optional[Coordinate],
        candidates: List[EventRecord],
    ) -> List[str]:
        """Return candidate ids ordered by recommendation strength."""
