"""Compose the visible event sequence from the catalog and active filters."""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Sequence

from catalog.schemas import EventRecord


class FeedMode(str, Enum):
    """Which filter regime currently drives the feed."""

    TRENDING = "trending"
    SEARCH_RESULTS = "search_results"
    RECOMMENDED = "recommended"

    @property
    def heading(self) -> str:
        return {
            FeedMode.TRENDING: "Trending Events",
            FeedMode.SEARCH_RESULTS: "Search Results",
            FeedMode.RECOMMENDED: "Recommended for You",
        }[self]


def derive_mode(show_personalized: bool, id_filter: Optional[Sequence[str]]) -> FeedMode:
    if show_personalized:
        return FeedMode.RECOMMENDED
    if id_filter is not None:
        return FeedMode.SEARCH_RESULTS
    return FeedMode.TRENDING


def dedupe_ids(ids: Iterable[str]) -> list[str]:
    """Drop repeated identifiers, keeping the first (highest ranked) one."""
    seen: set[str] = set()
    result = []
    for event_id in ids:
        if event_id not in seen:
            seen.add(event_id)
            result.append(event_id)
    return result


def compute_displayed(
    events: Iterable[EventRecord],
    id_filter: Optional[Sequence[str]] = None,
    max_distance_km: Optional[float] = None,
) -> list[EventRecord]:
    """Return the events to display, in display order.

    With ``id_filter`` only listed events are kept, ordered as in the
    filter; unknown ids are skipped. With ``max_distance_km`` only events
    whose computed distance is within the threshold are kept, and events
    without a distance are dropped. Without a filter the catalog order is
    preserved.
    """
    result = list(events)

    if id_filter is not None:
        by_id = {event.id: event for event in result}
        result = [by_id[event_id] for event_id in dedupe_ids(id_filter) if event_id in by_id]

    if max_distance_km is not None:
        result = [
            event
            for event in result
            if event.distance_km is not None and event.distance_km <= max_distance_km
        ]

    return result
