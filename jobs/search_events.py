"""Search the seed catalog with a natural-language query."""
from __future__ import annotations

import logging
import sys

from catalog.config import configure_logging
from catalog.event_catalog import EventCatalog, load_seed_events
from catalog.geolocation import resolve_reference_location
from ranking.feed import EventFeed
from ranking.llm_provider import OpenAIRankingProvider

logger = logging.getLogger(__name__)
configure_logging()


def run(query: str, max_distance_km: float | None = None) -> list:
    """Print events matching ``query``, best match first."""
    feed = EventFeed(EventCatalog(load_seed_events()), OpenAIRankingProvider())
    location = feed.resolve_location(resolve_reference_location)
    logger.info("Reference location: %s", location)
    feed.set_max_distance(max_distance_km)

    feed.submit_search(query)
    events = feed.displayed()
    if not events:
        print("No events found for", repr(query))
        return events

    for rank, event in enumerate(events, start=1):
        distance = f"{event.distance_km:.1f} km" if event.distance_km is not None else "?"
        print(f"{rank}. {event.title} [{event.category.value}] - {event.location} ({distance})")
    return events


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3):
        print("Usage: python -m jobs.search_events <query> [max_km]")
        raise SystemExit(1)
    run(sys.argv[1], float(sys.argv[2]) if len(sys.argv) == 3 else None)
