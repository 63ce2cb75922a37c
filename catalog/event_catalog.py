"""In-memory catalog of local events and its JSON seed file."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ranking.geo import distance_km

from .config import SEED_CATALOG
from .schemas import Coordinate, EventCategory, EventRecord

logger = logging.getLogger(__name__)


def _record_from_dict(item: dict, now: datetime) -> EventRecord:
    if "date" in item:
        date = item["date"]
    else:
        date = (now + timedelta(days=item.get("days_from_now", 0))).isoformat()
    coords = item.get("coordinates")
    return EventRecord(
        id=str(item["id"]),
        title=item["title"],
        description=item.get("description", ""),
        date=date,
        location=item.get("location", ""),
        category=EventCategory(item["category"]),
        image_url=item.get("image_url", ""),
        attendees=int(item.get("attendees", 0)),
        rating=float(item.get("rating", 0.0)),
        coordinates=Coordinate(**coords) if coords else None,
        distance_km=item.get("distance_km"),
        tags=tuple(item.get("tags", [])),
    )


def load_seed_events(path: str | Path = SEED_CATALOG, now: Optional[datetime] = None) -> list[EventRecord]:
    """Load the initial events from a JSON catalog file.

    Entries may carry an absolute ``date`` or a ``days_from_now`` offset
    that is resolved against ``now`` (defaults to the current UTC time).
    """
    now = now or datetime.now(timezone.utc)
    data = json.loads(Path(path).read_text())
    return [_record_from_dict(item, now) for item in data]


def export_events(events: Iterable[EventRecord], path: str | Path) -> None:
    """Export events to JSON."""
    payload = []
    for event in events:
        item = asdict(event)
        item["category"] = event.category.value
        item["tags"] = list(event.tags)
        payload.append(item)
    Path(path).write_text(json.dumps(payload, indent=2))


class EventCatalog:
    """Ordered collection of events, newest user submissions first."""

    def __init__(self, events: Iterable[EventRecord] = ()):
        self._events: list[EventRecord] = list(events)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return any(e.id == event_id for e in self._events)

    @property
    def events(self) -> list[EventRecord]:
        return list(self._events)

    def get(self, event_id: str) -> Optional[EventRecord]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def add(self, event: EventRecord) -> None:
        """Prepend ``event`` to the catalog."""
        if event.id in self:
            raise ValueError(f"Duplicate event id {event.id}")
        self._events.insert(0, event)

    def attach_distances(self, origin: Coordinate) -> None:
        """Set ``distance_km`` on every event that has coordinates."""
        updated = []
        for event in self._events:
            if event.coordinates is not None:
                event = replace(event, distance_km=distance_km(origin, event.coordinates))
            updated.append(event)
        self._events = updated
        logger.info("Attached distances from %s to %d event(s)", origin, len(updated))
