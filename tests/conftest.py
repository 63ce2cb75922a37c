import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from catalog.event_catalog import EventCatalog, load_seed_events
from catalog.preferences import PreferenceStore
from catalog.schemas import Coordinate, EventCategory, EventDraft, EventRecord
from ranking.feed import EventFeed
from ranking.provider import RankingProvider

FIXED_NOW = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)


class StubRankingProvider(RankingProvider):
    """Deterministic provider returning canned results and recording calls."""

    def __init__(self, search_ids=None, recommend_ids=None, draft=None, error=None):
        self.search_ids = list(search_ids or [])
        self.recommend_ids = list(recommend_ids or [])
        self.draft = draft
        self.error = error
        self.calls = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def parse_freeform_event(self, text):
        self.calls.append(("parse", text))
        self._maybe_fail()
        return self.draft

    def search_by_query(self, query, candidates):
        self.calls.append(("search", query, [c.id for c in candidates]))
        self._maybe_fail()
        return list(self.search_ids)

    def recommend(self, prefs, location, candidates):
        self.calls.append(("recommend", prefs, location, [c.id for c in candidates]))
        self._maybe_fail()
        return list(self.recommend_ids)


def make_event(event_id, category=EventCategory.MUSIC, distance=None, coords=None, **kwargs):
    defaults = dict(
        title=f"Event {event_id}",
        description=f"Description of event {event_id}",
        date="2025-08-10T18:00:00+00:00",
        location="Harare",
        image_url=f"https://picsum.photos/800/600?random={event_id}",
    )
    defaults.update(kwargs)
    return EventRecord(
        id=event_id,
        category=category,
        distance_km=distance,
        coordinates=coords,
        **defaults,
    )


@pytest.fixture
def seed_events():
    return load_seed_events(now=FIXED_NOW)


@pytest.fixture
def stub_provider():
    return StubRankingProvider()


@pytest.fixture
def store(tmp_path):
    return PreferenceStore(tmp_path / "prefs.json")


@pytest.fixture
def feed(seed_events, stub_provider, store):
    return EventFeed(EventCatalog(seed_events), stub_provider, store)


@pytest.fixture
def sample_draft():
    return EventDraft(
        title="Braai at Lake Chivero",
        description="Grill, chill and swim by the lake. Bring your own meat.",
        category=EventCategory.FOOD,
        tags=("braai", "lake", "weekend"),
        suggested_time="2025-08-10T12:00:00+00:00",
    )


HARARE = Coordinate(latitude=-17.8216, longitude=31.0492)
