import json

import pytest

from catalog.event_catalog import EventCatalog, export_events, load_seed_events
from catalog.schemas import Coordinate, EventCategory

from conftest import FIXED_NOW, HARARE, make_event


def test_load_seed_events(seed_events):
    assert [e.id for e in seed_events] == ["1", "2", "3", "4", "5", "6"]
    jazz = seed_events[0]
    assert jazz.title == "Harare Jazz Festival"
    assert jazz.category is EventCategory.MUSIC
    assert jazz.coordinates == Coordinate(-17.8249, 31.0498)
    assert jazz.distance_km is None
    assert jazz.tags == ("jazz", "afro-jazz", "live music", "outdoor")
    assert jazz.date == "2025-08-03T12:00:00+00:00"


def test_export_then_load_keeps_absolute_dates(tmp_path, seed_events):
    path = tmp_path / "catalog.json"
    export_events(seed_events, path)
    assert json.loads(path.read_text())[1]["category"] == "Arts & Culture"
    assert load_seed_events(path) == seed_events


def test_add_prepends():
    catalog = EventCatalog([make_event("1"), make_event("2")])
    catalog.add(make_event("new"))
    assert [e.id for e in catalog] == ["new", "1", "2"]
    assert "new" in catalog
    assert len(catalog) == 3


def test_add_rejects_duplicate_id():
    catalog = EventCatalog([make_event("1")])
    with pytest.raises(ValueError):
        catalog.add(make_event("1"))


def test_attach_distances_only_for_events_with_coordinates(seed_events):
    catalog = EventCatalog(seed_events + [make_event("x")])
    catalog.attach_distances(HARARE)
    assert catalog.get("1").distance_km < 1
    assert 300 < catalog.get("2").distance_km < 500
    assert catalog.get("x").distance_km is None


def test_get_unknown_returns_none():
    assert EventCatalog().get("nope") is None


def test_seed_dates_follow_now():
    events = load_seed_events(now=FIXED_NOW.replace(day=2))
    assert events[2].date == "2025-08-03T12:00:00+00:00"
