import json

import pytest

from catalog.preferences import PreferenceStore, preferences_from_dict, toggle_like
from catalog.schemas import EventCategory, UserPreferences

from conftest import make_event

JAZZ = make_event("1", EventCategory.MUSIC)
FAIR = make_event("2", EventCategory.ART)


def test_like_adds_id_and_counts_category():
    prefs = toggle_like(UserPreferences(), JAZZ)
    assert prefs.liked_event_ids == {"1"}
    assert prefs.liked_categories == {"Music": 1}


def test_unlike_removes_id_and_decrements():
    prefs = toggle_like(toggle_like(UserPreferences(), JAZZ), JAZZ)
    assert prefs.liked_event_ids == frozenset()
    assert prefs.liked_categories == {"Music": 0}


def test_toggle_does_not_mutate_input():
    original = UserPreferences(frozenset({"9"}), {"Music": 1})
    toggle_like(original, JAZZ)
    assert original.liked_event_ids == {"9"}
    assert original.liked_categories == {"Music": 1}


def test_toggle_twice_from_unliked_restores_counts():
    start = UserPreferences(frozenset({"2"}), {"Arts & Culture": 1, "Music": 2})
    assert toggle_like(toggle_like(start, JAZZ), JAZZ) == start


def test_toggle_twice_from_liked_restores_when_count_positive():
    start = UserPreferences(frozenset({"1", "2"}), {"Music": 1, "Arts & Culture": 1})
    assert toggle_like(toggle_like(start, JAZZ), JAZZ) == start


def test_count_floors_at_zero_when_tally_has_drifted():
    # The tally is heuristic: a liked event whose category count is already
    # zero (e.g. the event changed category after being liked) stays at zero.
    drifted = UserPreferences(frozenset({"1"}), {"Music": 0})
    unliked = toggle_like(drifted, JAZZ)
    assert unliked.liked_categories["Music"] == 0
    relicked = toggle_like(unliked, JAZZ)
    assert relicked.liked_categories["Music"] == 1
    assert relicked != drifted


def test_top_categories_orders_by_count():
    prefs = UserPreferences(
        frozenset(), {"Music": 1, "Sports": 4, "Nightlife": 2, "Outdoors": 3}
    )
    assert prefs.top_categories() == ["Sports", "Outdoors", "Nightlife"]


def test_store_round_trip(tmp_path):
    store = PreferenceStore(tmp_path / "nested" / "prefs.json")
    prefs = toggle_like(toggle_like(UserPreferences(), JAZZ), FAIR)
    store.save(prefs)
    assert store.load() == prefs

    saved = json.loads((tmp_path / "nested" / "prefs.json").read_text())
    assert saved["localPulse_prefs"] == {
        "likedEventIds": ["1", "2"],
        "likedCategories": {"Music": 1, "Arts & Culture": 1},
    }


def test_store_missing_file_gives_default(tmp_path):
    assert PreferenceStore(tmp_path / "absent.json").load() == UserPreferences()


def test_store_corrupt_json_gives_default(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json")
    assert PreferenceStore(path).load() == UserPreferences()


def test_store_wrong_shape_gives_default(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"localPulse_prefs": {"likedEventIds": "1"}}))
    assert PreferenceStore(path).load() == UserPreferences()


def test_store_keeps_other_keys(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"other": 1}))
    PreferenceStore(path).save(UserPreferences())
    assert json.loads(path.read_text())["other"] == 1


def test_preferences_from_dict_clamps_negative_counts():
    prefs = preferences_from_dict({"likedEventIds": [1], "likedCategories": {"Music": -3}})
    assert prefs.liked_event_ids == {"1"}
    assert prefs.liked_categories == {"Music": 0}


def test_preferences_cannot_be_mutated_in_place():
    prefs = toggle_like(UserPreferences(), JAZZ)
    with pytest.raises(TypeError):
        prefs.liked_categories["Music"] = 99
    assert prefs.liked_categories == {"Music": 1}


def test_preferences_do_not_alias_caller_dict():
    counts = {"Music": 1}
    prefs = UserPreferences(frozenset({"1"}), counts)
    counts["Music"] = 5
    assert prefs.liked_categories == {"Music": 1}


def test_preferences_are_hashable():
    a = UserPreferences(frozenset({"1"}), {"Music": 1, "Sports": 2})
    b = UserPreferences(frozenset({"1"}), {"Sports": 2, "Music": 1})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
