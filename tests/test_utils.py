import re

import pytest

from catalog.utils import make_event_id, placeholder_image_url, to_iso_datetime


def test_date_only_becomes_utc_midnight():
    assert to_iso_datetime("2025-08-11") == "2025-08-11T00:00:00+00:00"


def test_naive_datetime_uses_given_zone():
    assert to_iso_datetime("2025-08-11T18:30:00", "Africa/Harare") == "2025-08-11T18:30:00+02:00"


def test_trailing_z_is_utc():
    assert to_iso_datetime("2025-08-11T18:30:00Z") == "2025-08-11T18:30:00+00:00"


def test_offset_is_preserved():
    assert to_iso_datetime("2025-08-11T18:30:00+02:00") == "2025-08-11T18:30:00+02:00"


def test_empty_value_returns_none():
    assert to_iso_datetime(None) is None
    assert to_iso_datetime("") is None


def test_garbage_raises_value_error():
    with pytest.raises(ValueError):
        to_iso_datetime("next friday at 5pm")


def test_event_id_is_millisecond_timestamp():
    assert re.fullmatch(r"\d{13}", make_event_id())


def test_placeholder_image_url():
    assert placeholder_image_url("42") == "https://picsum.photos/800/600?random=42"
