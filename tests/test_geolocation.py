from unittest.mock import Mock, patch

import requests

from catalog.config import FALLBACK_LOCATION
from catalog.geolocation import lookup_ip_location, resolve_reference_location
from catalog.schemas import Coordinate

LOOKUP_URL = "http://geo.example.com/json"


def fake_response(payload):
    resp = Mock()
    resp.raise_for_status = lambda: None
    resp.json.return_value = payload
    return resp


def test_lookup_reads_latitude_longitude():
    with patch("catalog.geolocation.requests.get", return_value=fake_response(
        {"latitude": -20.15, "longitude": 28.58, "city": "Bulawayo"}
    )) as mock_get:
        assert lookup_ip_location(LOOKUP_URL) == Coordinate(-20.15, 28.58)
    assert mock_get.call_args[0][0] == LOOKUP_URL


def test_lookup_accepts_lat_lon_keys():
    with patch("catalog.geolocation.requests.get", return_value=fake_response({"lat": "1.5", "lon": "2.5"})):
        assert lookup_ip_location(LOOKUP_URL) == Coordinate(1.5, 2.5)


def test_no_source_configured_uses_fallback():
    with patch("catalog.geolocation.requests.get") as mock_get:
        assert resolve_reference_location(None) == FALLBACK_LOCATION
    mock_get.assert_not_called()


def test_network_error_uses_fallback():
    with patch("catalog.geolocation.requests.get", side_effect=requests.ConnectionError("denied")):
        assert resolve_reference_location(LOOKUP_URL) == FALLBACK_LOCATION


def test_response_without_coordinates_uses_fallback():
    with patch("catalog.geolocation.requests.get", return_value=fake_response({"error": True})):
        assert resolve_reference_location(LOOKUP_URL) == FALLBACK_LOCATION


def test_non_object_response_uses_fallback():
    with patch("catalog.geolocation.requests.get", return_value=fake_response(["nope"])):
        assert resolve_reference_location(LOOKUP_URL) == FALLBACK_LOCATION


def test_fallback_is_harare():
    assert FALLBACK_LOCATION == Coordinate(-17.8216, 31.0492)
