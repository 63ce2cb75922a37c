"""Resolve the user's reference location, falling back to a fixed point."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import FALLBACK_LOCATION, GEOLOOKUP_URL
from .schemas import Coordinate

logger = logging.getLogger(__name__)


def lookup_ip_location(url: str, timeout: float = 10) -> Coordinate:
    """Query an IP geolocation endpoint returning ``latitude``/``longitude``.

    Raises ``requests.RequestException`` or ``ValueError`` on failure.
    """
    resp = requests.get(url, headers={"User-Agent": "Mozilla/5.0"}, timeout=timeout)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected geolocation response: {data!r}")
    try:
        lat = float(data.get("latitude", data.get("lat")))
        lng = float(data.get("longitude", data.get("lon", data.get("lng"))))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"No coordinates in geolocation response: {data!r}") from exc
    return Coordinate(latitude=lat, longitude=lng)


def resolve_reference_location(
    lookup_url: Optional[str] = GEOLOOKUP_URL,
    fallback: Coordinate = FALLBACK_LOCATION,
) -> Coordinate:
    """Return the user's position, or ``fallback`` if it cannot be determined."""
    if not lookup_url:
        logger.info("No geolocation source configured; using fallback %s", fallback)
        return fallback
    try:
        return lookup_ip_location(lookup_url)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Location lookup failed (%s); using fallback %s", exc, fallback)
        return fallback
