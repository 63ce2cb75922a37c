"""Environment-driven settings for the LocalPulse service."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .schemas import Coordinate

load_dotenv()

BASE_PATH = Path(__file__).resolve().parent.parent

OPENAI_MODEL = os.getenv("LOCALPULSE_MODEL", "o4-mini")

# Only reasoning models accept a reasoning effort; empty disables it.
REASONING_MODEL_PREFIXES = ("o1", "o3", "o4", "gpt-5")
REASONING_EFFORT = os.getenv(
    "LOCALPULSE_REASONING_EFFORT",
    "low" if OPENAI_MODEL.startswith(REASONING_MODEL_PREFIXES) else "",
) or None

PREFERENCES_PATH = Path(
    os.getenv("LOCALPULSE_PREFS_PATH", str(Path.home() / ".localpulse" / "preferences.json"))
).expanduser()
PREFERENCES_KEY = os.getenv("LOCALPULSE_PREFS_KEY", "localPulse_prefs")

SEED_CATALOG = Path(
    os.getenv("LOCALPULSE_SEED_PATH", str(BASE_PATH / "sources" / "zimbabwe_events.json"))
)

GEOLOOKUP_URL = os.getenv("LOCALPULSE_GEOLOOKUP_URL") or None

# Harare, used whenever the user's position cannot be resolved.
FALLBACK_LOCATION = Coordinate(latitude=-17.8216, longitude=31.0492)

# Thresholds offered by the distance filter
DISTANCE_CHOICES_KM = (5, 10, 25, 50, 100)


def configure_logging() -> None:
    """Turn on INFO logging when ``LOCALPULSE_DEBUG`` is set."""
    if os.getenv("LOCALPULSE_DEBUG"):
        logging.basicConfig(level=logging.INFO, format="%(message)s")
