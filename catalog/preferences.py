"""User preference tally and its durable store."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .config import PREFERENCES_KEY, PREFERENCES_PATH
from .schemas import EventRecord, UserPreferences

logger = logging.getLogger(__name__)


def toggle_like(prefs: UserPreferences, event: EventRecord) -> UserPreferences:
    """Return new preferences with ``event`` liked or unliked.

    Unliking decrements the event's category count, floored at zero.
    ``prefs`` is never modified.
    """
    category = event.category.value
    categories = dict(prefs.liked_categories)

    if event.id in prefs.liked_event_ids:
        liked = prefs.liked_event_ids - {event.id}
        categories[category] = max(0, categories.get(category, 0) - 1)
    else:
        liked = prefs.liked_event_ids | {event.id}
        categories[category] = categories.get(category, 0) + 1

    return UserPreferences(liked_event_ids=liked, liked_categories=categories)


def preferences_from_dict(data: Any) -> UserPreferences:
    """Build preferences from their serialized form.

    Raises ``ValueError`` when ``data`` does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ValueError("preferences must be an object")
    ids = data.get("likedEventIds", [])
    categories = data.get("likedCategories", {})
    if not isinstance(ids, list) or not isinstance(categories, dict):
        raise ValueError("unexpected preferences layout")
    return UserPreferences(
        liked_event_ids=frozenset(str(i) for i in ids),
        liked_categories={str(k): max(0, int(v)) for k, v in categories.items()},
    )


class PreferenceStore:
    """Key-value JSON file holding one serialized preferences entry."""

    def __init__(self, path: str | Path = PREFERENCES_PATH, key: str = PREFERENCES_KEY):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Could not read preference store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> UserPreferences:
        """Return stored preferences, or the empty default if absent or corrupt."""
        raw = self._read_all().get(self.key)
        if raw is None:
            return UserPreferences()
        try:
            return preferences_from_dict(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding corrupt preferences under %r: %s", self.key, exc)
            return UserPreferences()

    def save(self, prefs: UserPreferences) -> None:
        """Overwrite the stored entry with ``prefs``."""
        data = self._read_all()
        data[self.key] = prefs.to_dict()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2))
        except OSError as exc:
            logger.error("Failed to persist preferences to %s: %s", self.path, exc)
