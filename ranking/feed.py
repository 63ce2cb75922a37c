"""Mutable feed state: what the user is looking at and how it got there."""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from catalog.event_catalog import EventCatalog
from catalog.preferences import PreferenceStore, toggle_like
from catalog.schemas import Coordinate, EventDraft, EventRecord, UserPreferences
from catalog.utils import make_event_id, placeholder_image_url, to_iso_datetime, utc_now_iso

from .display import FeedMode, compute_displayed, dedupe_ids, derive_mode
from .geo import distance_km
from .provider import RankingProvider

logger = logging.getLogger(__name__)


class EventFeed:
    """Holds the catalog, preferences and active filters for one user.

    Provider calls are made outside the lock. Each call takes a ticket;
    when a newer call has started in the meantime, the older result is
    discarded instead of overwriting the newer one.
    """

    def __init__(
        self,
        catalog: EventCatalog,
        provider: RankingProvider,
        store: Optional[PreferenceStore] = None,
    ):
        self.catalog = catalog
        self.provider = provider
        self.store = store
        self.preferences = store.load() if store else UserPreferences()
        self.location: Optional[Coordinate] = None
        self.query = ""
        self.show_personalized = False
        self.id_filter: Optional[List[str]] = None
        self.max_distance_km: Optional[float] = None
        self._lock = threading.RLock()
        self._latest_token = 0
        self._pending = 0

    # -- derived state -------------------------------------------------

    @property
    def mode(self) -> FeedMode:
        return derive_mode(self.show_personalized, self.id_filter)

    @property
    def is_busy(self) -> bool:
        return self._pending > 0

    def displayed(self) -> list[EventRecord]:
        with self._lock:
            return compute_displayed(self.catalog, self.id_filter, self.max_distance_km)

    def match_count(self) -> Optional[int]:
        """Number of catalog events selected by the id filter, ignoring distance."""
        with self._lock:
            if self.id_filter is None:
                return None
            return len(compute_displayed(self.catalog, self.id_filter))

    # -- provider plumbing ---------------------------------------------

    def _issue_ticket(self) -> int:
        with self._lock:
            self._latest_token += 1
            self._pending += 1
            return self._latest_token

    def _is_current(self, ticket: int) -> bool:
        return ticket == self._latest_token

    def _rank(self, call: Callable[[], List[str]], what: str) -> tuple[int, List[str]]:
        ticket = self._issue_ticket()
        try:
            ids = list(call())
        except Exception as exc:
            logger.error("%s failed: %s", what, exc)
            ids = []
        finally:
            with self._lock:
                self._pending -= 1
        return ticket, dedupe_ids(ids)

    def _invalidate_pending(self) -> None:
        with self._lock:
            self._latest_token += 1

    # -- search / recommendations --------------------------------------

    def submit_search(self, query: str) -> FeedMode:
        """Run a search; an empty query clears any active filter."""
        query = query.strip()
        if not query:
            with self._lock:
                self.query = ""
                self.id_filter = None
                self.show_personalized = False
            self._invalidate_pending()
            return self.mode

        with self._lock:
            self.query = query
            self.show_personalized = False
            candidates = self.catalog.events
        ticket, ids = self._rank(lambda: self.provider.search_by_query(query, candidates), "Search")
        with self._lock:
            if self._is_current(ticket):
                self.id_filter = ids
            else:
                logger.info("Discarding stale search results for %r", query)
        return self.mode

    def clear_search(self) -> FeedMode:
        with self._lock:
            self.query = ""
            self.id_filter = None
            self.show_personalized = False
        self._invalidate_pending()
        return self.mode

    def set_for_you(self, enabled: bool) -> FeedMode:
        """Switch personalized mode on (fetching recommendations) or off."""
        with self._lock:
            self.query = ""
            self.show_personalized = enabled
            if not enabled:
                self.id_filter = None
        if enabled:
            self.refresh_recommendations()
        else:
            self._invalidate_pending()
        return self.mode

    def toggle_for_you(self) -> FeedMode:
        return self.set_for_you(not self.show_personalized)

    def refresh_recommendations(self) -> None:
        with self._lock:
            prefs = self.preferences
            location = self.location
            candidates = self.catalog.events
        ticket, ids = self._rank(
            lambda: self.provider.recommend(prefs, location, candidates), "Recommendation"
        )
        with self._lock:
            if self._is_current(ticket) and self.show_personalized:
                self.id_filter = ids
            else:
                logger.info("Discarding stale recommendations")

    # -- preferences ---------------------------------------------------

    def toggle_like(self, event_id: str) -> UserPreferences:
        """Like or unlike ``event_id``; raises ``KeyError`` if it is unknown."""
        with self._lock:
            event = self.catalog.get(event_id)
            if event is None:
                raise KeyError(event_id)
            self.preferences = toggle_like(self.preferences, event)
            prefs = self.preferences
            personalized = self.show_personalized
        if self.store:
            self.store.save(prefs)
        if personalized:
            self.refresh_recommendations()
        return prefs

    # -- location and distance -----------------------------------------

    def set_reference_location(self, location: Coordinate) -> None:
        with self._lock:
            self.location = location
            self.catalog.attach_distances(location)

    def resolve_location(self, source: Callable[[], Coordinate]) -> Coordinate:
        """Set the reference location from ``source`` (called once)."""
        location = source()
        self.set_reference_location(location)
        return location

    def set_max_distance(self, km: Optional[float]) -> None:
        if km is not None and km < 0:
            raise ValueError("max distance must be non-negative")
        with self._lock:
            self.max_distance_km = km

    # -- adding events -------------------------------------------------

    def draft_event(self, text: str) -> Optional[EventDraft]:
        """Ask the provider for a structured draft; ``None`` when it cannot."""
        if not text.strip():
            return None
        with self._lock:
            self._pending += 1
        try:
            return self.provider.parse_freeform_event(text)
        except Exception as exc:
            logger.error("Event draft failed: %s", exc)
            return None
        finally:
            with self._lock:
                self._pending -= 1

    def add_event(
        self,
        draft: EventDraft,
        location_label: str = "TBD",
        coordinates: Optional[Coordinate] = None,
    ) -> EventRecord:
        """Create an event from ``draft`` and put it at the front of the catalog."""
        try:
            date = to_iso_datetime(draft.suggested_time) or utc_now_iso()
        except ValueError:
            logger.info("Unparseable suggested time %r; using now", draft.suggested_time)
            date = utc_now_iso()

        with self._lock:
            event_id = make_event_id()
            while event_id in self.catalog:
                event_id = str(int(event_id) + 1)
            distance = None
            if coordinates is not None and self.location is not None:
                distance = distance_km(self.location, coordinates)
            event = EventRecord(
                id=event_id,
                title=draft.title,
                description=draft.description,
                date=date,
                location=location_label or "TBD",
                category=draft.category,
                image_url=placeholder_image_url(event_id),
                attendees=0,
                rating=0.0,
                coordinates=coordinates,
                distance_km=distance,
                tags=tuple(draft.tags),
            )
            self.catalog.add(event)
        logger.info("Added event %s (%s)", event.id, event.title)
        return event
