"""FastAPI application for the LocalPulse events service."""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, model_validator

from catalog.config import DISTANCE_CHOICES_KM, configure_logging
from catalog.event_catalog import EventCatalog, load_seed_events
from catalog.geolocation import resolve_reference_location
from catalog.preferences import PreferenceStore
from catalog.schemas import Coordinate, EventCategory, EventDraft, EventRecord, UserPreferences
from ranking.feed import EventFeed
from ranking.llm_provider import OpenAIRankingProvider

configure_logging()

VERSION = "1.0.0"

app = FastAPI(
    title="LocalPulse API",
    description="Discover, search and add local events with AI-assisted ranking",
    version=VERSION,
)

# Provider calls block on the network, so they run off the event loop
executor = ThreadPoolExecutor(max_workers=4)

_feed: Optional[EventFeed] = None


def build_feed() -> EventFeed:
    """Create the feed from the seed catalog and stored preferences."""
    feed = EventFeed(
        catalog=EventCatalog(load_seed_events()),
        provider=OpenAIRankingProvider(),
        store=PreferenceStore(),
    )
    feed.resolve_location(resolve_reference_location)
    return feed


def get_feed() -> EventFeed:
    global _feed
    if _feed is None:
        _feed = build_feed()
    return _feed


async def _run_blocking(func, *args):
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, func, *args)


class CoordinateModel(BaseModel):
    latitude: float
    longitude: float


class EventModel(BaseModel):
    """Event as returned to clients."""
    id: str
    title: str
    description: str
    date: str  # ISO datetime string
    location: str
    category: EventCategory
    image_url: str
    attendees: int
    rating: float
    coordinates: Optional[CoordinateModel] = None
    distance_km: Optional[float] = None
    tags: List[str]
    liked: bool = False

    @classmethod
    def from_record(cls, event: EventRecord, prefs: UserPreferences) -> "EventModel":
        coords = None
        if event.coordinates is not None:
            coords = CoordinateModel(
                latitude=event.coordinates.latitude, longitude=event.coordinates.longitude
            )
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            date=event.date,
            location=event.location,
            category=event.category,
            image_url=event.image_url,
            attendees=event.attendees,
            rating=event.rating,
            coordinates=coords,
            distance_km=event.distance_km,
            tags=list(event.tags),
            liked=prefs.is_liked(event.id),
        )


class FeedResponse(BaseModel):
    mode: str
    heading: str
    query: str
    count: int
    matches: Optional[int] = None
    max_distance_km: Optional[float] = None
    distance_choices_km: List[int] = Field(default_factory=lambda: list(DISTANCE_CHOICES_KM))
    is_busy: bool
    events: List[EventModel]


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str


class SearchRequest(BaseModel):
    query: str = ""


class ForYouRequest(BaseModel):
    enabled: Optional[bool] = None  # omitted means toggle


class LocationRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @model_validator(mode="after")
    def both_or_neither(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class DistanceFilterRequest(BaseModel):
    max_distance_km: Optional[float] = Field(default=None, ge=0)


class PreferencesResponse(BaseModel):
    likedEventIds: List[str]
    likedCategories: Dict[str, int]


class DraftRequest(BaseModel):
    text: str


class DraftModel(BaseModel):
    title: str
    description: str
    category: EventCategory
    tags: List[str] = Field(default_factory=list)
    suggested_time: Optional[str] = None


class DraftResponse(BaseModel):
    success: bool
    draft: Optional[DraftModel] = None


class NewEventRequest(DraftModel):
    location: str = "TBD"
    latitude: Optional[float] = None
    longitude: Optional[float] = None


def _feed_response(feed: EventFeed) -> FeedResponse:
    events = feed.displayed()
    prefs = feed.preferences
    mode = feed.mode
    return FeedResponse(
        mode=mode.value,
        heading=mode.heading,
        query=feed.query,
        count=len(events),
        matches=feed.match_count(),
        max_distance_km=feed.max_distance_km,
        is_busy=feed.is_busy,
        events=[EventModel.from_record(e, prefs) for e in events],
    )


def _health(status: str) -> HealthResponse:
    return HealthResponse(
        status=status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=VERSION,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return _health("healthy")


@app.get("/live", response_model=HealthResponse)
async def liveness_check():
    """Liveness check endpoint for container orchestration."""
    return _health("alive")


@app.get("/ready", response_model=HealthResponse)
async def readiness_check():
    """Readiness check endpoint for container orchestration."""
    return _health("ready")


@app.get("/events", response_model=FeedResponse)
async def list_events(feed: EventFeed = Depends(get_feed)):
    """Events currently in view, in display order."""
    return _feed_response(feed)


@app.post("/search", response_model=FeedResponse)
async def search_events(request: SearchRequest, feed: EventFeed = Depends(get_feed)):
    """
    Rank events against a natural-language query.

    An empty query clears the search and returns to trending events.
    """
    await _run_blocking(feed.submit_search, request.query)
    return _feed_response(feed)


@app.delete("/search", response_model=FeedResponse)
async def clear_search(feed: EventFeed = Depends(get_feed)):
    feed.clear_search()
    return _feed_response(feed)


@app.post("/for-you", response_model=FeedResponse)
async def for_you(request: ForYouRequest, feed: EventFeed = Depends(get_feed)):
    """Switch personalized recommendations on or off."""
    enabled = not feed.show_personalized if request.enabled is None else request.enabled
    await _run_blocking(feed.set_for_you, enabled)
    return _feed_response(feed)


@app.post("/events/{event_id}/like", response_model=PreferencesResponse)
async def like_event(event_id: str, feed: EventFeed = Depends(get_feed)):
    try:
        prefs = await _run_blocking(feed.toggle_like, event_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Event not found")
    return PreferencesResponse(**prefs.to_dict())


@app.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(feed: EventFeed = Depends(get_feed)):
    return PreferencesResponse(**feed.preferences.to_dict())


@app.post("/location", response_model=CoordinateModel)
async def set_location(request: LocationRequest, feed: EventFeed = Depends(get_feed)):
    """
    Set the user's position.

    Without coordinates (for example when the browser denied access) the
    location already resolved this session is kept; if there is none yet,
    the configured geolocation source or the fallback location is used.
    """
    if request.latitude is not None:
        location = Coordinate(latitude=request.latitude, longitude=request.longitude)
        feed.set_reference_location(location)
    elif feed.location is not None:
        location = feed.location
    else:
        location = await _run_blocking(feed.resolve_location, resolve_reference_location)
    return CoordinateModel(latitude=location.latitude, longitude=location.longitude)


@app.put("/filters/distance", response_model=FeedResponse)
async def set_distance_filter(request: DistanceFilterRequest, feed: EventFeed = Depends(get_feed)):
    feed.set_max_distance(request.max_distance_km)
    return _feed_response(feed)


@app.post("/events/draft", response_model=DraftResponse)
async def draft_event(request: DraftRequest, feed: EventFeed = Depends(get_feed)):
    """Turn a loose description into a structured event draft."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Describe the event first")
    draft = await _run_blocking(feed.draft_event, request.text)
    if draft is None:
        return DraftResponse(success=False)
    return DraftResponse(
        success=True,
        draft=DraftModel(
            title=draft.title,
            description=draft.description,
            category=draft.category,
            tags=list(draft.tags),
            suggested_time=draft.suggested_time,
        ),
    )


@app.post("/events", response_model=EventModel, status_code=201)
async def create_event(request: NewEventRequest, feed: EventFeed = Depends(get_feed)):
    """Add a reviewed draft to the front of the catalog."""
    coords = None
    if request.latitude is not None and request.longitude is not None:
        coords = Coordinate(latitude=request.latitude, longitude=request.longitude)
    draft = EventDraft(
        title=request.title,
        description=request.description,
        category=request.category,
        tags=tuple(request.tags),
        suggested_time=request.suggested_time,
    )
    event = feed.add_event(draft, location_label=request.location, coordinates=coords)
    return EventModel.from_record(event, feed.preferences)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "LocalPulse API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
