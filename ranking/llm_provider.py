"""Rank and parse events via OpenAI's structured output API."""
from __future__ import annotations

import json
import logging
import os
from datetime import date
from typing import List, Optional, Type, TypeVar

from openai import APIStatusError, OpenAI
from pydantic import BaseModel, Field

from catalog.config import OPENAI_MODEL, REASONING_EFFORT, REASONING_MODEL_PREFIXES
from catalog.schemas import Coordinate, EventCategory, EventDraft, EventRecord, UserPreferences
from catalog.utils import to_iso_datetime

from .provider import RankingProvider, profile_summary, recommendation_summary, search_summary

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

MAX_TAGS = 5


class ParsedEvent(BaseModel):
    title: str = Field(description="A catchy, short title for the event")
    description: str = Field(description="A compelling 2-sentence description")
    category: EventCategory = Field(description="The most fitting category")
    tags: List[str] = Field(default_factory=list, description="3-5 relevant lowercase tags")
    suggested_time: Optional[str] = Field(
        default=None,
        description="ISO 8601 date/time inferred from the input (e.g. 'next friday at 5pm'), or null",
    )


class RankedEvents(BaseModel):
    event_ids: List[str] = Field(default_factory=list, description="Event ids, best match first")


PARSE_PROMPT = (
    "You turn loose descriptions of community events into structured listings.\n"
    "- Output *only* fields defined by the schema.\n"
    "- If details are missing, creatively infer them so the event sounds exciting.\n"
    "- Pick exactly one category from the allowed values.\n"
    "- Give 3 to 5 short lowercase tags.\n"
    "- Resolve relative dates against the current date ({today}); use null if no time is implied."
)

SEARCH_PROMPT = (
    "You are an event recommendation engine.\n"
    "Given a user query and a list of available events, return the ids of events "
    "that match the user's intent, ranked by relevance.\n"
    "If no events match well, return an empty list. Only use ids from the list."
)

RECOMMEND_PROMPT = (
    "You are a hyper-personalized local concierge.\n"
    "Rank the available events for this user.\n"
    "Prioritize events that match their category interests and are geographically "
    "closer if distance is known.\n"
    "If the user has no history, prioritize popular events with high ratings.\n"
    "Return event ids ordered by recommendation strength (strongest first). "
    "Only use ids from the list."
)


def get_openai_client() -> OpenAI:
    """Get OpenAI client with API key from environment or secret file."""
    api_key = os.getenv("OPENAI_API_KEY")

    if not api_key:
        try:
            with open(os.path.expanduser("~/.secret_keys"), "r") as f:
                for line in f:
                    if line.startswith("OPENAI_API_KEY="):
                        api_key = line.split("=", 1)[1].strip()
                        break
        except FileNotFoundError:
            pass

    if not api_key:
        raise ValueError("OpenAI API key not found in environment or ~/.secret_keys")

    return OpenAI(api_key=api_key)


def normalize_tags(tags: List[str]) -> tuple[str, ...]:
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return tuple(cleaned[:MAX_TAGS])


class OpenAIRankingProvider(RankingProvider):
    """Ranking provider backed by an OpenAI model.

    Every public method degrades to ``None`` or ``[]`` on any failure
    (missing key, API errors, output that does not fit the schema).
    """

    def __init__(self, client: Optional[OpenAI] = None, model: str = OPENAI_MODEL,
                 reasoning_effort: Optional[str] = REASONING_EFFORT):
        self._client = client
        self.model = model
        if reasoning_effort and not model.startswith(REASONING_MODEL_PREFIXES):
            logger.info("Model %s takes no reasoning effort; ignoring %r", model, reasoning_effort)
            reasoning_effort = None
        self.reasoning_effort = reasoning_effort

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    def _parse(self, system: str, user: str, text_format: Type[T]) -> T:
        kwargs = {}
        if self.reasoning_effort:
            kwargs["reasoning"] = {"effort": self.reasoning_effort}
        try:
            resp = self.client.responses.parse(
                model=self.model,
                input=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                text_format=text_format,
                **kwargs,
            )
        except APIStatusError as exc:
            if exc.response.status_code == 429:
                raise RuntimeError(
                    "OpenAI API returned status 429: there's a good chance the account is out of money."
                ) from exc
            raise
        parsed = resp.output_parsed
        if parsed is None:
            raise ValueError("Model returned no structured output")
        return parsed

    def parse_freeform_event(self, text: str) -> Optional[EventDraft]:
        try:
            result = self._parse(
                PARSE_PROMPT.format(today=date.today().isoformat()),
                f'Input: "{text}"',
                ParsedEvent,
            )
        except Exception as exc:
            logger.error("AI parse error: %s", exc)
            return None

        try:
            suggested = to_iso_datetime(result.suggested_time)
        except ValueError:
            logger.info("Ignoring unparseable suggested time %r", result.suggested_time)
            suggested = None

        return EventDraft(
            title=result.title.strip(),
            description=result.description.strip(),
            category=result.category,
            tags=normalize_tags(result.tags),
            suggested_time=suggested,
        )

    def search_by_query(self, query: str, candidates: List[EventRecord]) -> List[str]:
        summaries = [search_summary(e) for e in candidates]
        user = f'User Query: "{query}"\n\nAvailable events:\n{json.dumps(summaries)}'
        try:
            return list(self._parse(SEARCH_PROMPT, user, RankedEvents).event_ids)
        except Exception as exc:
            logger.error("AI search error: %s", exc)
            return []

    def recommend(
        self,
        prefs: UserPreferences,
        location: Optional[Coordinate],
        candidates: List[EventRecord],
    ) -> List[str]:
        profile = profile_summary(prefs, candidates)
        summaries = [recommendation_summary(e) for e in candidates]
        user = (
            "User Profile:\n"
            f"- Favorite Categories: {profile['favorite_categories']}\n"
            f"- Previously Liked Events: {profile['liked_events']}\n"
            f"- Current Location Context: {'Known' if location else 'Unknown'}\n\n"
            f"Available Events:\n{json.dumps(summaries)}"
        )
        try:
            return list(self._parse(RECOMMEND_PROMPT, user, RankedEvents).event_ids)
        except Exception as exc:
            logger.error("AI recommendation error: %s", exc)
            return []
