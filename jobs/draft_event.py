"""Turn a free-text event description into a structured draft."""
from __future__ import annotations

import logging
import sys

from catalog.config import configure_logging
from ranking.llm_provider import OpenAIRankingProvider

logger = logging.getLogger(__name__)
configure_logging()


def run(text: str) -> None:
    logger.info("Requesting draft for %d characters of text", len(text))
    draft = OpenAIRankingProvider().parse_freeform_event(text)
    if draft is None:
        print("❌ Could not generate event details")
        return
    print("✅ Title:", draft.title)
    print("   Category:", draft.category.value)
    print("   When:", draft.suggested_time or "not specified")
    print("   Tags:", ", ".join(draft.tags))
    print("  ", draft.description)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m jobs.draft_event <description>")
        raise SystemExit(1)
    run(sys.argv[1])
