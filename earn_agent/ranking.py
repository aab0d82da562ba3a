"""Ranking of discovered listings by the scout model.

The model's free-form text is parsed into a ``RankingResult`` tagged with
where the ranking came from:

- "model": the text parsed as a JSON array
- "fallback": the model was unreachable or its text was not a JSON array;
  listings keep their order, rank is the 1-based position and only the
  first three are recommended
- "empty": nothing to rank, the model was not called
"""

import json
import logging
import re
from typing import Any, List, Literal, Optional, Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel

from .config import Settings
from .models import Listing, RankedListing
from .prompts import RANK_PROMPT, SCOUT_INSTRUCTIONS

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Auto-ranked by position"
FALLBACK_RECOMMENDED = 3

_FENCE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```", re.IGNORECASE)


class RankingResult(BaseModel):
    source: Literal["model", "fallback", "empty"]
    ranked: List[RankedListing]


def fallback_ranking(listings: Sequence[Listing]) -> RankingResult:
    return RankingResult(
        source="fallback",
        ranked=[
            RankedListing(
                **listing.model_dump(),
                rank=i + 1,
                reasoning=FALLBACK_REASONING,
                recommended=i < FALLBACK_RECOMMENDED,
            )
            for i, listing in enumerate(listings)
        ],
    )


def parse_ranking(text: str, listings: Sequence[Listing]) -> RankingResult:
    """Parse the model output, falling back to positional ranking."""
    candidate = text.strip()
    fenced = _FENCE.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    try:
        parsed = json.loads(candidate)
    except (ValueError, TypeError):
        logger.warning("Ranking output is not JSON, using positional ranking")
        return fallback_ranking(listings)

    if not isinstance(parsed, list):
        logger.warning("Ranking output is not a JSON array, using positional ranking")
        return fallback_ranking(listings)

    ranked = [
        RankedListing.from_model_item(item, position=i + 1)
        for i, item in enumerate(parsed)
        if isinstance(item, dict)
    ]
    return RankingResult(source="model", ranked=ranked)


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content)


class ScoutRanker:
    """Ranks listings with a LangChain chat model.

    The model is created lazily so constructing the ranker never needs
    credentials; tests pass their own ``llm``.
    """

    def __init__(self, settings: Settings, llm: Optional[Any] = None):
        self.settings = settings
        self._llm = llm

    def _get_llm(self):
        if self._llm is None:
            from langchain_anthropic import ChatAnthropic

            self._llm = ChatAnthropic(
                model=self.settings.model_name,
                api_key=self.settings.model_api_key or None,
                temperature=0.1,
                max_tokens=4096,
            )
        return self._llm

    async def rank(self, listings: Sequence[Listing]) -> RankingResult:
        if not listings:
            return RankingResult(source="empty", ranked=[])

        prompt = RANK_PROMPT.format(
            listings_json=json.dumps(
                [listing.model_dump() for listing in listings], indent=2
            )
        )

        try:
            response = await self._get_llm().ainvoke(
                [
                    SystemMessage(content=SCOUT_INSTRUCTIONS),
                    HumanMessage(content=prompt),
                ]
            )
        except Exception as e:
            logger.warning(f"Ranking model unavailable, using positional ranking: {e}")
            return fallback_ranking(listings)

        return parse_ranking(_message_text(response), listings)
