"""Discovery workflow: fetch live listings, rank them, wait for a human pick."""

import logging

from ..models import Listing
from ..ranking import ScoutRanker
from ..tools import ToolContext, discover_listings
from .state import DiscoveryState, SelectionResume

logger = logging.getLogger(__name__)

SELECTION_MESSAGE = (
    "Review the ranked bounties above and provide selected_slugs to resume."
)


class DiscoveryWorkflow:
    """Builds the discovery graph around a tool context and a ranker."""

    name = "discovery"

    def __init__(self, context: ToolContext, ranker: ScoutRanker):
        self.context = context
        self.ranker = ranker

    async def fetch_listings(self, state: DiscoveryState) -> DiscoveryState:
        result = await discover_listings(
            self.context,
            {"take": state.get("take", 20), "deadline": state.get("deadline")},
        )
        if not result.success:
            logger.warning(f"Listing discovery failed: {result.error}")
            return {"listings": [], "error": result.error}

        return {"listings": [listing.model_dump() for listing in result.listings]}

    async def rank_listings(self, state: DiscoveryState) -> DiscoveryState:
        listings = [Listing.model_validate(item) for item in state.get("listings", [])]
        ranking = await self.ranker.rank(listings)
        logger.info(f"Ranked {len(ranking.ranked)} listings ({ranking.source})")
        return {
            "ranked_listings": [item.model_dump() for item in ranking.ranked],
            "ranking_source": ranking.source,
        }

    async def await_selection(self, state: DiscoveryState) -> DiscoveryState:
        """Halt until a human supplies the selected slugs.

        Re-executed from the top on resume; everything before ``interrupt``
        must stay free of side effects.
        """
        from langgraph.types import interrupt

        payload = {
            "ranked_listings": state.get("ranked_listings", []),
            "message": SELECTION_MESSAGE,
        }
        if state.get("error"):
            payload["error"] = state["error"]

        selection = SelectionResume.model_validate(interrupt(payload))
        return {"selected_slugs": selection.selected_slugs}

    def build(self, checkpointer=None):
        """Compile the graph; a checkpointer is required to suspend and resume."""
        from langgraph.graph import StateGraph, END

        workflow = StateGraph(DiscoveryState)

        workflow.add_node("fetch", self.fetch_listings)
        workflow.add_node("rank", self.rank_listings)
        workflow.add_node("await_selection", self.await_selection)

        workflow.set_entry_point("fetch")
        workflow.add_edge("fetch", "rank")
        workflow.add_edge("rank", "await_selection")
        workflow.add_edge("await_selection", END)

        return workflow.compile(checkpointer=checkpointer)
