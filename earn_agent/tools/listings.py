"""Listing discovery and detail tools."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..models import Listing, ListingDetails
from .context import ToolContext, ToolResult

logger = logging.getLogger(__name__)


class DiscoverListingsInput(BaseModel):
    take: int = Field(default=20, ge=1, description="Number of listings to fetch")
    deadline: Optional[str] = Field(
        default=None, description="Filter by deadline date (ISO string)"
    )


class DiscoverListingsResult(ToolResult):
    listings: List[Listing] = []


class ListingDetailsInput(BaseModel):
    slug: str = Field(min_length=1, description="Listing slug")


class ListingDetailsResult(ToolResult):
    listing: Optional[ListingDetails] = None


async def discover_listings(
    ctx: ToolContext,
    params: Union[DiscoverListingsInput, Mapping[str, Any]],
) -> DiscoverListingsResult:
    """Fetch live, agent-eligible listings.

    Each raw item is decoded on its own; a malformed item yields a listing
    with default fields rather than failing the batch.
    """
    params = DiscoverListingsInput.model_validate(params)

    query: Dict[str, Union[str, int]] = {"take": params.take}
    if params.deadline:
        query["deadline"] = params.deadline

    res = await ctx.client.request("/api/agents/listings/live", params=query)
    if not res.ok:
        return DiscoverListingsResult(success=False, error=f"Failed ({res.status})")

    raw = res.data if isinstance(res.data, list) else []
    listings = [Listing.from_raw(item) for item in raw]
    logger.info(f"Discovered {len(listings)} live listings")
    return DiscoverListingsResult(success=True, listings=listings)


async def get_listing_details(
    ctx: ToolContext,
    params: Union[ListingDetailsInput, Mapping[str, Any]],
) -> ListingDetailsResult:
    """Fetch the full record for one listing by slug."""
    params = ListingDetailsInput.model_validate(params)

    res = await ctx.client.request(f"/api/agents/listings/details/{params.slug}")
    if not res.ok:
        return ListingDetailsResult(success=False, error=f"Failed ({res.status})")

    ctx.liveness.track(f"fetched details for {params.slug}", "analyzing requirements")
    return ListingDetailsResult(success=True, listing=ListingDetails.from_raw(res.data))
