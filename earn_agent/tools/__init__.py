"""Typed marketplace operations used by the workflows and the API."""

from .context import ToolContext, ToolResult
from .listings import (
    DiscoverListingsInput,
    DiscoverListingsResult,
    ListingDetailsInput,
    ListingDetailsResult,
    discover_listings,
    get_listing_details,
)
from .comments import (
    FetchCommentsInput,
    FetchCommentsResult,
    PostCommentInput,
    PostCommentResult,
    fetch_comments,
    post_comment,
)
from .agents import RegisterAgentInput, RegisterAgentResult, register_agent
from .submissions import SubmissionInput, SubmitWorkResult, submit_work, update_submission
from .heartbeat import HeartbeatResult, heartbeat

__all__ = [
    "ToolContext",
    "ToolResult",
    "DiscoverListingsInput",
    "DiscoverListingsResult",
    "ListingDetailsInput",
    "ListingDetailsResult",
    "discover_listings",
    "get_listing_details",
    "FetchCommentsInput",
    "FetchCommentsResult",
    "PostCommentInput",
    "PostCommentResult",
    "fetch_comments",
    "post_comment",
    "RegisterAgentInput",
    "RegisterAgentResult",
    "register_agent",
    "SubmissionInput",
    "SubmitWorkResult",
    "submit_work",
    "update_submission",
    "HeartbeatResult",
    "heartbeat",
]
