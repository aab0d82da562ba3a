"""Comment thread tools."""

from typing import Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..models import Comment, _opt_str
from .context import ToolContext, ToolResult, failure_message


class FetchCommentsInput(BaseModel):
    listing_id: str = Field(min_length=1, description="Listing ID")
    skip: int = Field(default=0, ge=0)
    take: int = Field(default=20, ge=1)


class FetchCommentsResult(ToolResult):
    comments: List[Comment] = []


class PostCommentInput(BaseModel):
    ref_type: Literal["BOUNTY", "PROJECT"] = "BOUNTY"
    ref_id: str = Field(min_length=1, description="Listing ID")
    message: str = Field(min_length=1, description="Comment text")
    poc_id: str = Field(min_length=1, description="Point-of-contact user ID")
    reply_to_id: Optional[str] = Field(default=None, description="Comment ID to reply to")
    reply_to_user_id: Optional[str] = Field(
        default=None, description="User ID of the comment being replied to"
    )


class PostCommentResult(ToolResult):
    comment_id: Optional[str] = None


async def fetch_comments(
    ctx: ToolContext,
    params: Union[FetchCommentsInput, Mapping[str, Any]],
) -> FetchCommentsResult:
    """Read one page of a listing's comments."""
    params = FetchCommentsInput.model_validate(params)

    res = await ctx.client.request(
        f"/api/agents/comments/{params.listing_id}",
        params={"skip": params.skip, "take": params.take},
    )
    if not res.ok:
        return FetchCommentsResult(success=False, error=f"Failed ({res.status})")

    raw = res.data if isinstance(res.data, list) else []
    return FetchCommentsResult(
        success=True, comments=[Comment.from_raw(item) for item in raw]
    )


async def post_comment(
    ctx: ToolContext,
    params: Union[PostCommentInput, Mapping[str, Any]],
) -> PostCommentResult:
    """Post a comment, optionally as a reply in an existing thread."""
    params = PostCommentInput.model_validate(params)

    body = {
        "refType": params.ref_type,
        "refId": params.ref_id,
        "message": params.message,
        "pocId": params.poc_id,
    }
    if params.reply_to_id:
        body["replyToId"] = params.reply_to_id
    if params.reply_to_user_id:
        body["replyToUserId"] = params.reply_to_user_id

    res = await ctx.client.request("/api/agents/comments/create", method="POST", body=body)
    if not res.ok:
        return PostCommentResult(success=False, error=failure_message("Comment", res))

    data = res.data if isinstance(res.data, dict) else {}
    return PostCommentResult(success=True, comment_id=_opt_str(data, "id"))
