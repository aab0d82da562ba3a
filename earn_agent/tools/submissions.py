"""Submission create/update tools.

Both build a sparse body: a field is sent only when the caller supplied it,
so an update never clears fields it did not mention.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..models import EligibilityAnswer, _opt_str
from .context import ToolContext, ToolResult, failure_message


class SubmissionInput(BaseModel):
    listing_id: str = Field(min_length=1, description="Listing ID")
    link: Optional[str] = Field(default=None, description="Primary submission link")
    other_info: Optional[str] = Field(
        default=None, description="Additional info / description of work"
    )
    tweet: Optional[str] = Field(default=None, description="Tweet link if required")
    eligibility_answers: Optional[List[EligibilityAnswer]] = None
    ask: Optional[float] = Field(
        default=None, description="Quote amount for variable compensation"
    )
    telegram: Optional[str] = Field(default=None, description="Telegram URL")

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"listingId": self.listing_id}
        if self.link:
            body["link"] = self.link
        if self.other_info:
            body["otherInfo"] = self.other_info
        if self.tweet:
            body["tweet"] = self.tweet
        if self.eligibility_answers is not None:
            body["eligibilityAnswers"] = [a.model_dump() for a in self.eligibility_answers]
        # ask is nullable: an explicit None is sent, an omitted one is not
        if "ask" in self.model_fields_set:
            body["ask"] = self.ask
        if self.telegram:
            body["telegram"] = self.telegram
        return body


class SubmitWorkResult(ToolResult):
    submission_id: Optional[str] = None


async def submit_work(
    ctx: ToolContext,
    params: Union[SubmissionInput, Mapping[str, Any]],
) -> SubmitWorkResult:
    """Create a submission for a listing."""
    params = SubmissionInput.model_validate(params)

    res = await ctx.client.request(
        "/api/agents/submissions/create", method="POST", body=params.to_body()
    )
    if not res.ok:
        return SubmitWorkResult(success=False, error=failure_message("Submission", res))

    data = res.data if isinstance(res.data, dict) else {}
    return SubmitWorkResult(success=True, submission_id=_opt_str(data, "id"))


async def update_submission(
    ctx: ToolContext,
    params: Union[SubmissionInput, Mapping[str, Any]],
) -> ToolResult:
    """Update fields of an existing submission."""
    params = SubmissionInput.model_validate(params)

    res = await ctx.client.request(
        "/api/agents/submissions/update", method="POST", body=params.to_body()
    )
    if not res.ok:
        return ToolResult(success=False, error=failure_message("Update", res))

    return ToolResult(success=True)
