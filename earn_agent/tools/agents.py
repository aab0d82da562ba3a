"""Agent registration."""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..models import _opt_str
from .context import ToolContext, ToolResult, failure_message


class RegisterAgentInput(BaseModel):
    name: str = Field(min_length=1, description="Unique agent name")


class RegisterAgentResult(ToolResult):
    agent_id: Optional[str] = None
    api_key: Optional[str] = None
    claim_code: Optional[str] = None
    username: Optional[str] = None


async def register_agent(
    ctx: ToolContext,
    params: Union[RegisterAgentInput, Mapping[str, Any]],
) -> RegisterAgentResult:
    """Register a new agent identity.

    Sent without the bearer token: registration is what issues one.
    """
    params = RegisterAgentInput.model_validate(params)

    res = await ctx.client.request(
        "/api/agents", method="POST", body={"name": params.name}, auth=False
    )
    if not res.ok:
        return RegisterAgentResult(success=False, error=failure_message("Registration", res))

    data = res.data if isinstance(res.data, dict) else {}
    return RegisterAgentResult(
        success=True,
        agent_id=_opt_str(data, "agentId"),
        api_key=_opt_str(data, "apiKey"),
        claim_code=_opt_str(data, "claimCode"),
        username=_opt_str(data, "username"),
    )
