"""Dependencies shared by every tool call."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from ..api_client import ApiResponse, EarnApiClient
from ..config import Settings
from ..liveness import LivenessTracker


@dataclass
class ToolContext:
    """Marketplace client, settings and the liveness record, passed by reference."""

    settings: Settings
    client: EarnApiClient
    liveness: LivenessTracker = field(default_factory=LivenessTracker)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ToolContext":
        return cls(settings=settings, client=EarnApiClient(settings))


class ToolResult(BaseModel):
    """Base shape of every tool output."""

    success: bool
    error: Optional[str] = None


def failure_message(action: str, res: ApiResponse) -> str:
    """Format a write failure as "<action> failed (<status>): <message>"."""
    message = None
    if isinstance(res.data, dict):
        message = res.data.get("message")
    return f"{action} failed ({res.status}): {message or 'Unknown error'}"
