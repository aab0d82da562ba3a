"""Heartbeat: liveness and readiness report, computed locally."""

from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel

from ..config import Settings
from ..liveness import LivenessTracker

VERSION = "earn-agent-mvp"
CAPABILITIES = ("register", "listings", "submit", "claim")

Status = Literal["ok", "degraded", "blocked"]


class HeartbeatResult(BaseModel):
    status: Status
    agent_name: str
    time: str
    version: str
    capabilities: List[str]
    last_action: str
    next_action: str


def resolve_status(settings: Settings) -> Status:
    """blocked without a marketplace token, degraded without a model token."""
    if not settings.api_key:
        return "blocked"
    if not settings.model_api_key:
        return "degraded"
    return "ok"


def heartbeat(settings: Settings, liveness: LivenessTracker) -> HeartbeatResult:
    status = resolve_status(settings)

    last_action = liveness.last_action
    if status == "blocked":
        last_action = f"{last_action} - blocked: missing SUPERTEAM_API_KEY"

    return HeartbeatResult(
        status=status,
        agent_name=settings.agent_name,
        time=datetime.now(timezone.utc).isoformat(),
        version=VERSION,
        capabilities=list(CAPABILITIES),
        last_action=last_action,
        next_action=liveness.next_action,
    )
