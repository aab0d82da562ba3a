"""Advisory liveness record read by the heartbeat tool."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LivenessTracker:
    """Last/next action and the time of the last notable step.

    One instance is owned by the orchestrator and shared by reference with
    every tool call. Writes are last-writer-wins and unlocked; the record is
    status information only.
    """

    last_action: str = "initialized"
    next_action: str = "awaiting discovery"
    last_activity: datetime = field(default_factory=_now)

    def track(self, action: str, next_action: str) -> None:
        """Record a notable step and what the agent plans to do next."""
        self.last_action = action
        self.next_action = next_action
        self.last_activity = _now()
