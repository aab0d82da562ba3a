"""Earn Agent - bounty discovery and execution orchestrator.

This package discovers Superteam Earn listings, ranks them with a language
model, drafts deliverables with a code-generation CLI, optionally publishes
them to GitHub, and submits the work once a human approves.

Key components:
- EarnOrchestrator: owns both workflows, the checkpointer and the liveness record
- DiscoveryWorkflow / ExecutionWorkflow: LangGraph state machines with human checkpoints
- EarnApiClient: marketplace REST client
- Settings: environment-backed configuration
"""

from .agent import EarnOrchestrator, WorkflowRun
from .api_client import ApiResponse, EarnApiClient
from .config import Settings
from .liveness import LivenessTracker
from .workflows import DiscoveryWorkflow, ExecutionWorkflow

__all__ = [
    "EarnOrchestrator",
    "WorkflowRun",
    "ApiResponse",
    "EarnApiClient",
    "Settings",
    "LivenessTracker",
    "DiscoveryWorkflow",
    "ExecutionWorkflow",
]
