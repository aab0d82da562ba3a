"""LangGraph workflows: discovery and execution."""

from .discovery import DiscoveryWorkflow
from .execution import ExecutionWorkflow, normalize_telegram
from .state import DiscoveryState, ExecutionState, ReviewDecision, SelectionResume

__all__ = [
    "DiscoveryWorkflow",
    "ExecutionWorkflow",
    "normalize_telegram",
    "DiscoveryState",
    "ExecutionState",
    "ReviewDecision",
    "SelectionResume",
]
