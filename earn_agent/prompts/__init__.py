"""Prompt templates for the earn agent."""

from .codegen import BRIEF_TEMPLATE, CODEGEN_PROMPT, REPO_INSTRUCTIONS
from .rank import RANK_PROMPT, SCOUT_INSTRUCTIONS

__all__ = [
    "BRIEF_TEMPLATE",
    "CODEGEN_PROMPT",
    "REPO_INSTRUCTIONS",
    "RANK_PROMPT",
    "SCOUT_INSTRUCTIONS",
]
