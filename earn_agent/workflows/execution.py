"""Execution workflow for one selected listing.

deep_analysis -> generate -> [publish] -> human_review -> submit

The publish node exists only when the graph is built with ``publish=True``
and only acts on dev-type bounties whose generation succeeded. A publish
failure is appended to the run's error text; it never fails the run.
"""

import logging
import re
from typing import Optional

from ..executor import CodegenInput, run_codegen
from ..models import ListingDetails
from ..publish import PublishInput, publish_to_github, repo_name_for
from ..tools import (
    SubmissionInput,
    ToolContext,
    fetch_comments,
    get_listing_details,
    submit_work,
)
from .state import ExecutionState, ReviewDecision

logger = logging.getLogger(__name__)

COMMENTS_TAKE = 50
DEFAULT_DELIVERABLE = "See description"
DEFAULT_TYPE = "bounty"
REJECTED_MESSAGE = "Submission not approved by human reviewer"
REVIEW_MESSAGE = (
    "Review the bounty output above. Resume with "
    "{ approved: true/false, link?, other_info?, eligibility_answers?, telegram? }"
)

_TELEGRAM_URL = re.compile(r"^https?://t\.me/")


def normalize_telegram(handle: Optional[str]) -> Optional[str]:
    """Turn "@alice", "alice" or a t.me URL into "http://t.me/alice"."""
    if not handle or not handle.strip():
        return None
    name = handle.strip()
    if name.startswith("@"):
        name = name[1:]
    name = _TELEGRAM_URL.sub("", name)
    return f"http://t.me/{name}"


def append_error(existing: Optional[str], message: str) -> str:
    return f"{existing}\n{message}" if existing else message


class ExecutionWorkflow:
    """Builds the execution graph around a tool context."""

    name = "execution"

    def __init__(self, context: ToolContext, publish: bool = True):
        self.context = context
        self.publish = publish

    @property
    def settings(self):
        return self.context.settings

    async def deep_analysis(self, state: ExecutionState) -> ExecutionState:
        """Fetch the full listing and its comments; derive the brief inputs."""
        slug = state["slug"]

        details = await get_listing_details(self.context, {"slug": slug})
        if not details.success:
            logger.warning(f"Listing details unavailable for {slug}: {details.error}")
        listing = details.listing or ListingDetails()

        comments = []
        if listing.id:
            result = await fetch_comments(
                self.context,
                {"listing_id": listing.id, "skip": 0, "take": COMMENTS_TAKE},
            )
            comments = [comment.model_dump() for comment in result.comments]

        description = "\n\n".join(
            part
            for part in (listing.description, listing.requirements, listing.eligibility)
            if part
        )

        return {
            "listing_id": listing.id,
            "title": listing.title or slug,
            "description": description,
            "type": listing.type or DEFAULT_TYPE,
            "requirements": listing.requirements or description,
            "deliverable_format": (
                listing.deliverables or listing.template or DEFAULT_DELIVERABLE
            ),
            "reward_amount": listing.reward_amount,
            "eligibility_questions": listing.eligibility_questions,
            "comments": comments,
        }

    async def generate(self, state: ExecutionState) -> ExecutionState:
        requirements = state.get("requirements", "")
        comments = state.get("comments") or []
        if comments:
            comment_lines = "\n".join(f"- {c.get('message', '')}" for c in comments)
            requirements += f"\n\nRelevant comments from the listing:\n{comment_lines}"

        result = await run_codegen(
            self.settings,
            CodegenInput(
                bounty_slug=state["slug"],
                bounty_title=state.get("title", state["slug"]),
                bounty_description=state.get("description", ""),
                bounty_type=state.get("type", DEFAULT_TYPE),
                requirements=requirements,
                deliverable_format=state.get("deliverable_format", DEFAULT_DELIVERABLE),
            ),
        )

        return {
            "workspace_path": result.workspace_path,
            "summary": result.summary,
            "artifacts": result.artifacts,
            "success": result.success,
            "error": result.error,
            "repo_url": result.repo_url,
        }

    async def publish_repo(self, state: ExecutionState) -> ExecutionState:
        if not (self.settings.is_dev_type(state.get("type")) and state.get("success")):
            return {"repo_url": None}

        if state.get("repo_url"):
            logger.info(f"Repository already created during generation: {state['repo_url']}")
            return {"repo_url": state["repo_url"]}

        result = await publish_to_github(
            PublishInput(
                workspace_path=state["workspace_path"],
                repo_name=repo_name_for(state["slug"]),
                description=state.get("title") or None,
            ),
            liveness=self.context.liveness,
        )
        if not result.success:
            return {
                "repo_url": None,
                "error": append_error(
                    state.get("error"), f"GitHub publish failed: {result.error}"
                ),
            }

        return {"repo_url": result.repo_url}

    async def human_review(self, state: ExecutionState) -> ExecutionState:
        """Halt until a human approves or rejects the generated work.

        Re-executed from the top on resume; everything before ``interrupt``
        must stay free of side effects.
        """
        from langgraph.types import interrupt

        repo_url = state.get("repo_url")
        message = REVIEW_MESSAGE
        if repo_url:
            message += (
                f" Published repository: {repo_url} "
                "(used as the submission link unless you provide one)."
            )

        decision = ReviewDecision.model_validate(
            interrupt(
                {
                    "title": state.get("title", ""),
                    "workspace_path": state.get("workspace_path", ""),
                    "summary": state.get("summary", ""),
                    "artifacts": state.get("artifacts", []),
                    "success": state.get("success", False),
                    "error": state.get("error"),
                    "repo_url": repo_url,
                    "message": message,
                }
            )
        )

        answers = decision.eligibility_answers
        return {
            "approved": decision.approved,
            "link": decision.link or repo_url,
            "other_info": decision.other_info,
            "eligibility_answers": (
                [answer.model_dump() for answer in answers] if answers is not None else None
            ),
            "telegram": decision.telegram,
        }

    async def submit(self, state: ExecutionState) -> ExecutionState:
        if not state.get("approved"):
            return {"submitted": False, "submit_error": REJECTED_MESSAGE}

        if not state.get("listing_id"):
            return {
                "submitted": False,
                "submit_error": f"No listing id known for {state['slug']}",
            }

        params = {
            "listing_id": state["listing_id"],
            "link": state.get("link"),
            "other_info": state.get("other_info"),
            "eligibility_answers": state.get("eligibility_answers"),
            "telegram": normalize_telegram(
                state.get("telegram") or self.settings.telegram_handle
            ),
        }
        result = await submit_work(self.context, SubmissionInput(**params))
        if not result.success:
            logger.warning(f"Submission for {state['slug']} failed: {result.error}")
            return {"submitted": False, "submit_error": result.error}

        self.context.liveness.track(f"submitted work for {state['slug']}", "awaiting results")
        return {"submitted": True, "submission_id": result.submission_id}

    def build(self, checkpointer=None):
        """Compile the graph; a checkpointer is required to suspend and resume."""
        from langgraph.graph import StateGraph, END

        workflow = StateGraph(ExecutionState)

        workflow.add_node("deep_analysis", self.deep_analysis)
        workflow.add_node("generate", self.generate)
        workflow.add_node("human_review", self.human_review)
        workflow.add_node("submit", self.submit)

        workflow.set_entry_point("deep_analysis")
        workflow.add_edge("deep_analysis", "generate")

        if self.publish:
            workflow.add_node("publish", self.publish_repo)
            workflow.add_edge("generate", "publish")
            workflow.add_edge("publish", "human_review")
        else:
            workflow.add_edge("generate", "human_review")

        workflow.add_edge("human_review", "submit")
        workflow.add_edge("submit", END)

        return workflow.compile(checkpointer=checkpointer)
