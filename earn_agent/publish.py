"""Publish a workspace to a new GitHub repository via git and the gh CLI."""

import logging
import re
from typing import Optional

from pydantic import BaseModel, Field

from .liveness import LivenessTracker
from .process import run_command
from .tools.context import ToolResult

logger = logging.getLogger(__name__)

GITHUB_URL_PREFIX = "https://github.com/"
COMMAND_TIMEOUT = 60
COMMIT_MESSAGE = "Initial submission"

_URL_PATTERN = re.compile(r"https://github\.com/\S+")


class PublishInput(BaseModel):
    workspace_path: str = Field(description="Absolute path to the bounty workspace")
    repo_name: str = Field(min_length=1, description="GitHub repository name")
    description: Optional[str] = Field(default=None, description="Short repo description")
    is_private: bool = False


class PublishResult(ToolResult):
    repo_url: Optional[str] = None


def repo_name_for(slug: str) -> str:
    return f"bounty-{slug}"[:100]


async def _run(cmd: str, *args: str, cwd: str) -> str:
    return (await run_command(cmd, list(args), cwd=cwd, timeout=COMMAND_TIMEOUT)).strip()


async def publish_to_github(
    params: PublishInput, liveness: Optional[LivenessTracker] = None
) -> PublishResult:
    """Commit the workspace and push it to a freshly created remote.

    A failed command aborts the sequence; whatever local git state already
    exists is left in place.
    """
    cwd = params.workspace_path

    try:
        await _run("git", "init", cwd=cwd)
        await _run("git", "add", ".", cwd=cwd)
        await _run("git", "commit", "-m", COMMIT_MESSAGE, cwd=cwd)
        await _run("git", "branch", "-M", "main", cwd=cwd)

        visibility = "--private" if params.is_private else "--public"
        gh_args = ["repo", "create", params.repo_name, visibility, "--source", ".", "--push"]
        if params.description:
            gh_args += ["--description", params.description]
        gh_output = await _run("gh", *gh_args, cwd=cwd)

        match = _URL_PATTERN.search(gh_output)
        if match:
            repo_url = match.group(0)
        else:
            login = await _run("gh", "api", "user", "-q", ".login", cwd=cwd)
            repo_url = f"{GITHUB_URL_PREFIX}{login}/{params.repo_name}"
    except Exception as e:
        logger.warning(f"Publishing {params.repo_name} failed: {e}")
        return PublishResult(success=False, error=str(e))

    if liveness is not None:
        liveness.track(f"published {params.repo_name} to GitHub", "ready for submission")
    logger.info(f"Published {params.repo_name} to {repo_url}")
    return PublishResult(success=True, repo_url=repo_url)
