"""Code-generation executor.

Runs the external coding-agent CLI inside a per-listing workspace:

1. Create ``<workspaces_dir>/<slug>`` (reused on repeat runs)
2. Write BRIEF.md with the full bounty context
3. Spawn the CLI with a prompt built from the same context; dev-type
   bounties also get instructions to publish a repository and record its
   URL in REPO_URL.txt
4. Collect the produced files, the optional repository URL, and a
   truncated copy of the CLI output as the summary
"""

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .config import Settings
from .process import run_command
from .prompts import BRIEF_TEMPLATE, CODEGEN_PROMPT, REPO_INSTRUCTIONS
from .publish import GITHUB_URL_PREFIX, repo_name_for
from .tools.context import ToolResult

logger = logging.getLogger(__name__)

BRIEF_FILE = "BRIEF.md"
REPO_URL_FILE = "REPO_URL.txt"
EXECUTION_TIMEOUT = 10 * 60
MAX_OUTPUT_BYTES = 10 * 1024 * 1024
SUMMARY_LIMIT = 1000
TRUNCATION_MARKER = "\n... (truncated)"


class CodegenInput(BaseModel):
    bounty_slug: str = Field(min_length=1, description="Unique slug for the workspace directory")
    bounty_title: str
    bounty_description: str
    bounty_type: str = Field(description="Bounty type: content, dev, design, analysis")
    requirements: str
    deliverable_format: str = Field(description="What to produce: code repo, report, article")


class CodegenResult(ToolResult):
    workspace_path: str
    summary: str = ""
    artifacts: List[str] = []
    repo_url: Optional[str] = None


def workspace_for(settings: Settings, slug: str) -> Path:
    """Workspace directory for a listing; the same slug always maps to the same path."""
    return settings.workspaces_dir / slug


def build_prompt(params: CodegenInput, dev_type: bool) -> str:
    prompt = CODEGEN_PROMPT.format(
        title=params.bounty_title,
        bounty_type=params.bounty_type,
        description=params.bounty_description,
        requirements=params.requirements,
        deliverable_format=params.deliverable_format,
    )
    if dev_type:
        prompt += REPO_INSTRUCTIONS.format(
            repo_name=repo_name_for(params.bounty_slug),
            repo_url_file=REPO_URL_FILE,
        )
    return prompt


def truncate_summary(output: str) -> str:
    if len(output) > SUMMARY_LIMIT:
        return output[:SUMMARY_LIMIT] + TRUNCATION_MARKER
    return output


def read_repo_url(workdir: Path) -> Optional[str]:
    """Return the URL recorded by the CLI, if present and well-formed."""
    path = workdir / REPO_URL_FILE
    if not path.is_file():
        return None
    url = path.read_text(encoding="utf-8").strip()
    if url.startswith(GITHUB_URL_PREFIX) and len(url) > len(GITHUB_URL_PREFIX):
        return url
    logger.warning(f"Ignoring malformed repository URL in {path}: {url!r}")
    return None


async def run_codegen(settings: Settings, params: CodegenInput) -> CodegenResult:
    """Produce the deliverable for one bounty.

    Never raises: any filesystem or process failure becomes a failed result
    carrying the workspace path.
    """
    workdir = workspace_for(settings, params.bounty_slug)

    try:
        workdir.mkdir(parents=True, exist_ok=True)

        brief = BRIEF_TEMPLATE.format(
            title=params.bounty_title,
            bounty_type=params.bounty_type,
            description=params.bounty_description,
            requirements=params.requirements,
            deliverable_format=params.deliverable_format,
        )
        (workdir / BRIEF_FILE).write_text(brief, encoding="utf-8")

        prompt = build_prompt(params, settings.is_dev_type(params.bounty_type))
        output = await run_command(
            settings.codegen_cli,
            ["--print", "--dangerously-skip-permissions", "-p", prompt],
            cwd=workdir,
            timeout=EXECUTION_TIMEOUT,
            max_output=MAX_OUTPUT_BYTES,
        )

        artifacts = sorted(p.name for p in workdir.iterdir() if p.name != BRIEF_FILE)
        repo_url = read_repo_url(workdir)
    except Exception as e:
        logger.warning(f"Code generation failed for {params.bounty_slug}: {e}")
        return CodegenResult(
            success=False,
            workspace_path=str(workdir),
            error=f"Code generation failed: {e}",
        )

    logger.info(
        f"Code generation finished for {params.bounty_slug}: {len(artifacts)} artifacts"
    )
    return CodegenResult(
        success=True,
        workspace_path=str(workdir),
        summary=truncate_summary(output),
        artifacts=artifacts,
        repo_url=repo_url,
    )
