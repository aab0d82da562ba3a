"""FastAPI endpoints for driving the agent.

This module provides REST endpoints to:
- Start discovery and pick listings from the ranked result
- Start execution for a listing and approve or reject the output
- Inspect any run
- Report heartbeat and register the agent
"""

import logging
import uuid
from typing import List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .agent import EarnOrchestrator, WorkflowRun
from .errors import WorkflowStateError
from .models import EligibilityAnswer
from .tools import HeartbeatResult, RegisterAgentResult

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Earn Agent API",
    description="Bounty discovery and execution workflows with human checkpoints",
    version="1.0.0",
)


# Request/Response models
class StartDiscoveryRequest(BaseModel):
    take: int = Field(default=20, ge=1)
    deadline: Optional[str] = None


class SelectionRequest(BaseModel):
    selected_slugs: List[str]


class StartExecutionRequest(BaseModel):
    slug: str = Field(min_length=1)


class StartExecutionResponse(BaseModel):
    status: str
    run_id: str


class ReviewRequest(BaseModel):
    approved: bool
    link: Optional[str] = None
    other_info: Optional[str] = None
    eligibility_answers: Optional[List[EligibilityAnswer]] = None
    telegram: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)


# Orchestrator instance (initialized lazily)
_orchestrator = None


def _get_orchestrator() -> EarnOrchestrator:
    """Get or create the EarnOrchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = EarnOrchestrator()
    return _orchestrator


def _http_error(e: WorkflowStateError) -> HTTPException:
    return HTTPException(status_code=404 if e.not_found else 409, detail=str(e))


async def _run_execution(slug: str, run_id: str) -> None:
    try:
        await _get_orchestrator().start_execution(slug, run_id=run_id)
    except Exception:
        logger.exception(f"Execution run {run_id} for {slug} crashed")
        raise


# Endpoints
@app.post("/api/discovery/start", response_model=WorkflowRun)
async def start_discovery(request: StartDiscoveryRequest):
    """Fetch and rank live listings; the run suspends awaiting a selection."""
    return await _get_orchestrator().start_discovery(
        take=request.take, deadline=request.deadline
    )


@app.post("/api/discovery/{run_id}/resume", response_model=WorkflowRun)
async def resume_discovery(run_id: str, request: SelectionRequest):
    """Supply the selected slugs and complete the discovery run."""
    try:
        return await _get_orchestrator().resume_discovery(run_id, request.model_dump())
    except WorkflowStateError as e:
        raise _http_error(e)


@app.post("/api/execution/start", response_model=StartExecutionResponse)
async def start_execution(request: StartExecutionRequest, background_tasks: BackgroundTasks):
    """Start execution for one listing.

    Code generation can take minutes, so the run proceeds in the
    background. Poll /api/runs/execution/{run_id} until it is suspended
    for review.
    """
    run_id = f"{request.slug}-{uuid.uuid4().hex[:8]}"
    background_tasks.add_task(_run_execution, request.slug, run_id)
    return StartExecutionResponse(status="running", run_id=run_id)


@app.post("/api/execution/{run_id}/resume", response_model=WorkflowRun)
async def resume_execution(run_id: str, request: ReviewRequest):
    """Approve (and submit) or reject the generated work."""
    try:
        return await _get_orchestrator().resume_execution(run_id, request.model_dump())
    except WorkflowStateError as e:
        raise _http_error(e)


@app.get("/api/runs/{workflow}/{run_id}", response_model=WorkflowRun)
async def get_run(workflow: str, run_id: str):
    """Current state of a run: running, suspended (with payload) or completed."""
    try:
        return await _get_orchestrator().get_run(workflow, run_id)
    except WorkflowStateError as e:
        raise _http_error(e)


@app.post("/api/runs/{workflow}/{run_id}/reinvoke", response_model=WorkflowRun)
async def reinvoke_run(workflow: str, run_id: str):
    """Re-run the suspended step without resume data; it halts again."""
    try:
        return await _get_orchestrator().reinvoke(workflow, run_id)
    except WorkflowStateError as e:
        raise _http_error(e)


@app.get("/api/heartbeat", response_model=HeartbeatResult)
async def get_heartbeat():
    return _get_orchestrator().heartbeat()


@app.post("/api/agents/register", response_model=RegisterAgentResult)
async def register(request: RegisterRequest):
    return await _get_orchestrator().register(request.name)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "earn-agent"}
