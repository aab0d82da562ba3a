"""Orchestrator owning the workflows, their checkpointer and shared state.

Each workflow run is a LangGraph thread keyed by ``<workflow>:<run_id>``.
Suspension is a LangGraph ``interrupt``; the paused state lives in the
checkpointer (PostgreSQL in production, in-memory for development), so a
run can be resumed by any process sharing the database.

Entry points:
- start_discovery / resume_discovery
- start_execution / resume_execution
- get_run / reinvoke
- heartbeat / register
"""

import logging
import uuid
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel

from .config import Settings
from .errors import WorkflowStateError
from .ranking import ScoutRanker
from .tools import HeartbeatResult, RegisterAgentResult, ToolContext, heartbeat, register_agent
from .workflows import (
    DiscoveryWorkflow,
    ExecutionWorkflow,
    ReviewDecision,
    SelectionResume,
)

logger = logging.getLogger(__name__)

WorkflowName = Literal["discovery", "execution"]


class WorkflowRun(BaseModel):
    """Externally visible state of one workflow run."""

    run_id: str
    workflow: WorkflowName
    status: Literal["running", "suspended", "completed"]
    step: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    result: Optional[Dict[str, Any]] = None


def _result(workflow: str, values: Mapping[str, Any]) -> Dict[str, Any]:
    if workflow == "discovery":
        return {"selected_slugs": values.get("selected_slugs", [])}
    return {
        "submitted": values.get("submitted", False),
        "submission_id": values.get("submission_id"),
        "error": values.get("submit_error"),
    }


class EarnOrchestrator:
    """
    Runs the discovery and execution workflows.

    Usage:
        orchestrator = EarnOrchestrator(Settings.from_env())
        run = await orchestrator.start_discovery(take=10)
        run = await orchestrator.resume_discovery(run.run_id, {"selected_slugs": ["audit-x"]})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        checkpointer=None,
        ranker: Optional[ScoutRanker] = None,
        context: Optional[ToolContext] = None,
        publish_repos: bool = True,
    ):
        """
        Args:
            settings: Process settings; read from the environment when omitted
            checkpointer: LangGraph checkpointer; chosen from DATABASE_URL when omitted
            ranker: Listing ranker; a ScoutRanker on the configured model by default
            context: Tool context (client + liveness); built from settings by default
            publish_repos: Include the GitHub publish step in the execution graph
        """
        self.settings = settings or Settings.from_env()
        self.context = context or ToolContext.from_settings(self.settings)
        self.ranker = ranker or ScoutRanker(self.settings)
        self.publish_repos = publish_repos
        self.checkpointer = checkpointer

        self.graphs: Dict[str, Any] = {}
        self._pool = None

    async def set_up(self) -> None:
        """Create the checkpointer and compile both graphs. Idempotent."""
        if self.graphs:
            return

        if self.checkpointer is None:
            self.checkpointer = await self._get_checkpointer()

        self.graphs = {
            "discovery": DiscoveryWorkflow(self.context, self.ranker).build(
                self.checkpointer
            ),
            "execution": ExecutionWorkflow(
                self.context, publish=self.publish_repos
            ).build(self.checkpointer),
        }

        logger.info(
            "EarnOrchestrator initialized",
            extra={
                "base_url": self.settings.base_url,
                "model_name": self.settings.model_name,
                "publish_repos": self.publish_repos,
                "checkpointer": type(self.checkpointer).__name__,
            },
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def _get_checkpointer(self):
        """PostgreSQL when DATABASE_URL is configured, in-memory otherwise."""
        database_url = self.settings.database_url

        if database_url:
            from langgraph.checkpoint.postgres.aio import AsyncPostgresSaver
            from psycopg_pool import AsyncConnectionPool

            self._pool = AsyncConnectionPool(
                conninfo=database_url,
                max_size=10,
                kwargs={"autocommit": True, "prepare_threshold": 0},
                open=False,
            )
            await self._pool.open()
            logger.info("Using PostgreSQL checkpointer")
            return AsyncPostgresSaver(self._pool)

        from langgraph.checkpoint.memory import MemorySaver

        logger.warning("DATABASE_URL not set - using MemorySaver (runs are lost on restart)")
        return MemorySaver()

    # ==========================================
    # Discovery
    # ==========================================

    async def start_discovery(
        self,
        take: int = 20,
        deadline: Optional[str] = None,
        run_id: Optional[str] = None,
    ) -> WorkflowRun:
        run_id = run_id or f"discovery-{uuid.uuid4().hex[:8]}"
        logger.info(f"Starting discovery run {run_id} (take={take})")
        return await self._start("discovery", run_id, {"take": take, "deadline": deadline})

    async def resume_discovery(
        self,
        run_id: str,
        selection: Optional[Union[SelectionResume, Mapping[str, Any]]] = None,
    ) -> WorkflowRun:
        """Complete a suspended discovery run with the chosen slugs.

        Without a selection the await_selection step runs again and the run
        stays suspended with the same payload.
        """
        if not selection:
            return await self.reinvoke("discovery", run_id)
        selection = SelectionResume.model_validate(selection)
        return await self._resume("discovery", run_id, selection.model_dump())

    # ==========================================
    # Execution
    # ==========================================

    async def start_execution(self, slug: str, run_id: Optional[str] = None) -> WorkflowRun:
        if not slug:
            raise ValueError("slug is required")
        run_id = run_id or f"{slug}-{uuid.uuid4().hex[:8]}"
        logger.info(f"Starting execution run {run_id} for {slug}")
        return await self._start("execution", run_id, {"slug": slug})

    async def resume_execution(
        self,
        run_id: str,
        decision: Optional[Union[ReviewDecision, Mapping[str, Any]]] = None,
    ) -> WorkflowRun:
        if not decision:
            return await self.reinvoke("execution", run_id)
        decision = ReviewDecision.model_validate(decision)
        return await self._resume("execution", run_id, decision.model_dump())

    # ==========================================
    # Run state
    # ==========================================

    async def get_run(self, workflow: str, run_id: str) -> WorkflowRun:
        await self.set_up()
        graph = self._graph(workflow, run_id)
        snapshot = await graph.aget_state(self._config(workflow, run_id))

        if not snapshot.values and not snapshot.next:
            raise WorkflowStateError(
                f"Unknown {workflow} run: {run_id}", run_id=run_id, not_found=True
            )

        if snapshot.next:
            interrupts = [i for task in snapshot.tasks for i in task.interrupts]
            if interrupts:
                return WorkflowRun(
                    run_id=run_id,
                    workflow=workflow,
                    status="suspended",
                    step=snapshot.next[0],
                    payload=interrupts[0].value,
                )
            return WorkflowRun(
                run_id=run_id, workflow=workflow, status="running", step=snapshot.next[0]
            )

        return WorkflowRun(
            run_id=run_id,
            workflow=workflow,
            status="completed",
            result=_result(workflow, snapshot.values),
        )

    # ==========================================
    # Tools exposed directly
    # ==========================================

    def heartbeat(self) -> HeartbeatResult:
        return heartbeat(self.settings, self.context.liveness)

    async def register(self, name: str) -> RegisterAgentResult:
        return await register_agent(self.context, {"name": name})

    async def reinvoke(self, workflow: str, run_id: str) -> WorkflowRun:
        """Re-run the suspended step of a run without supplying resume data.

        The step executes again from its start and halts with the same
        payload; earlier steps are not repeated.
        """
        await self._require_suspended(workflow, run_id)
        logger.info(f"Re-invoking {workflow} run {run_id} without resume data")
        return await self._invoke(workflow, run_id, None)

    # ==========================================
    # Internals
    # ==========================================

    def _graph(self, workflow: str, run_id: str):
        graph = self.graphs.get(workflow)
        if graph is None:
            raise WorkflowStateError(
                f"Unknown workflow: {workflow}", run_id=run_id, not_found=True
            )
        return graph

    @staticmethod
    def _config(workflow: str, run_id: str) -> Dict[str, Any]:
        return {"configurable": {"thread_id": f"{workflow}:{run_id}"}}

    async def _invoke(self, workflow: str, run_id: str, payload: Any) -> WorkflowRun:
        await self.set_up()
        graph = self._graph(workflow, run_id)
        await graph.ainvoke(payload, self._config(workflow, run_id))

        run = await self.get_run(workflow, run_id)
        logger.info(f"{workflow} run {run_id} is {run.status} (step={run.step})")
        return run

    async def _start(self, workflow: str, run_id: str, payload: Dict[str, Any]) -> WorkflowRun:
        await self.set_up()
        graph = self._graph(workflow, run_id)
        snapshot = await graph.aget_state(self._config(workflow, run_id))
        if snapshot.values or snapshot.next:
            raise WorkflowStateError(f"{workflow} run {run_id} already exists", run_id=run_id)

        return await self._invoke(workflow, run_id, payload)

    async def _require_suspended(self, workflow: str, run_id: str) -> WorkflowRun:
        current = await self.get_run(workflow, run_id)
        if current.status != "suspended":
            raise WorkflowStateError(
                f"{workflow} run {run_id} is {current.status}, not suspended",
                run_id=run_id,
            )
        return current

    async def _resume(self, workflow: str, run_id: str, value: Dict[str, Any]) -> WorkflowRun:
        from langgraph.types import Command

        current = await self._require_suspended(workflow, run_id)
        logger.info(f"Resuming {workflow} run {run_id} at {current.step}")
        return await self._invoke(workflow, run_id, Command(resume=value))
