"""Tests for the FastAPI endpoints."""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from fastapi.testclient import TestClient

from earn_agent.agent import WorkflowRun
from earn_agent.api import app
from earn_agent.config import Settings
from earn_agent.errors import WorkflowStateError
from earn_agent.liveness import LivenessTracker
from earn_agent.tools import RegisterAgentResult, heartbeat


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def orchestrator():
    """Patch the lazily created orchestrator with a mock."""
    mock = MagicMock()
    with patch("earn_agent.api._get_orchestrator", return_value=mock):
        yield mock


def _suspended_discovery():
    return WorkflowRun(
        run_id="discovery-1",
        workflow="discovery",
        status="suspended",
        step="await_selection",
        payload={"ranked_listings": [{"slug": "audit-x", "rank": 1}], "message": "pick"},
    )


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client):
        """Test that health endpoint returns ok."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "earn-agent"


class TestDiscoveryEndpoints:
    """Tests for the discovery endpoints."""

    def test_start_returns_suspended_run(self, client, orchestrator):
        """Test that starting discovery returns the suspended run."""
        orchestrator.start_discovery = AsyncMock(return_value=_suspended_discovery())

        response = client.post("/api/discovery/start", json={"take": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "suspended"
        assert data["payload"]["ranked_listings"][0]["slug"] == "audit-x"
        orchestrator.start_discovery.assert_awaited_once_with(take=5, deadline=None)

    def test_start_rejects_invalid_take(self, client, orchestrator):
        """Test that a take below one is a validation error."""
        response = client.post("/api/discovery/start", json={"take": 0})

        assert response.status_code == 422

    def test_resume_passes_selection(self, client, orchestrator):
        """Test that the selection is passed through to the orchestrator."""
        orchestrator.resume_discovery = AsyncMock(
            return_value=WorkflowRun(
                run_id="discovery-1",
                workflow="discovery",
                status="completed",
                result={"selected_slugs": ["audit-x"]},
            )
        )

        response = client.post(
            "/api/discovery/discovery-1/resume", json={"selected_slugs": ["audit-x"]}
        )

        assert response.status_code == 200
        assert response.json()["result"] == {"selected_slugs": ["audit-x"]}
        orchestrator.resume_discovery.assert_awaited_once_with(
            "discovery-1", {"selected_slugs": ["audit-x"]}
        )

    def test_resume_not_suspended_is_conflict(self, client, orchestrator):
        """Test that resuming a run that is not suspended returns 409."""
        orchestrator.resume_discovery = AsyncMock(
            side_effect=WorkflowStateError("not suspended", run_id="discovery-1")
        )

        response = client.post("/api/discovery/discovery-1/resume", json={"selected_slugs": []})

        assert response.status_code == 409


class TestExecutionEndpoints:
    """Tests for the execution endpoints."""

    def test_start_runs_in_background(self, client, orchestrator):
        """Test that execution start returns a run id and runs in the background."""
        orchestrator.start_execution = AsyncMock()

        response = client.post("/api/execution/start", json={"slug": "audit-x"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["run_id"].startswith("audit-x-")
        orchestrator.start_execution.assert_awaited_once_with("audit-x", run_id=data["run_id"])

    def test_start_missing_slug(self, client, orchestrator):
        """Test that a missing slug returns a validation error."""
        response = client.post("/api/execution/start", json={})

        assert response.status_code == 422

    def test_resume_with_review(self, client, orchestrator):
        """Test that the review decision is passed through."""
        orchestrator.resume_execution = AsyncMock(
            return_value=WorkflowRun(
                run_id="audit-x-1",
                workflow="execution",
                status="completed",
                result={"submitted": True, "submission_id": "sub-1", "error": None},
            )
        )

        response = client.post(
            "/api/execution/audit-x-1/resume",
            json={"approved": True, "telegram": "@alice"},
        )

        assert response.status_code == 200
        assert response.json()["result"]["submission_id"] == "sub-1"
        decision = orchestrator.resume_execution.call_args.args[1]
        assert decision["approved"] is True
        assert decision["telegram"] == "@alice"

    def test_resume_requires_approved_flag(self, client, orchestrator):
        """Test that a review without the approved flag is rejected."""
        response = client.post("/api/execution/audit-x-1/resume", json={"link": "x"})

        assert response.status_code == 422


class TestRunEndpoint:
    """Tests for the run state endpoints."""

    def test_get_run(self, client, orchestrator):
        """Test that the run endpoint returns the current run state."""
        orchestrator.get_run = AsyncMock(return_value=_suspended_discovery())

        response = client.get("/api/runs/discovery/discovery-1")

        assert response.status_code == 200
        assert response.json()["step"] == "await_selection"

    def test_unknown_run_is_404(self, client, orchestrator):
        """Test that an unknown run returns 404."""
        orchestrator.get_run = AsyncMock(
            side_effect=WorkflowStateError("Unknown", run_id="x", not_found=True)
        )

        response = client.get("/api/runs/execution/x")

        assert response.status_code == 404

    def test_reinvoke_returns_same_halt(self, client, orchestrator):
        """Test that re-invoking a suspended run returns its halt payload."""
        orchestrator.reinvoke = AsyncMock(return_value=_suspended_discovery())

        response = client.post("/api/runs/discovery/discovery-1/reinvoke")

        assert response.status_code == 200
        assert response.json()["status"] == "suspended"
        orchestrator.reinvoke.assert_awaited_once_with("discovery", "discovery-1")

    def test_reinvoke_completed_run_is_conflict(self, client, orchestrator):
        """Test that re-invoking a run that is not suspended returns 409."""
        orchestrator.reinvoke = AsyncMock(
            side_effect=WorkflowStateError("not suspended", run_id="discovery-1")
        )

        response = client.post("/api/runs/discovery/discovery-1/reinvoke")

        assert response.status_code == 409


class TestAgentEndpoints:
    """Tests for the heartbeat and registration endpoints."""

    def test_heartbeat(self, client, orchestrator):
        """Test that heartbeat reports the orchestrator status."""
        orchestrator.heartbeat.return_value = heartbeat(Settings(api_key=""), LivenessTracker())

        response = client.get("/api/heartbeat")

        assert response.status_code == 200
        assert response.json()["status"] == "blocked"

    def test_register(self, client, orchestrator):
        """Test that registration returns the issued credentials."""
        orchestrator.register = AsyncMock(
            return_value=RegisterAgentResult(success=True, api_key="sk-new", claim_code="C")
        )

        response = client.post("/api/agents/register", json={"name": "bot"})

        assert response.status_code == 200
        assert response.json()["api_key"] == "sk-new"
        orchestrator.register.assert_awaited_once_with("bot")
