"""Shared fixtures: settings, a routed fake marketplace client, tool context."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from earn_agent.api_client import ApiResponse
from earn_agent.config import Settings
from earn_agent.liveness import LivenessTracker
from earn_agent.tools import ToolContext


def make_client(routes):
    """Fake EarnApiClient answering by path prefix; unknown paths get a 404."""

    async def request(path, method="GET", body=None, params=None, auth=True):
        for prefix, response in routes.items():
            if path.startswith(prefix):
                return response
        return ApiResponse(ok=False, status=404, data={"message": "Not found"})

    client = MagicMock()
    client.request = AsyncMock(side_effect=request)
    return client


@pytest.fixture
def settings(tmp_path):
    return Settings(
        base_url="https://earn.test",
        api_key="sk-earn",
        model_api_key="sk-model",
        telegram_handle="fallback_handle",
        workspaces_dir=tmp_path / "workspaces",
    )


@pytest.fixture
def liveness():
    return LivenessTracker()


@pytest.fixture
def make_context(settings, liveness):
    def _make(routes):
        return ToolContext(settings=settings, client=make_client(routes), liveness=liveness)

    return _make
