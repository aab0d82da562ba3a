"""Tests for publishing a workspace to GitHub."""

from unittest.mock import AsyncMock, patch

import pytest

from earn_agent.errors import CommandError
from earn_agent.liveness import LivenessTracker
from earn_agent.publish import PublishInput, publish_to_github, repo_name_for


def _commands(gh_create="https://github.com/alice/bounty-x", login="alice", fail_on=None):
    async def run(cmd, args, cwd, timeout):
        if fail_on and [cmd, *args[:2]] == fail_on:
            raise CommandError(f"{cmd} {' '.join(args)} failed: HTTP 422", "HTTP 422")
        if cmd == "gh" and args[:2] == ["repo", "create"]:
            return f"{gh_create}\n"
        if cmd == "gh" and args[:2] == ["api", "user"]:
            return f"{login}\n"
        return ""

    return AsyncMock(side_effect=run)


def _params(**overrides):
    values = {"workspace_path": "/tmp/ws/x", "repo_name": "bounty-x"}
    values.update(overrides)
    return PublishInput(**values)


class TestPublishToGithub:
    """Tests for publishing a workspace to GitHub."""

    @pytest.mark.asyncio
    async def test_runs_git_then_gh(self):
        """Test that git runs before gh and the URL is returned."""
        commands = _commands()
        liveness = LivenessTracker()

        with patch("earn_agent.publish.run_command", commands):
            result = await publish_to_github(_params(description="Audit X"), liveness)

        calls = [(c.args[0], c.args[1]) for c in commands.call_args_list]
        assert calls[:4] == [
            ("git", ["init"]),
            ("git", ["add", "."]),
            ("git", ["commit", "-m", "Initial submission"]),
            ("git", ["branch", "-M", "main"]),
        ]
        assert calls[4] == (
            "gh",
            ["repo", "create", "bounty-x", "--public", "--source", ".", "--push",
             "--description", "Audit X"],
        )
        assert all(c.kwargs["timeout"] == 60 for c in commands.call_args_list)
        assert all(c.kwargs["cwd"] == "/tmp/ws/x" for c in commands.call_args_list)

        assert result.success is True
        assert result.repo_url == "https://github.com/alice/bounty-x"
        assert liveness.last_action == "published bounty-x to GitHub"
        assert liveness.next_action == "ready for submission"

    @pytest.mark.asyncio
    async def test_private_without_description(self):
        """Test that private repos are created without a description flag."""
        commands = _commands()

        with patch("earn_agent.publish.run_command", commands):
            await publish_to_github(_params(is_private=True))

        gh_args = commands.call_args_list[4].args[1]
        assert "--private" in gh_args
        assert "--description" not in gh_args

    @pytest.mark.asyncio
    async def test_url_falls_back_to_login(self):
        """Test that the URL is built from the login when gh prints none."""
        commands = _commands(gh_create="Created repository", login="bob")

        with patch("earn_agent.publish.run_command", commands):
            result = await publish_to_github(_params())

        assert result.repo_url == "https://github.com/bob/bounty-x"

    @pytest.mark.asyncio
    async def test_failure_aborts_sequence(self):
        """Test that a gh failure is returned as a failed result."""
        commands = _commands(fail_on=["gh", "repo", "create"])
        liveness = LivenessTracker()

        with patch("earn_agent.publish.run_command", commands):
            result = await publish_to_github(_params(), liveness)

        assert result.success is False
        assert "HTTP 422" in result.error
        assert result.repo_url is None
        assert commands.call_count == 5
        assert liveness.last_action == "initialized"

    @pytest.mark.asyncio
    async def test_git_failure_stops_before_gh(self):
        """Test that a git failure stops before gh runs."""
        commands = _commands(fail_on=["git", "commit", "-m"])

        with patch("earn_agent.publish.run_command", commands):
            result = await publish_to_github(_params())

        assert result.success is False
        assert commands.call_count == 3


def test_repo_name_for_slug():
    """Test that repository names are derived from the slug."""
    assert repo_name_for("audit-x") == "bounty-audit-x"
