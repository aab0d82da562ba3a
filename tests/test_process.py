"""Tests for the subprocess helper, using the running interpreter as the command."""

import sys

import pytest

from earn_agent.errors import CommandError
from earn_agent.process import run_command


class TestRunCommand:
    """Tests for run_command."""

    @pytest.mark.asyncio
    async def test_returns_stdout(self, tmp_path):
        """Test that stdout is returned and the command runs in cwd."""
        out = await run_command(
            sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=tmp_path, timeout=30
        )

        assert out.strip() == str(tmp_path.resolve())

    @pytest.mark.asyncio
    async def test_non_zero_exit_carries_stderr(self, tmp_path):
        """Test that a failing exit code raises with the captured stderr."""
        with pytest.raises(CommandError) as excinfo:
            await run_command(
                sys.executable,
                ["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
                cwd=tmp_path,
                timeout=30,
            )

        assert "code 3" in str(excinfo.value)
        assert excinfo.value.stderr == "boom"

    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path):
        """Test that a slow command is killed at the timeout."""
        with pytest.raises(CommandError, match="timed out"):
            await run_command(
                sys.executable, ["-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.5
            )

    @pytest.mark.asyncio
    async def test_output_limit(self, tmp_path):
        """Test that output over the limit is an error."""
        with pytest.raises(CommandError, match="more than 10 bytes"):
            await run_command(
                sys.executable, ["-c", "print('x' * 100)"], cwd=tmp_path, timeout=30, max_output=10
            )

    @pytest.mark.asyncio
    async def test_endless_output_is_stopped_at_limit(self, tmp_path):
        """Test that a command that never stops writing is killed once over the limit."""
        script = "import sys\nwhile True:\n    sys.stdout.write('x' * 1024)\n    sys.stdout.flush()"

        with pytest.raises(CommandError, match="more than 4096 bytes"):
            await run_command(
                sys.executable, ["-c", script], cwd=tmp_path, timeout=20, max_output=4096
            )
