"""Tests for run_command()."""

import asyncio
import sys

import pytest

from sanitygate.foundation.process import CommandResult, CommandTimeout, run_command


class TestRunCommand:
    """Tests for subprocess execution with a deadline."""

    @pytest.mark.asyncio
    async def test_captures_output(self) -> None:
        outcome = await run_command(
            [sys.executable, "-c", "print('one'); print('two'); print('three')"],
            timeout=30,
        )

        assert isinstance(outcome, CommandResult)
        assert outcome.ok
        assert outcome.head(2) == "one\ntwo"

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_a_result(self) -> None:
        outcome = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('nope'); sys.exit(3)"],
            timeout=30,
        )

        assert isinstance(outcome, CommandResult)
        assert outcome.returncode == 3
        assert not outcome.ok
        assert outcome.stderr == "nope"

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        outcome = await run_command(
            [sys.executable, "-c", "import time; time.sleep(5)"],
            timeout=0.2,
        )

        assert isinstance(outcome, CommandTimeout)
        assert outcome.seconds == 0.2

    @pytest.mark.asyncio
    async def test_timed_out_child_keeps_running(self, tmp_path) -> None:
        marker = tmp_path / "finished"
        script = f"import pathlib, time; time.sleep(0.5); pathlib.Path({str(marker)!r}).touch()"

        outcome = await run_command([sys.executable, "-c", script], timeout=0.1)

        assert isinstance(outcome, CommandTimeout)
        assert not marker.exists()
        for _ in range(100):
            if marker.exists():
                break
            await asyncio.sleep(0.05)
        assert marker.exists()

    @pytest.mark.asyncio
    async def test_cwd_and_env(self, tmp_path) -> None:
        outcome = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd()); print(os.environ['SG_GREETING'])"],
            cwd=tmp_path,
            timeout=30,
            extra_env={"SG_GREETING": "hello"},
        )

        assert isinstance(outcome, CommandResult)
        lines = outcome.stdout.splitlines()
        assert lines[1] == "hello"

    @pytest.mark.asyncio
    async def test_missing_program_raises(self) -> None:
        with pytest.raises(OSError):
            await run_command(["sanitygate-no-such-program"], timeout=5)
