"""External command execution with a deadline.

Analyzers that shell out (git, the dependency auditor, the type checker) go
through ``run_command`` and branch on the outcome type instead of catching
timeout exceptions themselves.

Each child runs under ``subprocess.Popen`` in a worker thread. A child that
misses its deadline is abandoned: its pipes are closed and a daemon thread
reaps it whenever it exits. Nothing is left bound to the event loop, so a
scan can finish and close its loop while the child is still running.
"""

import asyncio
import logging
import os
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """A command that ran to completion."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def head(self, lines: int) -> str:
        """First ``lines`` lines of stdout."""
        return "\n".join(self.stdout.splitlines()[:lines])


@dataclass(frozen=True, slots=True)
class CommandTimeout:
    """A command that did not finish before its deadline."""

    args: tuple[str, ...]
    seconds: float


CommandOutcome: TypeAlias = CommandResult | CommandTimeout


def _abandon(proc: subprocess.Popen[bytes]) -> None:
    for pipe in (proc.stdout, proc.stderr):
        if pipe is not None:
            pipe.close()
    threading.Thread(
        target=proc.wait,
        name=f"sanitygate-reap-{proc.pid}",
        daemon=True,
    ).start()


def _communicate(
    args: tuple[str, ...],
    cwd: Path | None,
    env: dict[str, str] | None,
    timeout: float,
) -> CommandOutcome:
    proc = subprocess.Popen(
        args,
        cwd=cwd,
        env=env,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _abandon(proc)
        return CommandTimeout(args=args, seconds=timeout)
    return CommandResult(
        args=args,
        returncode=proc.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


async def run_command(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    timeout: float,
    extra_env: dict[str, str] | None = None,
) -> CommandOutcome:
    """Run a command and capture its output, giving up after ``timeout``.

    Args:
        args: Program and arguments. No shell is involved.
        cwd: Working directory for the child.
        timeout: Seconds to wait before returning ``CommandTimeout``.
        extra_env: Variables merged over the current environment.

    Returns:
        ``CommandResult`` for a finished process, whatever its exit status,
        or ``CommandTimeout`` when the deadline passed. A timed-out child is
        not killed; its output is discarded.

    Raises:
        OSError: The program could not be started (for example it is not
            installed).
    """
    argv = tuple(args)
    env = {**os.environ, **extra_env} if extra_env else None
    logger.debug("Running %s (cwd=%s, timeout=%ss)", " ".join(argv), cwd, timeout)

    outcome = await asyncio.to_thread(
        _communicate, argv, Path(cwd) if cwd else None, env, timeout,
    )
    if isinstance(outcome, CommandTimeout):
        logger.debug("Command timed out after %ss: %s", timeout, argv[0])
    return outcome
