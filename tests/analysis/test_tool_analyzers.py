"""Tests for the analyzers that shell out: git status and the type checker."""

from pathlib import Path

import pytest

from sanitygate.analysis.analyzers import build as build_module
from sanitygate.analysis.analyzers import git as git_module
from sanitygate.analysis.analyzers.build import BuildAnalyzer
from sanitygate.analysis.analyzers.git import GitStatusAnalyzer
from sanitygate.analysis.types import IssueCategory, IssueType, Severity
from sanitygate.foundation.process import CommandResult, CommandTimeout


def fake_run_command(outcome):
    """Replacement for run_command that records calls and returns a fixed outcome."""
    calls: list[dict] = []

    async def run(args, **kwargs):
        calls.append({"args": tuple(args), **kwargs})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    run.calls = calls  # type: ignore[attr-defined]
    return run


def _result(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(args=("x",), returncode=returncode, stdout=stdout, stderr=stderr)


class TestGitStatusAnalyzer:
    """Tests for GitStatusAnalyzer."""

    @pytest.mark.asyncio
    async def test_dirty_tree(self, tmp_path: Path, scan_context, monkeypatch) -> None:
        status = "".join(f" M src/f{n}.ts\n" for n in range(7))
        run = fake_run_command(_result(stdout=status))
        monkeypatch.setattr(git_module, "run_command", run)

        issues = await GitStatusAnalyzer().analyze(await scan_context(tmp_path))

        assert len(issues) == 1
        issue = issues[0]
        assert issue.id == "git-dirty-tree"
        assert issue.type is IssueType.UNCOMMITTED_CHANGES
        assert issue.severity is Severity.WARNING
        assert "7 uncommitted" in issue.message
        assert issue.snippet is not None
        assert len(issue.snippet.splitlines()) == 5
        assert run.calls[0]["args"] == ("git", "status", "--porcelain")
        assert run.calls[0]["cwd"] == tmp_path

    @pytest.mark.asyncio
    async def test_clean_tree(self, tmp_path: Path, scan_context, monkeypatch) -> None:
        monkeypatch.setattr(git_module, "run_command", fake_run_command(_result(stdout="\n")))

        assert await GitStatusAnalyzer().analyze(await scan_context(tmp_path)) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", [
        _result(returncode=128, stderr="fatal: not a git repository"),
        CommandTimeout(args=("git",), seconds=15.0),
        FileNotFoundError("git"),
    ])
    async def test_failures_mean_no_findings(self, tmp_path: Path, scan_context, monkeypatch, outcome) -> None:
        monkeypatch.setattr(git_module, "run_command", fake_run_command(outcome))

        assert await GitStatusAnalyzer().analyze(await scan_context(tmp_path)) == []


class TestBuildAnalyzer:
    """Tests for BuildAnalyzer."""

    @pytest.mark.asyncio
    async def test_skips_without_tsconfig(self, tmp_path: Path, scan_context, monkeypatch) -> None:
        run = fake_run_command(_result(returncode=2))
        monkeypatch.setattr(build_module, "run_command", run)

        assert await BuildAnalyzer().analyze(await scan_context(tmp_path)) == []
        assert run.calls == []

    @pytest.mark.asyncio
    async def test_type_errors(self, tmp_path: Path, make_tree, scan_context, monkeypatch) -> None:
        make_tree(tmp_path, {"tsconfig.json": "{}"})
        stdout = "src/a.ts(1,7): error TS2322\nsrc/b.ts(2,1): error TS2304\nsrc/c.ts(3,3): error TS1005\nmore\n"
        run = fake_run_command(_result(returncode=2, stdout=stdout))
        monkeypatch.setattr(build_module, "run_command", run)

        issues = await BuildAnalyzer().analyze(await scan_context(tmp_path))

        assert len(issues) == 1
        assert issues[0].id == "build-error"
        assert issues[0].category is IssueCategory.BUILD
        assert issues[0].severity is Severity.ERROR
        assert issues[0].snippet == "\n".join(stdout.splitlines()[:3])
        assert run.calls[0]["args"] == ("npx", "tsc", "--noEmit")
        assert run.calls[0]["timeout"] == 120.0

    @pytest.mark.asyncio
    async def test_stderr_fallback(self, tmp_path: Path, make_tree, scan_context, monkeypatch) -> None:
        make_tree(tmp_path, {"tsconfig.json": "{}"})
        monkeypatch.setattr(build_module, "run_command", fake_run_command(_result(returncode=1, stderr="boom")))

        issues = await BuildAnalyzer().analyze(await scan_context(tmp_path))

        assert issues[0].snippet == "boom"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", [
        _result(returncode=0),
        CommandTimeout(args=("npx",), seconds=120.0),
        FileNotFoundError("npx"),
    ])
    async def test_pass_or_unavailable(self, tmp_path: Path, make_tree, scan_context, monkeypatch, outcome) -> None:
        make_tree(tmp_path, {"tsconfig.json": "{}"})
        monkeypatch.setattr(build_module, "run_command", fake_run_command(outcome))

        assert await BuildAnalyzer().analyze(await scan_context(tmp_path)) == []
