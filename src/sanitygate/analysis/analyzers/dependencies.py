"""Dependency health: unused and missing packages, unpinned version ranges.

Usage analysis is delegated to an external auditor (``depcheck`` by default)
that must answer within a deadline. Manifest range checks are local.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, TypeAlias

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id
from sanitygate.foundation.concurrency import TimedOut, run_with_timeout
from sanitygate.foundation.config import ToolConfig
from sanitygate.foundation.paths import relative_posix
from sanitygate.foundation.process import CommandTimeout, run_command


class AuditError(Exception):
    """The dependency auditor could not produce a result."""


@dataclass(frozen=True, slots=True)
class DependencyAudit:
    """Auditor findings for one project.

    Attributes:
        dependencies: Declared runtime dependencies never imported
        dev_dependencies: Declared dev dependencies never imported
        missing: Imported but undeclared packages, with the files using them
    """

    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()
    missing: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_depcheck(cls, data: dict[str, Any]) -> "DependencyAudit":
        """Build from ``depcheck --json`` output."""
        missing_raw = data.get("missing") or {}
        if not isinstance(missing_raw, dict):
            raise AuditError("unexpected 'missing' shape in auditor output")
        return cls(
            dependencies=tuple(sorted(data.get("dependencies") or ())),
            dev_dependencies=tuple(sorted(data.get("devDependencies") or ())),
            missing={
                name: tuple(files or ())
                for name, files in sorted(missing_raw.items())
            },
        )


DependencyAuditor: TypeAlias = Callable[[Path], Awaitable[DependencyAudit]]


@dataclass
class DepcheckAuditor:
    """Runs ``depcheck`` through ``npx`` and parses its JSON report."""

    tools: ToolConfig = field(default_factory=ToolConfig)

    def command(self, root: Path) -> list[str]:
        return [
            *self.tools.dependency_audit_command,
            str(root),
            "--json",
            "--ignore-bin-package",
            f"--ignores={','.join(self.tools.depcheck_ignores)}",
            f"--ignore-patterns={','.join(self.tools.depcheck_ignore_patterns)}",
        ]

    async def __call__(self, root: Path) -> DependencyAudit:
        try:
            outcome = await run_command(
                self.command(root),
                cwd=root,
                timeout=self.tools.dependency_audit_timeout,
            )
        except OSError as e:
            raise AuditError(f"auditor not available: {e}") from e
        if isinstance(outcome, CommandTimeout):
            raise AuditError(f"auditor timed out after {outcome.seconds}s")

        # depcheck exits non-zero whenever it has findings; only the JSON matters
        try:
            data = json.loads(outcome.stdout)
        except json.JSONDecodeError as e:
            raise AuditError(
                f"auditor returned no JSON (exit {outcome.returncode}): {outcome.stderr.strip()[:200]}"
            ) from e
        if not isinstance(data, dict):
            raise AuditError("auditor JSON is not an object")
        return DependencyAudit.from_depcheck(data)


@dataclass
class DependencyAnalyzer:
    """Unused and missing dependencies, via an external auditor under a deadline.

    Timeouts and auditor failures degrade to no findings.
    """

    auditor: DependencyAuditor | None = None
    timeout: float | None = None
    name: str = "dependencies"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        if not (ctx.root / "package.json").is_file():
            ctx.log("debug", "dependencies", "No package.json, skipping dependency audit", None)
            return []

        deadline = self.timeout if self.timeout is not None else ctx.config.tools.dependency_audit_timeout
        auditor = self.auditor or DepcheckAuditor(
            replace(ctx.config.tools, dependency_audit_timeout=deadline)
        )

        try:
            outcome = await run_with_timeout(auditor(ctx.root), deadline)
        except AuditError as e:
            ctx.log("warn", "dependencies", "Dependency audit failed", {"error": str(e)})
            return []

        if isinstance(outcome, TimedOut):
            ctx.log("warn", "dependencies", "Dependency audit timed out", {"seconds": deadline})
            return []

        return self._issues(ctx, outcome)

    def _issues(self, ctx: ScanContext, audit: DependencyAudit) -> list[Issue]:
        issues: list[Issue] = []
        for dep in audit.dependencies:
            issues.append(Issue(
                id=issue_id("unused-dep", dep),
                category=IssueCategory.DEPENDENCIES,
                type=IssueType.UNUSED_DEP,
                severity=Severity.WARNING,
                message=f'Unused dependency: "{dep}"',
                suggested_action="remove from package.json dependencies",
            ))
        for dep in audit.dev_dependencies:
            issues.append(Issue(
                id=issue_id("unused-dev-dep", dep),
                category=IssueCategory.DEPENDENCIES,
                type=IssueType.UNUSED_DEV_DEP,
                severity=Severity.INFO,
                message=f'Unused devDependency: "{dep}"',
                suggested_action="remove from package.json devDependencies",
            ))
        for dep, files in audit.missing.items():
            used_in = ", ".join(_display_path(f, ctx.root) for f in files)
            issues.append(Issue(
                id=issue_id("missing-dep", dep),
                category=IssueCategory.DEPENDENCIES,
                type=IssueType.MISSING_DEP,
                severity=Severity.ERROR,
                message=f'Missing dependency: "{dep}"',
                snippet=f"Used in: {used_in}" if used_in else None,
                suggested_action="add to package.json dependencies",
            ))
        return issues


def _display_path(file: str, root: Path) -> str:
    p = Path(file)
    return relative_posix(p, root) if p.is_absolute() else p.as_posix()


def _read_manifest(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("manifest is not a JSON object")
    return data


def is_unpinned(version: str) -> bool:
    """Whether a manifest version spec can resolve to different releases."""
    v = version.strip()
    return v in ("*", "latest") or "^" in v or "~" in v


@dataclass
class VersionPinAnalyzer:
    """Flags ``package.json`` entries using floating version ranges."""

    name: str = "version-pins"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        manifest_path = ctx.root / "package.json"
        if not manifest_path.is_file():
            return []
        try:
            manifest = await asyncio.to_thread(_read_manifest, manifest_path)
        except (OSError, ValueError) as e:
            ctx.log("warn", "dependencies", "Could not parse package.json", {"error": str(e)})
            return []

        issues: list[Issue] = []
        for section, label in (("dependencies", "dependency"), ("devDependencies", "devDependency")):
            entries = manifest.get(section)
            if not isinstance(entries, dict):
                continue
            for pkg, version in entries.items():
                if not isinstance(version, str) or not is_unpinned(version):
                    continue
                issues.append(Issue(
                    id=issue_id(f"unpinned-{label}", pkg),
                    category=IssueCategory.DEPENDENCIES,
                    type=IssueType.UNPINNED_VERSION,
                    severity=Severity.WARNING,
                    path="package.json",
                    message=(
                        f'{label} "{pkg}" uses non-deterministic version: "{version}". '
                        "Consider pinning exact versions."
                    ),
                    suggested_action="pin exact version in package.json",
                ))
        return issues
