"""Tests for report renderings."""

import io
import json

import pytest
from rich.console import Console

from sanitygate.analysis.types import (
    REDACTED,
    Issue,
    IssueCategory,
    IssueType,
    Report,
    ScanStats,
    Severity,
)
from sanitygate.interface.cli.formatters import (
    action_for,
    build_compact_report,
    format_json,
    format_prompt,
    format_summary,
    render_table,
)


@pytest.fixture
def report() -> Report:
    issues = (
        Issue(
            id="secret-src/a.ts-AWS Access Key",
            category=IssueCategory.SECURITY,
            type=IssueType.HARDCODED_SECRET,
            severity=Severity.CRITICAL,
            path="src/a.ts",
            message="Potential hardcoded secret found: AWS Access Key",
            snippet=REDACTED,
            suggested_action="move to environment variable and remove from code",
        ),
        Issue(
            id="missing-env-API_KEY",
            category=IssueCategory.ENV,
            type=IssueType.MISSING_ENV_VAR,
            severity=Severity.ERROR,
            message='Environment variable "API_KEY" is used in code but not defined in any .env file.',
            snippet="Used in: src/a.ts",
        ),
        Issue(
            id="unused-dep-lodash",
            category=IssueCategory.DEPENDENCIES,
            type=IssueType.UNUSED_DEP,
            severity=Severity.WARNING,
            message='Unused dependency: "lodash"',
        ),
        Issue(
            id="unpinned-devDependency-typescript",
            category=IssueCategory.DEPENDENCIES,
            type=IssueType.UNPINNED_VERSION,
            severity=Severity.WARNING,
            path="package.json",
            message='devDependency "typescript" uses non-deterministic version: "^5.0.0".',
        ),
        Issue(
            id="missing-dep-zod",
            category=IssueCategory.DEPENDENCIES,
            type=IssueType.MISSING_DEP,
            severity=Severity.ERROR,
            message='Missing dependency: "zod"',
        ),
    )
    return Report(
        project="[bold]demo",
        timestamp="2024-01-01T00:00:00.000Z",
        issues=issues,
        stats=ScanStats(files_scanned=10, unused_deps=1),
        root_path="/tmp/demo",
    )


def _render(report: Report) -> str:
    buffer = io.StringIO()
    render_table(report, Console(file=buffer, width=120, color_system=None))
    return buffer.getvalue()


class TestRenderTable:
    """Tests for the rich table view."""

    def test_categories_by_size(self, report: Report) -> None:
        out = _render(report)

        assert out.index("DEPENDENCIES (3 issues)") < out.index("SECURITY (1 issue)")
        assert "ENV (1 issue)" in out

    def test_markup_in_project_name_is_literal(self, report: Report) -> None:
        assert "[bold]demo" in _render(report)

    def test_severity_summary(self, report: Report) -> None:
        out = _render(report)

        assert "[!!] CRITICAL: 1" in out
        assert "[x] ERROR: 2" in out
        assert "[!] WARNING: 2" in out
        assert out.index("CRITICAL: 1") < out.index("WARNING: 2")

    def test_empty_report(self, report: Report) -> None:
        empty = Report(
            project="demo",
            timestamp=report.timestamp,
            issues=(),
            stats=ScanStats(),
            root_path=report.root_path,
        )

        assert "No issues found!" in _render(empty)


class TestCompactReport:
    """Tests for the assistant-facing payload."""

    def test_grouped(self, report: Report) -> None:
        compact = build_compact_report(report)

        assert compact["grouped"]["envVars"] == {
            "count": 1,
            "vars": ["API_KEY"],
            "action": "add all to .env file",
        }
        assert compact["grouped"]["dependencies"] == {
            "unused": ["lodash"],
            "unpinned": ["typescript"],
            "missing": ["zod"],
        }

    def test_redacted_snippets_dropped(self, report: Report) -> None:
        items = {i["id"]: i for i in build_compact_report(report)["issues"]}

        assert "snippet" not in items["secret-src/a.ts-AWS Access Key"]
        assert items["missing-env-API_KEY"]["snippet"] == "Used in: src/a.ts"

    def test_default_actions_filled(self, report: Report) -> None:
        items = {i["id"]: i for i in build_compact_report(report)["issues"]}

        assert items["unused-dep-lodash"]["suggestedAction"] == "remove from package.json"
        assert "message" not in items["unused-dep-lodash"]

    def test_no_grouping_when_nothing_to_group(self, report: Report) -> None:
        only_secret = Report(
            project="demo",
            timestamp=report.timestamp,
            issues=report.issues[:1],
            stats=report.stats,
            root_path=report.root_path,
        )

        assert "grouped" not in build_compact_report(only_secret)


def test_action_for_prefers_issue_action(report: Report) -> None:
    assert action_for(report.issues[0]) == "move to environment variable and remove from code"
    assert action_for(report.issues[4]) == "add to package.json"


def test_format_json_roundtrips(report: Report) -> None:
    assert json.loads(format_json(report)) == report.to_dict()


def test_format_summary(report: Report) -> None:
    out = format_summary(report)

    assert "DEPENDENCIES (3)" in out
    assert "[x] ERROR (1)" in out
    assert "ENVIRONMENT (1)" in out


def test_format_prompt_embeds_compact_json(report: Report) -> None:
    out = format_prompt(report)
    payload = out.split("[REPORT START]\n", 1)[1].split("\n[REPORT END]", 1)[0]

    assert json.loads(payload) == build_compact_report(report)
    assert 'project "[bold]demo"' in out
