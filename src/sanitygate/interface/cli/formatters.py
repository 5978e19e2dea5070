"""Report renderings for the CLI: rich table, JSON, text digest, assistant prompt."""

import json
import re
from collections import defaultdict
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sanitygate.analysis.types import (
    REDACTED,
    Issue,
    IssueCategory,
    IssueType,
    Report,
    Severity,
    sort_issues,
)

SEVERITY_ICONS: dict[Severity, str] = {
    Severity.INFO: "[i]",
    Severity.WARNING: "[!]",
    Severity.ERROR: "[x]",
    Severity.CRITICAL: "[!!]",
}

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
    Severity.CRITICAL: "magenta",
}

CATEGORY_LABELS: dict[IssueCategory, str] = {
    IssueCategory.GIT: "GIT",
    IssueCategory.FILESYSTEM: "FILESYSTEM",
    IssueCategory.ASSETS: "ASSETS",
    IssueCategory.ORPHANS: "ORPHAN MODULES",
    IssueCategory.DEPENDENCIES: "DEPENDENCIES",
    IssueCategory.LICENSES: "LICENSES",
    IssueCategory.SECURITY: "SECURITY",
    IssueCategory.ENV: "ENVIRONMENT",
    IssueCategory.SEO: "SEO",
    IssueCategory.ACCESSIBILITY: "ACCESSIBILITY",
    IssueCategory.CODE_QUALITY: "CODE QUALITY",
    IssueCategory.PERFORMANCE: "PERFORMANCE",
    IssueCategory.BUILD: "BUILD",
}

DEFAULT_ACTIONS: dict[IssueType, str] = {
    IssueType.EMPTY_DIR: "delete directory",
    IssueType.ZERO_BYTE_FILE: "delete file",
    IssueType.BACKUP_FILE: "delete file",
    IssueType.ORPHAN_ASSET: "delete asset",
    IssueType.ORPHAN_MODULE: "delete file or add import",
    IssueType.UNUSED_DEP: "remove from package.json",
    IssueType.UNUSED_DEV_DEP: "remove from package.json",
    IssueType.MISSING_DEP: "add to package.json",
    IssueType.UNPINNED_VERSION: "pin version in package.json",
    IssueType.HARDCODED_SECRET: "move to environment variable",
    IssueType.CONSOLE_LOG: "remove or wrap in dev check",
    IssueType.TODO_COMMENT: "resolve or remove",
    IssueType.SYNC_IO: "convert to async",
    IssueType.MISSING_METADATA: "add metadata export",
    IssueType.MISSING_ALT: "add alt attribute",
    IssueType.MISSING_LABEL: "add label or aria-label",
    IssueType.MISSING_ENV_VAR: "add to .env file",
    IssueType.LARGE_FILE: "optimize or split",
    IssueType.UNCOMMITTED_CHANGES: "commit or stash",
    IssueType.BUILD_FAILURE: "fix TypeScript errors",
    IssueType.VIRAL_LICENSE: "review license compatibility",
}

_SNIPPET_LINES = 3
_SUMMARY_DETAILS = 3
_MAX_COMPACT_SNIPPET = 200


def action_for(issue: Issue) -> str:
    return issue.suggested_action or DEFAULT_ACTIONS.get(issue.type, "review and fix")


def _group_by_category(issues: tuple[Issue, ...]) -> dict[IssueCategory, list[Issue]]:
    groups: dict[IssueCategory, list[Issue]] = defaultdict(list)
    for issue in issues:
        groups[issue.category].append(issue)
    return groups


# =============================================================================
# Rich table
# =============================================================================


def render_table(report: Report, console: Console) -> None:
    """Print the report grouped by category, busiest category first."""
    header = (
        f"Project: [bold]{escape(report.project)}[/]\n"
        f"Timestamp: {report.timestamp}\n"
        f"Total Issues: {len(report.issues)}\n"
        f"Files Scanned: {report.stats.files_scanned}\n"
        f"Orphans Found: {report.stats.orphans_found}\n"
        f"Unused Dependencies: {report.stats.unused_deps}"
    )
    console.print(Panel(header, title="Sanity Gate - Scan Report", border_style="blue"))

    if not report.issues:
        console.print("[green]No issues found![/]")
        return

    groups = sorted(
        _group_by_category(report.issues).items(),
        key=lambda kv: len(kv[1]),
        reverse=True,
    )
    for category, issues in groups:
        noun = "issue" if len(issues) == 1 else "issues"
        table = Table(
            title=f"{category.value.upper()} ({len(issues)} {noun})",
            title_justify="left",
            show_header=True,
            expand=True,
        )
        table.add_column("", width=4, no_wrap=True)
        table.add_column("Issue")
        table.add_column("Path", style="dim")

        for issue in sort_issues(issues):
            body = Text(issue.message)
            if issue.snippet:
                for line in issue.snippet.splitlines()[:_SNIPPET_LINES]:
                    body.append(f"\n  {line}", style="dim")
            table.add_row(
                Text(SEVERITY_ICONS[issue.severity], style=SEVERITY_STYLES[issue.severity]),
                body,
                Text(issue.path or ""),
            )
        console.print(table)

    console.print("[bold]Summary by Severity:[/]")
    counts = report.count_by_severity()
    for severity in sorted(Severity, reverse=True):
        if count := counts.get(severity.value):
            style = SEVERITY_STYLES[severity]
            console.print(
                f"  [{style}]{escape(SEVERITY_ICONS[severity])}[/] {severity.value.upper()}: {count}",
                highlight=False,
            )


# =============================================================================
# JSON and compact payloads
# =============================================================================


def format_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2)


def _names_from_ids(issues: list[dict[str, Any]], pattern: str) -> list[str]:
    regex = re.compile(pattern)
    names = []
    for issue in issues:
        if match := regex.match(issue["id"]):
            names.append(match.group(1))
    return names


def build_compact_report(report: Report) -> dict[str, Any]:
    """Condense a report for pasting into an assistant.

    Snippets are kept only when short and not redacted. Environment and
    dependency findings are additionally grouped by name.
    """
    compact: list[dict[str, Any]] = []
    for issue in report.issues:
        item: dict[str, Any] = {
            "id": issue.id,
            "category": issue.category.value,
            "type": issue.type.value,
            "severity": issue.severity.value,
            "suggestedAction": action_for(issue),
        }
        if issue.path:
            item["path"] = issue.path
        if issue.snippet and REDACTED not in issue.snippet and len(issue.snippet) < _MAX_COMPACT_SNIPPET:
            item["snippet"] = issue.snippet
        compact.append(item)

    env_items = [i for i in compact if i["category"] == IssueCategory.ENV.value]
    dep_items = [i for i in compact if i["category"] == IssueCategory.DEPENDENCIES.value]

    env_vars = _names_from_ids(env_items, r"missing-env-(.+)")
    unused = _names_from_ids(
        [i for i in dep_items if i["type"] in (IssueType.UNUSED_DEP.value, IssueType.UNUSED_DEV_DEP.value)],
        r"unused-(?:dev-)?dep-(.+)",
    )
    unpinned = _names_from_ids(
        [i for i in dep_items if i["type"] == IssueType.UNPINNED_VERSION.value],
        r"unpinned-(?:dependency|devDependency)-(.+)",
    )
    missing = _names_from_ids(
        [i for i in dep_items if i["type"] == IssueType.MISSING_DEP.value],
        r"missing-dep-(.+)",
    )

    grouped: dict[str, Any] = {}
    if env_vars:
        grouped["envVars"] = {
            "count": len(env_vars),
            "vars": env_vars,
            "action": "add all to .env file",
        }
    deps = {k: v for k, v in (("unused", unused), ("unpinned", unpinned), ("missing", missing)) if v}
    if deps:
        grouped["dependencies"] = deps

    result: dict[str, Any] = {
        "project": report.project,
        "timestamp": report.timestamp,
        "stats": report.stats.to_dict(),
        "issues": compact,
    }
    if grouped:
        result["grouped"] = grouped
    return result


# =============================================================================
# Plain-text digest and prompt
# =============================================================================


def format_summary(report: Report) -> str:
    """Per-category, per-severity digest with a few example findings each."""
    lines = [f"Project: {report.project}", f"Timestamp: {report.timestamp}", ""]
    groups = _group_by_category(report.issues)

    for category, label in CATEGORY_LABELS.items():
        issues = groups.get(category)
        if not issues:
            continue
        lines.append(f"{label} ({len(issues)})")
        for severity in sorted(Severity, reverse=True):
            matching = [i for i in issues if i.severity is severity]
            if not matching:
                continue
            lines.append(f"  {SEVERITY_ICONS[severity]} {severity.value.upper()} ({len(matching)})")
            for issue in matching[:_SUMMARY_DETAILS]:
                where = f" [{issue.path}]" if issue.path else ""
                lines.append(f"    - {issue.message}{where} -> {action_for(issue)}")
            if len(matching) > _SUMMARY_DETAILS:
                lines.append(f"    ... {len(matching) - _SUMMARY_DETAILS} more")
        lines.append("")

    return "\n".join(lines)


_PROMPT_TEMPLATE = """\
You are an expert software developer.

I ran a static hygiene tool on my project "{project}" and it produced this report:

[REPORT START]
{payload}
[REPORT END]

TASK:
- For each issue, determine:
  - whether it is safe to auto-fix (based on severity and type)
  - what exact change should be made (file path + specific operation)
- Group fixes by category:
  - filesystem cleanup (empty dirs, backup files, orphan assets)
  - code changes (orphan modules, missing deps, code quality)
  - security fixes (hardcoded secrets, env vars)
  - configuration (dependencies, licenses, build)
- Output format: JSON array with this structure:
  [
    {{
      "issueId": "...",
      "safeToAutoFix": true/false,
      "action": "delete_file | remove_import | add_dependency | fix_code | ...",
      "target": "file/path",
      "details": "specific change description"
    }}
  ]

Important:
- Do NOT invent new files or features
- Do NOT change build system configuration
- Focus ONLY on the listed issues
- If suggestedAction is provided, use it as guidance
- For grouped.envVars: treat as single batch operation (add all vars to .env)
- For grouped.dependencies: handle unused (remove), unpinned (pin versions), missing (add) separately"""


def format_prompt(report: Report) -> str:
    """Remediation brief embedding the compact report as JSON."""
    return _PROMPT_TEMPLATE.format(
        project=report.project,
        payload=json.dumps(build_compact_report(report), indent=2),
    )
