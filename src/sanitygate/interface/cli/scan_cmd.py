"""Scan command: run every analyzer against a project and report.

    sanitygate scan                      # Scan current directory
    sanitygate scan ~/my-app             # Scan specific path
    sanitygate scan . --json             # Machine-readable output
    sanitygate scan . --format prompt    # Remediation brief for an assistant
    sanitygate scan . -o report.txt      # Save instead of printing

Exit status is 1 when any error or critical issue is found, so the command
can gate a CI pipeline.
"""

import asyncio
import io
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from sanitygate.analysis import Report, scan_project
from sanitygate.foundation.config import SanityGateConfig, load_config
from sanitygate.foundation.errors import SanityGateError
from sanitygate.foundation.logging import configure_logging
from sanitygate.interface.cli.error_handler import handle_error
from sanitygate.interface.cli.formatters import (
    format_json,
    format_prompt,
    format_summary,
    render_table,
)
from sanitygate.interface.cli.helpers import load_dotenv

console = Console()

FORMATS = ("table", "json", "summary", "prompt")


@click.command("scan")
@click.argument("path", required=False, default=None)
@click.option(
    "--json", "json_output",
    is_flag=True,
    help="Output as JSON (shorthand for --format json)",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(FORMATS),
    default="table",
    show_default=True,
    help="Report rendering",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Save the report to a file instead of printing it",
)
@click.option(
    "--workspace-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Confine scans to this directory (implies --enforce-root)",
)
@click.option(
    "--enforce-root",
    is_flag=True,
    help="Reject scan targets outside the workspace root",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Explicit config file",
)
def scan(
    path: str | None,
    json_output: bool,
    output_format: str,
    output: str | None,
    workspace_root: str | None,
    enforce_root: bool,
    config_path: str | None,
) -> None:
    """Scan a project for hygiene issues.

    \b
    Checks include:
    - Uncommitted git changes
    - Empty directories, empty/oversized/backup files
    - Unused public assets and orphan source modules
    - Unused, missing and unpinned dependencies
    - Copyleft licenses in node_modules
    - Hardcoded secrets, console.log, TODOs, sync I/O
    - Missing page metadata, alt text and input labels
    - Environment variables missing from .env files
    - TypeScript type-check failures
    """
    fmt = "json" if json_output else output_format
    try:
        load_dotenv()
        config = _effective_config(load_config(config_path), workspace_root, enforce_root)
        if config.debug:
            _enable_config_debug()
        report = asyncio.run(_scan_async(path, config, show_progress=fmt == "table" and not output))
    except SanityGateError as e:
        handle_error(e, json_output=fmt == "json")

    if output:
        Path(output).write_text(render(report, fmt), encoding="utf-8")
        click.echo(f"Report saved to: {output}")
    elif fmt == "table":
        render_table(report, console)
    else:
        click.echo(render(report, fmt))

    if report.has_blocking_issues:
        raise SystemExit(1)


def _enable_config_debug() -> None:
    """Switch to DEBUG logging when the config file asks for it."""
    root_params = click.get_current_context().find_root().params
    if root_params.get("debug"):
        return
    configure_logging(debug=True, log_file=root_params.get("log_file"))


def _effective_config(
    config: SanityGateConfig,
    workspace_root: str | None,
    enforce_root: bool,
) -> SanityGateConfig:
    """Apply command-line confinement flags over loaded config."""
    if not workspace_root and not enforce_root:
        return config
    return replace(config, workspace=replace(
        config.workspace,
        root=workspace_root or config.workspace.root,
        enforce_root=True,
    ))


async def _scan_async(path: str | None, config: SanityGateConfig, *, show_progress: bool) -> Report:
    if not show_progress:
        return await scan_project(path, config=config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        progress.add_task(description="Scanning project...", total=None)
        return await scan_project(path, config=config)


def render(report: Report, fmt: str) -> str:
    """Render a report as text in the given format."""
    if fmt == "json":
        return format_json(report)
    if fmt == "summary":
        return format_summary(report)
    if fmt == "prompt":
        return format_prompt(report)

    buffer = io.StringIO()
    render_table(report, Console(file=buffer, width=100, color_system=None))
    return buffer.getvalue()
