"""Scan orchestration.

A scan validates the root, walks the tree once, loads the source corpus once,
then runs each analyzer in turn on one event loop. Analyzer failures are
logged and count as no findings; only root validation can abort a scan.
"""

import asyncio
import logging
import os
import time
from collections.abc import Mapping, Sequence
from typing import Any

from sanitygate.analysis.analyzers import (
    Analyzer,
    ScanContext,
    ScanLogger,
    default_analyzers,
    stdlib_scan_logger,
)
from sanitygate.analysis.corpus import discover, load_corpus
from sanitygate.analysis.report import assemble_report
from sanitygate.analysis.types import Issue, Report
from sanitygate.foundation.config import SanityGateConfig
from sanitygate.foundation.errors import unknown_error
from sanitygate.foundation.paths import resolve_scan_target

logger = logging.getLogger(__name__)


def _guarded(log: ScanLogger) -> ScanLogger:
    """Wrap a caller's callback so its failures never reach the scan."""

    def emit(level: str, category: str, message: str, data: Mapping[str, Any] | None = None) -> None:
        try:
            log(level, category, message, data)
        except Exception:
            logger.debug("Scan logger callback raised", exc_info=True)

    return emit


async def _run_analyzer(analyzer: Analyzer, ctx: ScanContext) -> list[Issue]:
    started = time.perf_counter()
    ctx.log("debug", analyzer.name, "Running analyzer", None)
    try:
        issues = await analyzer.analyze(ctx)
    except Exception as e:
        logger.debug("Analyzer %s raised", analyzer.name, exc_info=True)
        ctx.log("warn", analyzer.name, "Analyzer failed, skipping", {
            "error": f"{type(e).__name__}: {e}",
        })
        return []
    ctx.log("debug", analyzer.name, "Analyzer finished", {
        "issues": len(issues),
        "ms": round((time.perf_counter() - started) * 1000),
    })
    return issues


async def scan_project(
    root_path: str | os.PathLike[str] | None = None,
    logger: ScanLogger | None = None,
    *,
    config: SanityGateConfig | None = None,
    analyzers: Sequence[Analyzer] | None = None,
    base_dir: str | os.PathLike[str] | None = None,
) -> Report:
    """Scan a project directory and return its report.

    Args:
        root_path: Directory to scan. Blank means the current directory.
        logger: Progress callback. Defaults to the ``sanitygate.scan`` logger.
        config: Confinement, limits and tool settings. Defaults apply when
            omitted; the environment is not consulted.
        analyzers: Analyzers to run, in order. Defaults to every built-in.
        base_dir: Directory relative ``root_path`` values resolve against.

    Returns:
        A fresh, immutable Report.

    Raises:
        SanityGateError: VALIDATION_ERROR, PATH_NOT_FOUND, PERMISSION_DENIED
            or SECURITY_ERROR from root validation, before any analyzer
            runs; UNKNOWN_ERROR if tree discovery fails unexpectedly.
    """
    cfg = config or SanityGateConfig()
    log = _guarded(logger or stdlib_scan_logger())

    root = resolve_scan_target(
        root_path,
        workspace_root=cfg.workspace.root,
        enforce=cfg.workspace.enforce_root,
        base_dir=base_dir,
    )

    started = time.perf_counter()
    log("info", "scan", "Starting scan checks", {"root": str(root)})

    try:
        files = await discover(root)
        corpus = await load_corpus(root, files, limit=cfg.scan.read_limit)
    except Exception as e:
        raise unknown_error(e) from e

    log("debug", "scan", "Tree loaded", {"files": len(files), "sources": len(corpus)})

    ctx = ScanContext(
        root=root,
        files=tuple(files),
        corpus=corpus,
        config=cfg,
        log=log,
    )

    batches: list[list[Issue]] = []
    for analyzer in (default_analyzers() if analyzers is None else analyzers):
        batches.append(await _run_analyzer(analyzer, ctx))

    report = assemble_report(root, batches, files_scanned=len(files))
    log("info", "scan", "Scan completed successfully", {
        "issues": len(report.issues),
        "issuesByCategory": report.count_by_category(),
        "durationMs": round((time.perf_counter() - started) * 1000),
    })
    return report


def scan_project_sync(
    root_path: str | os.PathLike[str] | None = None,
    logger: ScanLogger | None = None,
    **kwargs: object,
) -> Report:
    """Blocking wrapper around ``scan_project`` for non-async callers."""
    return asyncio.run(scan_project(root_path, logger, **kwargs))  # type: ignore[arg-type]
