"""Analyzer protocol and the per-scan context analyzers read from."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, TypeAlias

from sanitygate.analysis.corpus import Corpus
from sanitygate.analysis.types import Issue
from sanitygate.foundation.config import SanityGateConfig

ScanLogger: TypeAlias = Callable[[str, str, str, Mapping[str, Any] | None], None]
"""Progress callback: ``(level, category, message, data)``.

``level`` is one of ``debug``, ``info``, ``warn`` or ``error``.
"""

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def stdlib_scan_logger(name: str = "sanitygate.scan") -> ScanLogger:
    """Adapt the progress callback onto a ``logging`` logger.

    Records are emitted as ``[category] message | data``.
    """
    target = logging.getLogger(name)

    def log(level: str, category: str, message: str, data: Mapping[str, Any] | None = None) -> None:
        lvl = _LEVELS.get(level.lower(), logging.INFO)
        if data:
            target.log(lvl, "[%s] %s | %s", category, message, dict(data))
        else:
            target.log(lvl, "[%s] %s", category, message)

    return log


def null_scan_logger(
    level: str, category: str, message: str, data: Mapping[str, Any] | None = None
) -> None:
    """Discard all progress events."""


@dataclass(frozen=True, slots=True)
class ScanContext:
    """Read-only inputs shared by every analyzer in one scan.

    Attributes:
        root: Absolute scan root
        files: Every tree file as a sorted POSIX relative path
        corpus: Source file contents
        config: Effective configuration
        log: Progress callback
    """

    root: Path
    files: tuple[str, ...]
    corpus: Corpus
    config: SanityGateConfig = field(default_factory=SanityGateConfig)
    log: ScanLogger = null_scan_logger


class Analyzer(Protocol):
    """Protocol for scan analyzers.

    Analyzers inspect the context and return issues. They never modify the
    scanned tree. Raising is allowed; the engine logs the failure and treats
    it as no findings.
    """

    @property
    def name(self) -> str:
        """Analyzer name used in progress events."""
        ...

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        """Analyze the project.

        Args:
            ctx: Shared scan inputs

        Returns:
            Issues found (empty if none)
        """
        ...
