"""Filesystem hygiene: empty directories, empty or oversized files, backups."""

import asyncio
import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.corpus import IGNORED_DIRS
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id
from sanitygate.foundation.concurrency import BoundedPool
from sanitygate.foundation.paths import relative_posix

BACKUP_PATTERNS: tuple[str, ...] = (
    "*copy*",
    "*backup*",
    "*old*",
    "*.tmp",
    "*.bak",
    "*~",
    "*draft*",
    "*deneme*",
)

_MIB = 1024 * 1024


def find_empty_dirs(directory: Path) -> list[Path]:
    """Return directories under ``directory`` (inclusive) with no file below.

    Children come before parents. A directory counts as empty when it has no
    entries, or every entry is an ignored directory name or itself empty.
    Unreadable directories are treated as non-empty.
    """
    found: list[Path] = []

    def visit(path: Path) -> bool:
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError:
            return False

        has_content = False
        for entry in entries:
            if entry.name in IGNORED_DIRS:
                continue
            if entry.is_dir(follow_symlinks=False):
                if not visit(Path(entry.path)):
                    has_content = True
            else:
                has_content = True

        if not has_content:
            found.append(path)
        return not has_content

    visit(directory)
    return found


def is_backup_name(name: str) -> bool:
    return any(fnmatchcase(name, pattern) for pattern in BACKUP_PATTERNS)


def _stat_size(path: Path) -> int | None:
    try:
        st = os.stat(path)
    except OSError:
        return None
    return st.st_size


@dataclass
class FilesystemAnalyzer:
    """Empty directories under ``src``, zero-byte and large files, backup names."""

    name: str = "filesystem"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        issues: list[Issue] = []
        issues.extend(await self._empty_dirs(ctx))
        issues.extend(await self._file_sizes(ctx))
        issues.extend(self._backup_files(ctx))
        return issues

    async def _empty_dirs(self, ctx: ScanContext) -> list[Issue]:
        src = ctx.root / "src"
        if not src.is_dir() or src.is_symlink():
            return []
        empty = await asyncio.to_thread(find_empty_dirs, src)
        issues = []
        for directory in empty:
            rel = relative_posix(directory, ctx.root)
            issues.append(Issue(
                id=issue_id("empty-dir", rel),
                category=IssueCategory.FILESYSTEM,
                type=IssueType.EMPTY_DIR,
                severity=Severity.INFO,
                path=rel,
                message="Directory is empty.",
                suggested_action="delete directory",
            ))
        return issues

    async def _file_sizes(self, ctx: ScanContext) -> list[Issue]:
        pool = BoundedPool(ctx.config.scan.stat_limit)
        sizes = await pool.map_blocking(lambda rel: _stat_size(ctx.root / rel), ctx.files)
        threshold = ctx.config.scan.large_file_bytes

        issues: list[Issue] = []
        for rel, size in zip(ctx.files, sizes, strict=True):
            if size is None:
                continue
            if size == 0:
                issues.append(Issue(
                    id=issue_id("zero-byte", rel),
                    category=IssueCategory.FILESYSTEM,
                    type=IssueType.ZERO_BYTE_FILE,
                    severity=Severity.INFO,
                    path=rel,
                    message="File is empty (0 bytes).",
                    suggested_action="delete file",
                ))
            elif size > threshold:
                issues.append(Issue(
                    id=issue_id("large-file", rel),
                    category=IssueCategory.PERFORMANCE,
                    type=IssueType.LARGE_FILE,
                    severity=Severity.WARNING,
                    path=rel,
                    message=(
                        f"File is too large ({size / _MIB:.2f} MB). "
                        "Consider optimizing or lazy loading."
                    ),
                    suggested_action="optimize or split file",
                ))
        return issues

    def _backup_files(self, ctx: ScanContext) -> list[Issue]:
        return [
            Issue(
                id=issue_id("backup-file", rel),
                category=IssueCategory.FILESYSTEM,
                type=IssueType.BACKUP_FILE,
                severity=Severity.WARNING,
                path=rel,
                message="File appears to be a backup or temporary file.",
                suggested_action="delete file",
            )
            for rel in ctx.files
            if is_backup_name(PurePosixPath(rel).name)
        ]
