"""Source tree discovery and the shared in-memory corpus.

The tree is walked once per scan. The file list feeds the filesystem checks
and the corpus (``{relative path -> text}``) feeds every text-based analyzer.
"""

import asyncio
import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path, PurePosixPath
from types import MappingProxyType

from sanitygate.foundation.concurrency import DEFAULT_READ_LIMIT, BoundedPool

logger = logging.getLogger(__name__)

IGNORED_DIRS: frozenset[str] = frozenset({"node_modules", ".git", ".next", "dist", "build"})

CODE_EXTENSIONS: frozenset[str] = frozenset({".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py"})
STYLE_EXTENSIONS: frozenset[str] = frozenset({".css", ".scss"})

SOURCE_DIRS: frozenset[str] = frozenset({"src", "app", "pages", "components", "lib", "utils"})


def _should_skip(name: str) -> bool:
    return name in IGNORED_DIRS or name.startswith(".")


def walk_files(root: Path) -> list[str]:
    """List every regular file under root as sorted POSIX relative paths.

    Ignored directories and dot-entries are pruned. Symbolic links to
    directories are not followed.
    """
    found: list[str] = []

    def on_error(err: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = [d for d in dirnames if not _should_skip(d)]
        rel_dir = Path(dirpath).relative_to(root)
        for name in filenames:
            if name.startswith("."):
                continue
            found.append((rel_dir / name).as_posix())
    found.sort()
    return found


def is_source_file(rel_path: str) -> bool:
    """Whether a relative path belongs in the corpus."""
    p = PurePosixPath(rel_path)
    if p.suffix not in CODE_EXTENSIONS and p.suffix not in STYLE_EXTENSIONS:
        return False
    return any(part in SOURCE_DIRS for part in p.parts[:-1])


def is_code_file(rel_path: str) -> bool:
    return PurePosixPath(rel_path).suffix in CODE_EXTENSIONS


class Corpus(Mapping[str, str]):
    """Read-only ``{relative path -> content}`` mapping for one scan."""

    __slots__ = ("_files",)

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = MappingProxyType(dict(files))

    def __getitem__(self, key: str) -> str:
        return self._files[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def code_files(self) -> Iterator[tuple[str, str]]:
        """Yield ``(path, content)`` for code files, skipping stylesheets."""
        for path, content in self._files.items():
            if is_code_file(path):
                yield path, content

    def contains_text(self, needle: str, *, exclude: str | None = None) -> bool:
        """Whether any file other than ``exclude`` contains ``needle``."""
        return any(
            needle in content
            for path, content in self._files.items()
            if path != exclude
        )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return ""


async def load_corpus(
    root: Path,
    files: list[str],
    *,
    limit: int = DEFAULT_READ_LIMIT,
) -> Corpus:
    """Read every source file among ``files`` with bounded concurrency.

    Args:
        root: Scan root the paths are relative to.
        files: Output of ``walk_files``.
        limit: Maximum concurrent reads.

    Returns:
        Corpus of the selected files. Unreadable files map to ``""``.
    """
    sources = [f for f in files if is_source_file(f)]
    pool = BoundedPool(limit)
    contents = await pool.map_blocking(lambda rel: _read_text(root / rel), sources)
    logger.debug("Loaded %d source files into corpus", len(sources))
    return Corpus(dict(zip(sources, contents, strict=True)))


async def discover(root: Path) -> list[str]:
    """Run ``walk_files`` off the event loop."""
    return await asyncio.to_thread(walk_files, root)
