"""Pytest fixtures for Sanity Gate tests."""

import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.corpus import load_corpus, walk_files
from sanitygate.foundation.config import SanityGateConfig


class RecordingLogger:
    """Scan logger that keeps every event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, str, dict[str, Any] | None]] = []

    def __call__(
        self,
        level: str,
        category: str,
        message: str,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        self.events.append((level, category, message, dict(data) if data else None))

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, _, m, _ in self.events if level is None or lvl == level]


@pytest.fixture
def make_tree() -> Callable[[Path, Mapping[str, str | bytes | None]], Path]:
    """Create files under a root from ``{relative path: content}``.

    ``None`` creates a directory; bytes are written verbatim.
    """

    def build(root: Path, entries: Mapping[str, str | bytes | None]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in entries.items():
            target = root / rel
            if content is None:
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return build


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def scan_context() -> Callable[..., Any]:
    """Build a ScanContext for a tree the same way the engine does."""

    async def build(
        root: Path,
        config: SanityGateConfig | None = None,
        log: Any = None,
    ) -> ScanContext:
        files = walk_files(root)
        corpus = await load_corpus(root, files)
        kwargs: dict[str, Any] = {"config": config or SanityGateConfig()}
        if log is not None:
            kwargs["log"] = log
        return ScanContext(root=root, files=tuple(files), corpus=corpus, **kwargs)

    return build



@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run from an empty home directory with no ambient config or root logging changes."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(home)
    monkeypatch.setenv("HOME", str(home))
    for key in ("SANITY_GATE_ROOT", "SANITY_GATE_ENFORCE_ROOT", "SANITY_GATE_DEBUG", "SANITY_GATE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield home
    root.handlers[:] = handlers
    root.setLevel(level)
