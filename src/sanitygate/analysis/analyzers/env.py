"""Environment variables read in code but declared in no ``.env*`` file."""

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id

_ENV_READ = re.compile(r"process\.env\.([A-Z_][A-Z0-9_]*)")

# Set by the runtime, never by the project
IMPLICIT_VARS: frozenset[str] = frozenset({"NODE_ENV"})

_SNIPPET_FILES = 3


def parse_env_keys(text: str) -> set[str]:
    """Names declared in dotenv-format text.

    Blank lines and ``#`` comments are skipped; an ``export`` prefix is
    allowed. A bare name with no ``=`` counts as declared.
    """
    keys: set[str] = set()
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key = line.split("=", 1)[0].strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if key:
            keys.add(key)
    return keys


def _declared_keys(root: Path) -> set[str]:
    keys: set[str] = set()
    for env_file in sorted(root.glob(".env*")):
        if not env_file.is_file():
            continue
        try:
            keys |= parse_env_keys(env_file.read_text(encoding="utf-8", errors="replace"))
        except OSError:
            continue
    return keys


@dataclass
class EnvVarAnalyzer:
    """Cross-checks ``process.env.NAME`` reads against root dotenv files."""

    name: str = "env"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        used: dict[str, list[str]] = {}
        for path, content in ctx.corpus.items():
            for match in _ENV_READ.finditer(content):
                var = match.group(1)
                if var in IMPLICIT_VARS:
                    continue
                files = used.setdefault(var, [])
                if path not in files:
                    files.append(path)

        if not used:
            return []

        declared = await asyncio.to_thread(_declared_keys, ctx.root)
        issues: list[Issue] = []
        for var, files in used.items():
            if var in declared:
                continue
            shown = ", ".join(files[:_SNIPPET_FILES])
            if len(files) > _SNIPPET_FILES:
                shown += f" (+{len(files) - _SNIPPET_FILES} more)"
            issues.append(Issue(
                id=issue_id("missing-env", var),
                category=IssueCategory.ENV,
                type=IssueType.MISSING_ENV_VAR,
                severity=Severity.ERROR,
                message=f'Environment variable "{var}" is used in code but not defined in any .env file.',
                snippet=f"Used in: {shown}",
                suggested_action="add to .env file",
            ))
        return issues
