"""Per-file text checks over the source corpus.

Covers hardcoded secrets, stray debug output, TODO/FIXME markers,
synchronous filesystem calls, missing page metadata and two accessibility
heuristics. Every pattern is compiled once at import.
"""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import (
    REDACTED,
    Issue,
    IssueCategory,
    IssueType,
    Severity,
    issue_id,
)


@dataclass(frozen=True, slots=True)
class SecretSignature:
    """A credential format to look for.

    Attributes:
        name: Human label used in the issue message and id
        pattern: Compiled regex; group 1, if present, is the credential part
        min_length: Minimum length of group 1 for a match to count
    """

    name: str
    pattern: re.Pattern[str]
    min_length: int = 0

    def first_match(self, content: str) -> re.Match[str] | None:
        for match in self.pattern.finditer(content):
            if self.min_length and len(match.group(1)) < self.min_length:
                continue
            return match
        return None


SECRET_SIGNATURES: tuple[SecretSignature, ...] = (
    SecretSignature("AWS Access Key", re.compile(r"""AWS_ACCESS_KEY_ID\s*=\s*['"][A-Z0-9]{20}['"]""")),
    SecretSignature("Bearer Token", re.compile(r"Bearer\s+([a-zA-Z0-9\-._~+/]+=*)"), min_length=16),
    SecretSignature("GitHub Personal Access Token", re.compile(r"ghp_[a-zA-Z0-9]{36}")),
    SecretSignature("Stripe Secret Key", re.compile(r"sk_live_[0-9a-zA-Z]{24}")),
    SecretSignature("Google API Key", re.compile(r"AIza[0-9A-Za-z\-_]{35}")),
)

_CONSOLE_LOG = re.compile(r"console\.log\(")
_DEV_GUARD_WINDOW = 10
_TODO_SLASH = re.compile(r"//\s*(?:TODO|FIXME):")
_TODO_HASH = re.compile(r"#\s*(?:TODO|FIXME):")
_SYNC_IO = re.compile(r"\b(?:readFileSync|writeFileSync|readdirSync)\b")
_IMG_WITHOUT_ALT = re.compile(r"<img(?![^>]*alt=)[^>]*>")
_INPUT_WITHOUT_ARIA = re.compile(r"<input(?![^>]*aria-label)[^>]*>")

_JSX_SUFFIXES = frozenset({".tsx", ".jsx"})
_ROUTE_STEMS = frozenset({"page", "layout"})

# Path of this module, skipped when scanning a tree that contains it
SELF_PATH_SUFFIX = PurePosixPath(*Path(__file__).parts[-4:]).as_posix()


def _has_unguarded_console_log(lines: list[str]) -> bool:
    for i, line in enumerate(lines):
        if not _CONSOLE_LOG.search(line):
            continue
        window = "\n".join(lines[max(0, i - _DEV_GUARD_WINDOW):i])
        if "process.env.NODE_ENV" in window and "development" in window:
            continue
        return True
    return False


@dataclass
class ContentPatternAnalyzer:
    """Runs the text heuristics against every code file in the corpus."""

    name: str = "content"
    exclude_suffix: str = SELF_PATH_SUFFIX

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        issues: list[Issue] = []
        for path, content in ctx.corpus.code_files():
            if path.endswith(self.exclude_suffix):
                continue
            issues.extend(self.check_file(path, content))
        return issues

    def check_file(self, path: str, content: str) -> list[Issue]:
        """All content findings for one file, in a fixed order."""
        p = PurePosixPath(path)
        issues = self._secrets(path, content)

        if not p.stem.endswith("logger") and _has_unguarded_console_log(content.splitlines()):
            issues.append(Issue(
                id=issue_id("console-log", path),
                category=IssueCategory.CODE_QUALITY,
                type=IssueType.CONSOLE_LOG,
                severity=Severity.WARNING,
                path=path,
                message="Console.log statement found. Remove before production.",
                suggested_action="remove console.log or wrap in dev check",
            ))

        todo = _TODO_HASH if p.suffix == ".py" else _TODO_SLASH
        if todo.search(content):
            issues.append(Issue(
                id=issue_id("todo", path),
                category=IssueCategory.CODE_QUALITY,
                type=IssueType.TODO_COMMENT,
                severity=Severity.INFO,
                path=path,
                message="Unresolved TODO or FIXME comment found.",
                suggested_action="resolve TODO/FIXME or remove comment",
            ))

        if _SYNC_IO.search(content):
            issues.append(Issue(
                id=issue_id("sync-io", path),
                category=IssueCategory.PERFORMANCE,
                type=IssueType.SYNC_IO,
                severity=Severity.WARNING,
                path=path,
                message="Synchronous I/O operation detected. Use async alternatives for better performance.",
                suggested_action="convert to async (readFile, writeFile, readdir)",
            ))

        if p.suffix in _JSX_SUFFIXES:
            issues.extend(self._markup(p, path, content))
        return issues

    def _secrets(self, path: str, content: str) -> list[Issue]:
        issues = []
        for signature in SECRET_SIGNATURES:
            if signature.first_match(content) is None:
                continue
            issues.append(Issue(
                id=issue_id("secret", f"{path}-{signature.name}"),
                category=IssueCategory.SECURITY,
                type=IssueType.HARDCODED_SECRET,
                severity=Severity.CRITICAL,
                path=path,
                message=f"Potential hardcoded secret found: {signature.name}",
                snippet=REDACTED,
                suggested_action="move to environment variable and remove from code",
            ))
        return issues

    def _markup(self, p: PurePosixPath, path: str, content: str) -> list[Issue]:
        issues = []
        if p.stem in _ROUTE_STEMS and "app" in p.parts[:-1]:
            if "export const metadata" not in content and "generateMetadata" not in content:
                issues.append(Issue(
                    id=issue_id("missing-metadata", path),
                    category=IssueCategory.SEO,
                    type=IssueType.MISSING_METADATA,
                    severity=Severity.WARNING,
                    path=path,
                    message="Page/Layout missing metadata export. Add title and description for SEO.",
                    suggested_action="add metadata export with title and description",
                ))

        if _IMG_WITHOUT_ALT.search(content):
            issues.append(Issue(
                id=issue_id("missing-alt", path),
                category=IssueCategory.ACCESSIBILITY,
                type=IssueType.MISSING_ALT,
                severity=Severity.WARNING,
                path=path,
                message="Image tag found without alt attribute. Add alt text for accessibility.",
                suggested_action="add alt attribute to img tag",
            ))

        if _INPUT_WITHOUT_ARIA.search(content) and "<label" not in content:
            issues.append(Issue(
                id=issue_id("missing-label", path),
                category=IssueCategory.ACCESSIBILITY,
                type=IssueType.MISSING_LABEL,
                severity=Severity.WARNING,
                path=path,
                message="Input field found without associated label or aria-label.",
                suggested_action="add label element or aria-label attribute",
            ))
        return issues
