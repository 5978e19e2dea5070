"""Issue and report types produced by a scan.

Everything here is immutable. A ``Report`` is assembled once per scan and
handed to callers as-is.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class IssueCategory(Enum):
    """Area of the project an issue belongs to."""

    GIT = "git"
    FILESYSTEM = "filesystem"
    ASSETS = "assets"
    ORPHANS = "orphans"
    DEPENDENCIES = "dependencies"
    LICENSES = "licenses"
    SECURITY = "security"
    CODE_QUALITY = "code-quality"
    PERFORMANCE = "performance"
    ENV = "env"
    SEO = "seo"
    ACCESSIBILITY = "accessibility"
    BUILD = "build"


class Severity(Enum):
    """Issue severity, ordered ``INFO < WARNING < ERROR < CRITICAL``."""

    INFO = "info"
    """Informational - cleanup candidate."""

    WARNING = "warning"
    """Warning - should be addressed before shipping."""

    ERROR = "error"
    """Error - the project is likely broken."""

    CRITICAL = "critical"
    """Critical - security or legal exposure."""

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def blocking(self) -> bool:
        """Whether this severity fails a CLI gate."""
        return self.rank >= _SEVERITY_RANK[Severity.ERROR]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
    Severity.CRITICAL: 3,
}


class IssueType(Enum):
    """Specific kind of finding within a category."""

    UNCOMMITTED_CHANGES = "UNCOMMITTED_CHANGES"
    EMPTY_DIR = "EMPTY_DIR"
    ZERO_BYTE_FILE = "ZERO_BYTE_FILE"
    LARGE_FILE = "LARGE_FILE"
    BACKUP_FILE = "BACKUP_FILE"
    ORPHAN_ASSET = "ORPHAN_ASSET"
    UNUSED_DEP = "UNUSED_DEP"
    UNUSED_DEV_DEP = "UNUSED_DEV_DEP"
    MISSING_DEP = "MISSING_DEP"
    UNPINNED_VERSION = "UNPINNED_VERSION"
    VIRAL_LICENSE = "VIRAL_LICENSE"
    ORPHAN_MODULE = "ORPHAN_MODULE"
    HARDCODED_SECRET = "HARDCODED_SECRET"
    CONSOLE_LOG = "CONSOLE_LOG"
    TODO_COMMENT = "TODO_COMMENT"
    SYNC_IO = "SYNC_IO"
    MISSING_METADATA = "MISSING_METADATA"
    MISSING_ALT = "MISSING_ALT"
    MISSING_LABEL = "MISSING_LABEL"
    MISSING_ENV_VAR = "MISSING_ENV_VAR"
    BUILD_FAILURE = "BUILD_FAILURE"


REDACTED = "***REDACTED***"
"""Snippet used for every hardcoded-secret finding."""


@dataclass(frozen=True, slots=True)
class Issue:
    """A single finding.

    Attributes:
        id: Unique within a report; derived from kind and subject
        category: Area of the project
        type: Specific kind of finding
        severity: How urgent the finding is
        message: Human-readable description
        path: POSIX path relative to the scan root, if file-specific
        snippet: Short excerpt; never raw secret text
        suggested_action: Remediation hint
    """

    id: str
    category: IssueCategory
    type: IssueType
    severity: Severity
    message: str
    path: str | None = None
    snippet: str | None = None
    suggested_action: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent optionals."""
        data: dict[str, Any] = {
            "id": self.id,
            "category": self.category.value,
            "type": self.type.value,
            "severity": self.severity.value,
        }
        if self.path is not None:
            data["path"] = self.path
        data["message"] = self.message
        if self.snippet is not None:
            data["snippet"] = self.snippet
        if self.suggested_action is not None:
            data["suggestedAction"] = self.suggested_action
        return data


def issue_id(prefix: str, subject: str) -> str:
    """Build a deterministic issue id, e.g. ``zero-byte-src/a.ts``."""
    return f"{prefix}-{subject}"


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Order issues most severe first, keeping input order within a level."""
    return sorted(issues, key=lambda i: -i.severity.rank)


@dataclass(frozen=True, slots=True)
class ScanStats:
    """Summary numbers for a report."""

    files_scanned: int = 0
    orphans_found: int = 0
    unused_deps: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "filesScanned": self.files_scanned,
            "orphansFound": self.orphans_found,
            "unusedDeps": self.unused_deps,
        }


@dataclass(frozen=True, slots=True)
class Report:
    """The outcome of one scan.

    Attributes:
        project: Base name of the scanned directory
        timestamp: ISO-8601 UTC completion time
        issues: Findings in analyzer execution order
        stats: Summary numbers
        root_path: Absolute scan root
    """

    project: str
    timestamp: str
    issues: tuple[Issue, ...]
    stats: ScanStats
    root_path: str

    @property
    def has_blocking_issues(self) -> bool:
        """True when any issue is error or critical."""
        return any(i.severity.blocking for i in self.issues)

    def count_by_category(self) -> dict[str, int]:
        return dict(Counter(i.category.value for i in self.issues))

    def count_by_severity(self) -> dict[str, int]:
        return dict(Counter(i.severity.value for i in self.issues))

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "timestamp": self.timestamp,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats.to_dict(),
            "rootPath": self.root_path,
        }
