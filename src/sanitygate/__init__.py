"""Sanity Gate - project hygiene scanner.

Walks a project tree, runs a fixed battery of analyzers and returns one
report of typed, severity-ranked issues. Nothing in the scanned project is
ever modified.

    from sanitygate import scan_project_sync
    report = scan_project_sync("path/to/project")
"""

from sanitygate.analysis import (
    Issue,
    IssueCategory,
    IssueType,
    Report,
    ScanStats,
    Severity,
    scan_project,
    scan_project_sync,
    sort_issues,
)
from sanitygate.foundation.errors import ErrorCode, SanityGateError
from sanitygate.preview import FilePreview, read_preview

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "FilePreview",
    "Issue",
    "IssueCategory",
    "IssueType",
    "Report",
    "SanityGateError",
    "ScanStats",
    "Severity",
    "__version__",
    "read_preview",
    "scan_project",
    "scan_project_sync",
    "sort_issues",
]
