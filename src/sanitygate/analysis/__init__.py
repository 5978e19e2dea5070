"""Scan engine: tree discovery, analyzers and report assembly."""

from sanitygate.analysis.engine import scan_project, scan_project_sync
from sanitygate.analysis.types import (
    Issue,
    IssueCategory,
    IssueType,
    Report,
    ScanStats,
    Severity,
    sort_issues,
)

__all__ = [
    "Issue",
    "IssueCategory",
    "IssueType",
    "Report",
    "ScanStats",
    "Severity",
    "scan_project",
    "scan_project_sync",
    "sort_issues",
]
