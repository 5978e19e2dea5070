"""Assembly of analyzer output into a ``Report``."""

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Report, ScanStats

_UNUSED_TYPES = frozenset({IssueType.UNUSED_DEP, IssueType.UNUSED_DEV_DEP})


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def dedupe(issues: Iterable[Issue]) -> tuple[Issue, ...]:
    """Drop issues whose id was already seen, keeping the first."""
    seen: set[str] = set()
    kept: list[Issue] = []
    for issue in issues:
        if issue.id in seen:
            continue
        seen.add(issue.id)
        kept.append(issue)
    return tuple(kept)


def assemble_report(
    root: Path,
    batches: Iterable[Iterable[Issue]],
    *,
    files_scanned: int,
    now: datetime | None = None,
) -> Report:
    """Merge per-analyzer issue lists into a frozen report.

    Args:
        root: Absolute scan root
        batches: Issue lists in analyzer execution order
        files_scanned: Size of the tree walk
        now: Completion time (defaults to the current time)
    """
    issues = dedupe(issue for batch in batches for issue in batch)
    stats = ScanStats(
        files_scanned=files_scanned,
        orphans_found=sum(1 for i in issues if i.category is IssueCategory.ORPHANS),
        unused_deps=sum(1 for i in issues if i.type in _UNUSED_TYPES),
    )
    return Report(
        project=root.name,
        timestamp=iso_timestamp(now),
        issues=issues,
        stats=stats,
        root_path=str(root),
    )
