"""Source modules that no other source file mentions."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id

# Entry points loaded by convention rather than by import
RESERVED_STEMS: frozenset[str] = frozenset({
    "index",
    "page",
    "layout",
    "route",
    "globals",
    "__init__",
    "__main__",
    "conftest",
})


@dataclass
class OrphanModuleAnalyzer:
    """Flags code files whose extension-less name appears in no other file.

    Purely textual: two modules sharing a basename hide each other, and a
    name mentioned only in a comment still counts as a reference.
    """

    name: str = "orphans"
    reserved: frozenset[str] = field(default=RESERVED_STEMS)

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        issues: list[Issue] = []
        for path, _ in ctx.corpus.code_files():
            p = PurePosixPath(path)
            if p.stem in self.reserved:
                continue
            if ctx.corpus.contains_text(p.stem, exclude=path):
                continue
            issues.append(Issue(
                id=issue_id("orphan", path),
                category=IssueCategory.ORPHANS,
                type=IssueType.ORPHAN_MODULE,
                severity=Severity.WARNING,
                path=path,
                message=f'Possible orphan module: "{p.name}"',
                snippet="No direct text reference found in other source files.",
                suggested_action="delete file or add import reference",
            ))
        return issues
