"""Unreferenced files under ``public/``."""

import asyncio
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.corpus import walk_files
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id

# Framework starter assets that are usually referenced from config, not code
DEFAULT_ASSETS: frozenset[str] = frozenset({
    "next.svg",
    "vercel.svg",
    "window.svg",
    "globe.svg",
    "file.svg",
})


@dataclass
class AssetOrphanAnalyzer:
    """Flags public assets whose name appears in no corpus file.

    Matching is a plain substring search for the asset's basename, which
    also covers references by full public-relative path.
    """

    name: str = "assets"
    skip: frozenset[str] = field(default=DEFAULT_ASSETS)

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        public = ctx.root / "public"
        if not public.is_dir():
            return []

        assets = await asyncio.to_thread(walk_files, public)
        issues: list[Issue] = []
        for asset in assets:
            basename = PurePosixPath(asset).name
            if basename in self.skip:
                continue
            if ctx.corpus.contains_text(basename):
                continue
            rel = f"public/{asset}"
            issues.append(Issue(
                id=issue_id("orphan-asset", asset),
                category=IssueCategory.ASSETS,
                type=IssueType.ORPHAN_ASSET,
                severity=Severity.INFO,
                path=rel,
                message=f'Asset "{basename}" appears to be unused in source code.',
                suggested_action="delete asset file",
            ))
        return issues
