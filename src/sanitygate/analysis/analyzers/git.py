"""Working-tree cleanliness via ``git status --porcelain``."""

from dataclasses import dataclass

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity
from sanitygate.foundation.process import CommandTimeout, run_command

_SNIPPET_LINES = 5


@dataclass
class GitStatusAnalyzer:
    """Reports uncommitted changes in the repository containing the root.

    A missing git binary, a non-repository root or a timeout all mean no
    finding.
    """

    name: str = "git"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        try:
            outcome = await run_command(
                ["git", "status", "--porcelain"],
                cwd=ctx.root,
                timeout=ctx.config.tools.git_timeout,
            )
        except OSError as e:
            ctx.log("debug", "git", "Git not available, skipping", {"error": str(e)})
            return []

        if isinstance(outcome, CommandTimeout):
            ctx.log("debug", "git", "Git status timed out", {"seconds": outcome.seconds})
            return []
        if not outcome.ok:
            ctx.log("debug", "git", "Not a git repository or git failed", {
                "returncode": outcome.returncode,
            })
            return []

        changes = [line for line in outcome.stdout.splitlines() if line.strip()]
        if not changes:
            return []

        return [Issue(
            id="git-dirty-tree",
            category=IssueCategory.GIT,
            type=IssueType.UNCOMMITTED_CHANGES,
            severity=Severity.WARNING,
            message=(
                f"Working tree has {len(changes)} uncommitted change(s). "
                "Commit or stash before deployment."
            ),
            snippet="\n".join(changes[:_SNIPPET_LINES]),
            suggested_action="commit or stash changes",
        )]
