"""Type-check health via the project's TypeScript compiler."""

from dataclasses import dataclass

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity
from sanitygate.foundation.process import CommandTimeout, run_command

_SNIPPET_LINES = 3


@dataclass
class BuildAnalyzer:
    """Runs ``tsc --noEmit`` when the project has a ``tsconfig.json``.

    Only pass or fail is reported, with the first lines of compiler output.
    """

    name: str = "build"

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        if not (ctx.root / "tsconfig.json").is_file():
            return []

        command = ctx.config.tools.type_check_command
        try:
            outcome = await run_command(command, cwd=ctx.root, timeout=ctx.config.tools.build_timeout)
        except OSError as e:
            ctx.log("warn", "build", "Type checker not available, skipping", {"error": str(e)})
            return []

        if isinstance(outcome, CommandTimeout):
            ctx.log("warn", "build", "Type check timed out", {"seconds": outcome.seconds})
            return []
        if outcome.ok:
            return []

        excerpt = outcome.head(_SNIPPET_LINES) or "\n".join(outcome.stderr.splitlines()[:_SNIPPET_LINES])
        return [Issue(
            id="build-error",
            category=IssueCategory.BUILD,
            type=IssueType.BUILD_FAILURE,
            severity=Severity.ERROR,
            message="TypeScript build/check failed.",
            snippet=excerpt or None,
            suggested_action="fix TypeScript errors",
        )]
