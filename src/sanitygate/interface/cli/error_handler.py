"""CLI error handler.

Renders a ``SanityGateError`` either for humans (rich, on stderr) or as JSON
for scripts, then exits with status 1.
"""

import json
import sys
from typing import NoReturn

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from sanitygate.foundation.errors import SanityGateError, unknown_error


def handle_error(
    error: SanityGateError | Exception,
    json_output: bool = False,
) -> NoReturn:
    """Handle an error with optional JSON output for machine consumption.

    Args:
        error: The error to handle (SanityGateError or generic Exception)
        json_output: If True, write JSON to stderr instead of rich text

    Raises:
        SystemExit: Always exits with code 1
    """
    if not isinstance(error, SanityGateError):
        error = unknown_error(error)

    if json_output:
        print(format_error_for_json(error), file=sys.stderr)
        sys.exit(1)

    _print_human_error(error)
    sys.exit(1)


def _print_human_error(error: SanityGateError) -> None:
    console = Console(stderr=True)

    header = Text()
    header.append(f"{error.error_id} ", style="bold red")
    header.append(f"{error.kind}: ", style="bold")
    header.append(error.message)
    console.print(header)

    if error.recovery_hints:
        console.print("\n[bold]What you can do:[/]")
        for i, hint in enumerate(error.recovery_hints, 1):
            console.print(f"  {i}. {escape(hint)}")


def format_error_for_json(error: SanityGateError | Exception) -> str:
    """Format an error as a JSON string, including its cause if any."""
    if not isinstance(error, SanityGateError):
        error = unknown_error(error)

    error_dict = error.to_dict()
    if error.cause:
        error_dict["cause"] = str(error.cause)
    return json.dumps(error_dict)
