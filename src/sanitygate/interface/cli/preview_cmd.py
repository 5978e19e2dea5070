"""Preview command: show one file from a project, confined to its root."""

import json

import click
from rich.console import Console
from rich.syntax import Syntax

from sanitygate.foundation.errors import SanityGateError
from sanitygate.interface.cli.error_handler import handle_error
from sanitygate.preview import read_preview

console = Console()


@click.command("preview")
@click.argument("root")
@click.argument("file")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def preview(root: str, file: str, json_output: bool) -> None:
    """Print FILE (relative to project ROOT) with line numbers.

    \b
    Examples:
        sanitygate preview . src/app/page.tsx
        sanitygate preview ~/my-app package.json --json
    """
    try:
        result = read_preview(root, file)
    except SanityGateError as e:
        handle_error(e, json_output=json_output)

    if json_output:
        click.echo(json.dumps(result.to_dict()))
        return

    lexer = Syntax.guess_lexer(str(result.path), code=result.content)
    console.print(f"[dim]{result.path} ({result.size} bytes, {result.line_count} lines)[/]")
    console.print(Syntax(result.content, lexer, line_numbers=True))
