"""Main CLI entry point.

    sanitygate scan [PATH]
    sanitygate preview ROOT FILE
"""

import sys

import click
from rich.console import Console

from sanitygate import __version__
from sanitygate.foundation.logging import configure_logging
from sanitygate.interface.cli.error_handler import handle_error
from sanitygate.interface.cli.preview_cmd import preview
from sanitygate.interface.cli.scan_cmd import scan

console = Console(stderr=True)


def cli_entrypoint() -> None:
    """Wrapped entrypoint with global error handling.

    Called from pyproject.toml [project.scripts].
    """
    try:
        main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        console.print("\n[dim]Interrupted[/]")
        sys.exit(130)
    except Exception as e:
        handle_error(e)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a debug log to this file",
)
@click.version_option(__version__, prog_name="sanitygate")
def main(debug: bool, log_file: str | None) -> None:
    """Sanity Gate - project health scanner."""
    configure_logging(debug=debug, log_file=log_file)


main.add_command(scan)
main.add_command(preview)
