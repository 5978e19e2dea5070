"""Command-line interface."""

from sanitygate.interface.cli.main import cli_entrypoint, main

__all__ = ["cli_entrypoint", "main"]
