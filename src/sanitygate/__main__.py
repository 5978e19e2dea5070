"""Allow ``python -m sanitygate``."""

from sanitygate.interface.cli.main import cli_entrypoint

if __name__ == "__main__":
    cli_entrypoint()
