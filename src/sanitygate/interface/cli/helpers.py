"""Shared CLI helpers."""

import os
from pathlib import Path

DOTENV_FILES = (".env", ".env.local")


def load_dotenv(directory: Path | None = None) -> list[Path]:
    """Load dotenv files from ``directory`` (default: cwd) into os.environ.

    Existing variables are never overridden. Unreadable files are skipped.

    Returns:
        Files that were loaded.
    """
    base = directory or Path.cwd()
    loaded: list[Path] = []
    for name in DOTENV_FILES:
        env_file = base / name
        if not env_file.is_file():
            continue
        try:
            with open(env_file, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, _, value = line.partition("=")
                        key = key.removeprefix("export ").strip()
                        # Remove quotes if present
                        value = value.strip().strip("'\"")
                        os.environ.setdefault(key, value)
        except OSError:
            continue
        loaded.append(env_file)
    return loaded
