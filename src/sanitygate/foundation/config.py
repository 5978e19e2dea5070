"""Sanity Gate configuration management.

Loads configuration from .sanitygate/config.yaml with built-in defaults.
Settings can be overridden via environment variables (SANITY_GATE_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .sanitygate/config.yaml (project-local)
3. ~/.sanitygate/config.yaml (user-global)
4. Built-in defaults

The scan engine never reads the environment itself; the CLI loads a
``SanityGateConfig`` here and passes it in.
"""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from sanitygate.foundation.concurrency import DEFAULT_READ_LIMIT, DEFAULT_STAT_LIMIT
from sanitygate.foundation.errors import validation_error

logger = logging.getLogger(__name__)

ENV_PREFIX = "SANITY_GATE_"

DEFAULT_DEPCHECK_IGNORES: tuple[str, ...] = (
    "eslint*", "@types/*", "@testing-library/*", "jest*", "vitest*", "mocha*",
    "chai*", "sinon*", "cypress*", "playwright*", "webpack*", "rollup*",
    "vite*", "tailwindcss*", "postcss*", "autoprefixer*",
)

DEFAULT_DEPCHECK_IGNORE_PATTERNS: tuple[str, ...] = (
    "dist", "build", ".next", "node_modules",
    "*.test.*", "*.spec.*", "tests", "__tests__", "*.stories.*",
    "__mocks__", "coverage", ".storybook",
)


@dataclass(frozen=True, slots=True)
class WorkspaceConfig:
    """Scan-root confinement."""

    root: str | None = None
    """Directory scans must stay inside. None means the current directory."""

    enforce_root: bool = False
    """Reject scan targets outside ``root``."""


@dataclass(frozen=True, slots=True)
class ScanLimits:
    """Concurrency limits and thresholds for the engine."""

    read_limit: int = DEFAULT_READ_LIMIT
    """Concurrent source-file reads."""

    stat_limit: int = DEFAULT_STAT_LIMIT
    """Concurrent file stats."""

    large_file_bytes: int = 5 * 1024 * 1024
    """Files strictly larger than this are reported as LARGE_FILE."""


@dataclass(frozen=True, slots=True)
class ToolConfig:
    """External tools the engine shells out to."""

    git_timeout: float = 15.0
    dependency_audit_timeout: float = 8.0
    build_timeout: float = 120.0

    dependency_audit_command: tuple[str, ...] = ("npx", "--no", "depcheck")
    """Auditor invocation; JSON and ignore flags are appended."""

    type_check_command: tuple[str, ...] = ("npx", "tsc", "--noEmit")

    depcheck_ignores: tuple[str, ...] = DEFAULT_DEPCHECK_IGNORES
    depcheck_ignore_patterns: tuple[str, ...] = DEFAULT_DEPCHECK_IGNORE_PATTERNS


@dataclass(frozen=True, slots=True)
class SanityGateConfig:
    """Top-level configuration."""

    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    scan: ScanLimits = field(default_factory=ScanLimits)
    tools: ToolConfig = field(default_factory=ToolConfig)
    debug: bool = False


_SECTIONS: dict[str, type] = {
    "workspace": WorkspaceConfig,
    "scan": ScanLimits,
    "tools": ToolConfig,
}


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config_dict: dict, environ: dict[str, str]) -> dict:
    """Apply environment variable overrides.

    Two shorthand variables are honoured for confinement, and any other
    setting follows SANITY_GATE_SECTION_KEY.

    Examples:
        SANITY_GATE_ROOT=/srv/projects
        SANITY_GATE_ENFORCE_ROOT=true
        SANITY_GATE_TOOLS_BUILD_TIMEOUT=300
    """
    if root := environ.get(f"{ENV_PREFIX}ROOT"):
        config_dict["workspace"]["root"] = root
    if (enforce := environ.get(f"{ENV_PREFIX}ENFORCE_ROOT")) is not None:
        # Only the literal "true" enables confinement
        config_dict["workspace"]["enforce_root"] = enforce.strip().lower() == "true"
    if (debug := environ.get(f"{ENV_PREFIX}DEBUG")) is not None:
        config_dict["debug"] = _parse_bool(debug)

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        rest = key[len(ENV_PREFIX):].lower()
        for section in _SECTIONS:
            if rest.startswith(f"{section}_"):
                config_dict[section][rest[len(section) + 1:]] = value
                break
    return config_dict


def _coerce(cls: type, raw: dict[str, Any], section: str) -> Any:
    """Build a section dataclass, converting strings from env/YAML."""
    defaults = cls()
    kwargs: dict[str, Any] = {}
    known = {f.name for f in fields(cls)}
    for key, value in raw.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %s.%s", section, key)
            continue
        default = getattr(defaults, key)
        try:
            if isinstance(default, bool):
                kwargs[key] = _parse_bool(value) if isinstance(value, str) else bool(value)
            elif isinstance(default, int):
                kwargs[key] = int(value)
            elif isinstance(default, float):
                kwargs[key] = float(value)
            elif isinstance(default, tuple):
                kwargs[key] = tuple(value.split()) if isinstance(value, str) else tuple(value)
            else:
                kwargs[key] = value
        except (TypeError, ValueError) as e:
            raise validation_error(f"bad value for {section}.{key}: {value!r}") from e
    return cls(**kwargs)


def _dict_to_config(data: dict) -> SanityGateConfig:
    sections: dict[str, Any] = {}
    for name, cls in _SECTIONS.items():
        raw = data.get(name) or {}
        if not isinstance(raw, dict):
            raise validation_error(f"config section {name!r} must be a mapping")
        sections[name] = _coerce(cls, raw, name)
    debug = data.get("debug", False)
    return SanityGateConfig(
        **sections,
        debug=_parse_bool(debug) if isinstance(debug, str) else bool(debug),
    )


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("top level must be a mapping")
    return data


def load_config(
    path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> SanityGateConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (SANITY_GATE_*)
    2. Explicit path if provided
    3. .sanitygate/config.yaml (project-local)
    4. ~/.sanitygate/config.yaml (user-global)
    5. Built-in defaults

    Args:
        path: Optional explicit config file path.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        Merged SanityGateConfig instance.

    Raises:
        SanityGateError: VALIDATION_ERROR when an explicit config file is
            missing or malformed, or a value has the wrong type.
    """
    defaults = SanityGateConfig()
    config_dict: dict[str, Any] = {
        "workspace": asdict(defaults.workspace),
        "scan": asdict(defaults.scan),
        "tools": asdict(defaults.tools),
        "debug": defaults.debug,
    }

    if path:
        explicit = Path(path)
        try:
            _deep_update(config_dict, _read_yaml(explicit))
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise validation_error(f"cannot load config {explicit}: {e}") from e
    else:
        for candidate in (
            Path(".sanitygate/config.yaml"),
            Path.home() / ".sanitygate" / "config.yaml",
        ):
            if not candidate.exists():
                continue
            try:
                _deep_update(config_dict, _read_yaml(candidate))
                break
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning("Skipping invalid config file %s: %s", candidate, e)

    config_dict = _apply_env_overrides(
        config_dict, dict(os.environ) if environ is None else environ
    )
    return _dict_to_config(config_dict)
