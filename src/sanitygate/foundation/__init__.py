"""Foundation layer - errors, config, paths, concurrency and process helpers.

Nothing here imports from the analysis or interface layers.
"""

from sanitygate.foundation.config import SanityGateConfig, load_config
from sanitygate.foundation.errors import ErrorCode, SanityGateError
from sanitygate.foundation.paths import is_within_root, resolve_scan_target

__all__ = [
    "ErrorCode",
    "SanityGateConfig",
    "SanityGateError",
    "is_within_root",
    "load_config",
    "resolve_scan_target",
]
