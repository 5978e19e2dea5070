"""Scan-root resolution and confinement.

Every path the engine or the preview helper touches goes through here first.
Resolution is lexical: symbolic links are never followed while normalising,
and a scan root that is itself a link is rejected outright.
"""

import os
from pathlib import Path

from sanitygate.foundation.errors import (
    ErrorCode,
    SanityGateError,
    security_error,
    validation_error,
)


def _lexical_abspath(path: str | os.PathLike[str], base_dir: str | os.PathLike[str]) -> str:
    expanded = os.path.expanduser(os.fspath(path))
    return os.path.normpath(os.path.join(os.fspath(base_dir), expanded))


def is_within_root(candidate: str | os.PathLike[str], root: str | os.PathLike[str]) -> bool:
    """Check whether candidate equals or descends from root.

    Comparison is case-insensitive and separator-safe, so ``/ws2`` is never
    inside ``/ws``.

    Example:
        >>> is_within_root("/ws/sub", "/ws")
        True
        >>> is_within_root("/ws2", "/ws")
        False
    """
    c = os.path.normpath(os.fspath(candidate)).lower()
    r = os.path.normpath(os.fspath(root)).lower()
    if c == r:
        return True
    prefix = r if r.endswith(os.sep) else r + os.sep
    return c.startswith(prefix)


def _check_requested(requested_path: object) -> str:
    if requested_path is None:
        return "."
    if not isinstance(requested_path, (str, os.PathLike)):
        raise validation_error(
            f"expected a path string, got {type(requested_path).__name__}"
        )
    raw = os.fspath(requested_path)
    if not isinstance(raw, str):
        raise validation_error("path must be text, not bytes")
    if "\x00" in raw:
        raise validation_error("path contains a NUL byte")
    return raw.strip() or "."


def resolve_scan_target(
    requested_path: str | os.PathLike[str] | None = None,
    *,
    workspace_root: str | os.PathLike[str] | None = None,
    enforce: bool = False,
    base_dir: str | os.PathLike[str] | None = None,
) -> Path:
    """Resolve and validate a directory to scan.

    Args:
        requested_path: Path as given by the caller. Blank means ``"."``.
        workspace_root: Directory the scan must stay inside when ``enforce``
            is set. Defaults to ``base_dir``.
        enforce: Whether to apply workspace confinement.
        base_dir: Directory relative paths are resolved against. Defaults to
            the current working directory.

    Returns:
        Absolute, lexically normalised path of an existing, real directory.

    Raises:
        SanityGateError: VALIDATION_ERROR for malformed input, a non-directory
            or a path the OS refuses to inspect (for example a name that is too
            long), PATH_NOT_FOUND (also when a parent is a regular file),
            PERMISSION_DENIED, or SECURITY_ERROR for a confinement violation
            or a symlinked root.
    """
    raw = _check_requested(requested_path)
    base = os.fspath(base_dir) if base_dir is not None else os.getcwd()
    candidate = _lexical_abspath(raw, base)

    if enforce:
        root = _lexical_abspath(workspace_root, base) if workspace_root else os.path.normpath(base)
        if not is_within_root(candidate, root):
            raise security_error(
                f"{candidate} is outside the workspace root {root}",
                path=candidate,
                root=root,
            )
        if os.path.exists(candidate) and os.path.exists(root):
            if not is_within_root(os.path.realpath(candidate), os.path.realpath(root)):
                raise security_error(
                    f"{candidate} resolves outside the workspace root {root}",
                    path=candidate,
                    root=root,
                )

    try:
        os.lstat(candidate)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise SanityGateError(ErrorCode.PATH_NOT_FOUND, {"path": candidate}, cause=e) from e
    except PermissionError as e:
        raise SanityGateError(ErrorCode.PERMISSION_DENIED, {"path": candidate}, cause=e) from e
    except OSError as e:
        raise validation_error(f"cannot inspect {candidate}: {e.strerror or e}", path=candidate) from e

    path = Path(candidate)
    if path.is_symlink():
        raise security_error(f"{candidate} is a symbolic link", path=candidate)
    if not path.is_dir():
        raise validation_error(f"{candidate} is not a directory", path=candidate)
    if not os.access(candidate, os.R_OK | os.X_OK):
        raise SanityGateError(ErrorCode.PERMISSION_DENIED, {"path": candidate})
    return path


def resolve_within(root: str | os.PathLike[str], file_path: str | os.PathLike[str]) -> Path:
    """Resolve a root-relative file path, refusing anything that escapes root.

    Both the lexical and the symlink-resolved locations must stay inside the
    root.

    Raises:
        SanityGateError: VALIDATION_ERROR for malformed input, SECURITY_ERROR
            when the path leaves the root.
    """
    raw = _check_requested(file_path)
    root_abs = os.path.normpath(os.path.abspath(os.fspath(root)))
    target = _lexical_abspath(raw, root_abs)
    if not is_within_root(target, root_abs):
        raise security_error("file path escapes the project root", path=raw)
    if os.path.exists(target):
        if not is_within_root(os.path.realpath(target), os.path.realpath(root_abs)):
            raise security_error("file path escapes the project root", path=raw)
    return Path(target)


def relative_posix(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return path relative to root with forward slashes."""
    return Path(os.path.relpath(os.fspath(path), os.fspath(root))).as_posix()
