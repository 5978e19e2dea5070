"""Read-only preview of a single file inside a project root."""

import os
from dataclasses import dataclass
from pathlib import Path

from sanitygate.foundation.errors import ErrorCode, SanityGateError, validation_error
from sanitygate.foundation.paths import resolve_scan_target, resolve_within

MAX_PREVIEW_BYTES = 1024 * 1024


@dataclass(frozen=True, slots=True)
class FilePreview:
    """File content split for display.

    Attributes:
        path: Absolute file path
        content: Full text, decoded as UTF-8 with replacement
        lines: ``content`` split into lines
        size: Size in bytes
    """

    path: Path
    content: str
    lines: tuple[str, ...]
    size: int

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "content": self.content,
            "lines": list(self.lines),
            "lineCount": self.line_count,
            "size": self.size,
        }


def read_preview(
    root_path: str | os.PathLike[str],
    file_path: str | os.PathLike[str],
    *,
    max_bytes: int = MAX_PREVIEW_BYTES,
) -> FilePreview:
    """Load a file for preview, refusing anything outside ``root_path``.

    Args:
        root_path: Project root; must be an existing, non-symlink directory.
        file_path: Path relative to the root (absolute paths must still lie
            inside it).
        max_bytes: Size cap.

    Raises:
        SanityGateError: VALIDATION_ERROR for an empty path, a non-regular
            file or a path the OS refuses to inspect, SECURITY_ERROR when the
            path escapes the root, PATH_NOT_FOUND, PERMISSION_DENIED,
            FILE_TOO_LARGE.
    """
    if file_path is None or not str(file_path).strip():
        raise validation_error("file path is required")

    root = resolve_scan_target(root_path)
    target = resolve_within(root, file_path)

    try:
        st = target.stat()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise SanityGateError(ErrorCode.PATH_NOT_FOUND, {"path": str(target)}, cause=e) from e
    except PermissionError as e:
        raise SanityGateError(ErrorCode.PERMISSION_DENIED, {"path": str(target)}, cause=e) from e
    except OSError as e:
        raise validation_error(f"cannot inspect {target}: {e.strerror or e}", path=str(target)) from e

    if not target.is_file():
        raise validation_error(f"{target} is not a regular file", path=str(target))
    if st.st_size > max_bytes:
        raise SanityGateError(
            ErrorCode.FILE_TOO_LARGE,
            {"path": str(target), "size": st.st_size, "limit": max_bytes},
        )

    try:
        content = target.read_text(encoding="utf-8", errors="replace")
    except PermissionError as e:
        raise SanityGateError(ErrorCode.PERMISSION_DENIED, {"path": str(target)}, cause=e) from e
    return FilePreview(
        path=target,
        content=content,
        lines=tuple(content.split("\n")),
        size=st.st_size,
    )
