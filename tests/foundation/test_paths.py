"""Tests for scan-root resolution and workspace confinement."""

import os
from pathlib import Path

import pytest

from sanitygate.foundation.errors import ErrorCode, SanityGateError
from sanitygate.foundation.paths import (
    is_within_root,
    relative_posix,
    resolve_scan_target,
    resolve_within,
)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "ws" / "sub").mkdir(parents=True)
    (tmp_path / "ws2").mkdir()
    return tmp_path / "ws"


class TestIsWithinRoot:
    """Tests for the separator-safe prefix check."""

    def test_equal_paths(self) -> None:
        assert is_within_root("/ws", "/ws")

    def test_child(self) -> None:
        assert is_within_root("/ws/sub", "/ws")

    def test_sibling_with_shared_prefix(self) -> None:
        assert not is_within_root("/ws2", "/ws")

    def test_case_insensitive(self) -> None:
        assert is_within_root("/WS/Sub", "/ws")

    def test_trailing_separator_on_root(self) -> None:
        assert is_within_root("/ws/sub", "/ws/")


class TestResolveScanTarget:
    """Tests for resolve_scan_target()."""

    def test_relative_path_resolves_against_base(self, workspace: Path) -> None:
        resolved = resolve_scan_target("sub", base_dir=workspace)

        assert resolved == workspace / "sub"
        assert resolved.is_absolute()

    def test_blank_means_base_dir(self, workspace: Path) -> None:
        assert resolve_scan_target("   ", base_dir=workspace) == workspace
        assert resolve_scan_target(None, base_dir=workspace) == workspace

    def test_accepts_pathlike(self, workspace: Path) -> None:
        assert resolve_scan_target(workspace / "sub") == workspace / "sub"

    def test_confinement_allows_root_and_children(self, workspace: Path) -> None:
        assert resolve_scan_target(workspace, workspace_root=workspace, enforce=True) == workspace
        assert (
            resolve_scan_target(workspace / "sub", workspace_root=workspace, enforce=True)
            == workspace / "sub"
        )

    def test_confinement_rejects_sibling(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(workspace.parent / "ws2", workspace_root=workspace, enforce=True)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_confinement_rejects_dotdot_escape(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target("sub/../../ws2", base_dir=workspace, workspace_root=workspace, enforce=True)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_confinement_checked_before_existence(self, workspace: Path) -> None:
        """A missing path outside the root is a policy violation, not a 404."""
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(workspace.parent / "nowhere", workspace_root=workspace, enforce=True)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_confinement_defaults_to_base_dir(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target("..", base_dir=workspace, enforce=True)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_no_enforcement_allows_anywhere(self, workspace: Path) -> None:
        target = workspace.parent / "ws2"

        assert resolve_scan_target(target, workspace_root=workspace) == target

    def test_symlinked_root_rejected(self, workspace: Path) -> None:
        link = workspace.parent / "link"
        link.symlink_to(workspace, target_is_directory=True)

        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(link)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_symlink_inside_root_pointing_out_rejected(self, workspace: Path) -> None:
        link = workspace / "escape"
        link.symlink_to(workspace.parent / "ws2", target_is_directory=True)

        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(link, workspace_root=workspace, enforce=True)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_missing_path(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(workspace / "missing")

        assert exc_info.value.code is ErrorCode.PATH_NOT_FOUND
        assert str(workspace / "missing") in exc_info.value.message

    def test_file_is_not_a_directory(self, workspace: Path) -> None:
        target = workspace / "notes.txt"
        target.write_text("hello")

        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(target)

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_path_below_a_regular_file(self, workspace: Path) -> None:
        (workspace / "notes.txt").write_text("hello")

        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(workspace / "notes.txt" / "sub")

        assert exc_info.value.code is ErrorCode.PATH_NOT_FOUND

    def test_name_too_long(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(workspace / ("x" * 300))

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.parametrize("bad", ["src\x00evil", b"/tmp", 42])
    def test_malformed_input(self, bad: object) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_scan_target(bad)  # type: ignore[arg-type]

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    @pytest.mark.skipif(os.geteuid() == 0, reason="root bypasses permission bits")
    def test_unreadable_directory(self, workspace: Path) -> None:
        locked = workspace / "locked"
        locked.mkdir()
        locked.chmod(0)
        try:
            with pytest.raises(SanityGateError) as exc_info:
                resolve_scan_target(locked)
        finally:
            locked.chmod(0o755)

        assert exc_info.value.code is ErrorCode.PERMISSION_DENIED


class TestResolveWithin:
    """Tests for resolve_within()."""

    def test_relative_file(self, workspace: Path) -> None:
        assert resolve_within(workspace, "sub/a.ts") == workspace / "sub" / "a.ts"

    def test_escape_rejected(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_within(workspace, "../ws2/secret.txt")

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_absolute_outside_rejected(self, workspace: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            resolve_within(workspace, "/etc/passwd")

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    def test_symlinked_file_pointing_out_rejected(self, workspace: Path) -> None:
        outside = workspace.parent / "ws2" / "secret.txt"
        outside.write_text("s3cret")
        (workspace / "innocent.txt").symlink_to(outside)

        with pytest.raises(SanityGateError) as exc_info:
            resolve_within(workspace, "innocent.txt")

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR


def test_relative_posix(tmp_path: Path) -> None:
    assert relative_posix(tmp_path / "src" / "a.ts", tmp_path) == "src/a.ts"
