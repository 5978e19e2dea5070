"""Tests for read_preview()."""

from pathlib import Path

import pytest

from sanitygate.foundation.errors import ErrorCode, SanityGateError
from sanitygate.preview import read_preview


@pytest.fixture
def project(tmp_path: Path, make_tree) -> Path:
    return make_tree(tmp_path / "project", {
        "src/a.ts": "line one\nline two\n",
        "src/nested": None,
    })


class TestReadPreview:
    """Tests for confined single-file reads."""

    def test_reads_file(self, project: Path) -> None:
        preview = read_preview(project, "src/a.ts")

        assert preview.path == project / "src" / "a.ts"
        assert preview.content == "line one\nline two\n"
        assert preview.lines == ("line one", "line two", "")
        assert preview.line_count == 3
        assert preview.size == len("line one\nline two\n")

    def test_to_dict(self, project: Path) -> None:
        data = read_preview(project, "src/a.ts").to_dict()

        assert data["lineCount"] == 3
        assert data["lines"][0] == "line one"

    def test_absolute_path_inside_root(self, project: Path) -> None:
        assert read_preview(project, project / "src" / "a.ts").size > 0

    @pytest.mark.parametrize("file_path", ["../outside.txt", "/etc/hostname"])
    def test_escape_is_security_error(self, project: Path, file_path: str) -> None:
        (project.parent / "outside.txt").write_text("nope")

        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, file_path)

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR

    @pytest.mark.parametrize("file_path", ["", "   ", None])
    def test_empty_path(self, project: Path, file_path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, file_path)

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_missing_file(self, project: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, "src/missing.ts")

        assert exc_info.value.code is ErrorCode.PATH_NOT_FOUND

    def test_path_below_a_regular_file(self, project: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, "src/a.ts/sub")

        assert exc_info.value.code is ErrorCode.PATH_NOT_FOUND

    def test_name_too_long(self, project: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, "src/" + "x" * 300 + ".ts")

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_directory(self, project: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, "src/nested")

        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR

    def test_too_large(self, project: Path) -> None:
        with pytest.raises(SanityGateError) as exc_info:
            read_preview(project, "src/a.ts", max_bytes=4)

        assert exc_info.value.code is ErrorCode.FILE_TOO_LARGE
        assert exc_info.value.context["limit"] == 4

    def test_symlinked_root(self, project: Path) -> None:
        link = project.parent / "link"
        link.symlink_to(project, target_is_directory=True)

        with pytest.raises(SanityGateError) as exc_info:
            read_preview(link, "src/a.ts")

        assert exc_info.value.code is ErrorCode.SECURITY_ERROR
