"""Tests for storage path allocation and file writes."""

import io
from datetime import date

import pytest

from forum.storage import allocate_paths, resolve_extension, save_stream


class TestResolveExtension:
    @pytest.mark.parametrize(
        "filename,mime,expected",
        [
            ("a.png", "image/png", ".png"),
            ("Photo.JPG", "image/jpeg", ".jpg"),
            ("holiday.jpeg", "image/jpeg", ".jpeg"),
            ("mismatch.gif", "image/png", ".gif"),
            ("noext", "image/jpeg", ".jpg"),
            ("noext", "image/png", ".png"),
            (None, "image/gif", ".gif"),
            ("", "image/png", ".png"),
        ],
    )
    def test_resolve(self, filename, mime, expected):
        assert resolve_extension(filename, mime) == expected


class TestAllocatePaths:
    def test_layout(self, tmp_path):
        paths = allocate_paths(tmp_path, "u1", ".png", today=date(2026, 1, 5), id_factory=lambda: "abc")
        assert paths.directory == tmp_path / "u1" / "2026-01-05"
        assert paths.thumbnail_directory == paths.directory / "thumbnails"
        assert paths.filename == "abc.png"
        assert paths.original_path == tmp_path / "u1" / "2026-01-05" / "abc.png"
        assert paths.thumbnail_path == tmp_path / "u1" / "2026-01-05" / "thumbnails" / "abc.png"

    def test_creates_directories(self, tmp_path):
        paths = allocate_paths(tmp_path, "u1", ".png", today=date(2026, 1, 5))
        assert paths.thumbnail_directory.is_dir()

    def test_existing_directories_are_fine(self, tmp_path):
        allocate_paths(tmp_path, "u1", ".png", today=date(2026, 1, 5))
        allocate_paths(tmp_path, "u1", ".png", today=date(2026, 1, 5))

    def test_defaults_to_local_date(self, tmp_path):
        paths = allocate_paths(tmp_path, "u1", ".gif")
        assert paths.relative_dir == f"u1/{date.today().isoformat()}"

    def test_fresh_id_per_call(self, tmp_path):
        first = allocate_paths(tmp_path, "u1", ".png")
        second = allocate_paths(tmp_path, "u1", ".png")
        assert first.filename != second.filename

    def test_public_urls_pair(self, tmp_path):
        paths = allocate_paths(tmp_path, "u1", ".png", today=date(2026, 1, 5), id_factory=lambda: "abc")
        assert paths.public_urls("/static/uploads/images/") == (
            "/static/uploads/images/u1/2026-01-05/abc.png",
            "/static/uploads/images/u1/2026-01-05/thumbnails/abc.png",
        )

    def test_unwritable_base_raises_oserror(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(OSError):
            allocate_paths(blocker, "u1", ".png")


class TestSaveStream:
    def test_writes_all_bytes(self, tmp_path):
        dest = tmp_path / "out.bin"
        written = save_stream(io.BytesIO(b"x" * 5000), dest)
        assert written == 5000
        assert dest.read_bytes() == b"x" * 5000

    def test_never_overwrites(self, tmp_path):
        dest = tmp_path / "out.bin"
        dest.write_bytes(b"original")
        with pytest.raises(FileExistsError):
            save_stream(io.BytesIO(b"new"), dest)
        assert dest.read_bytes() == b"original"
