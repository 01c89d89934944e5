from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from deliverb_release.platform.files import atomic_write_text, detect_newline, read_text_exact


def test_atomic_write_text_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    atomic_write_text(path, '{"version": "1.0.0"}\n')

    assert path.read_text(encoding="utf-8") == '{"version": "1.0.0"}\n'


def test_atomic_write_text_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new", encoding="utf-8")

    assert path.read_text(encoding="utf-8") == "new"


def test_atomic_write_text_keeps_newlines_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "CMakeLists.txt"
    atomic_write_text(path, "a\r\nb\n")

    assert path.read_bytes() == b"a\r\nb\n"


def test_atomic_write_text_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "package.json"
    path.write_text("original", encoding="utf-8")

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload", encoding="utf-8")

    assert path.read_text(encoding="utf-8") == "original"
    assert list(tmp_path.glob(f".{path.name}.*.tmp")) == []


def test_read_text_exact_keeps_crlf(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_bytes(b"# Changelog\r\n\r\n## [Unreleased]\r\n")

    assert read_text_exact(path) == "# Changelog\r\n\r\n## [Unreleased]\r\n"


def test_read_text_exact_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "CMakeLists.txt"
    path.write_bytes(b"# caf\xe9\n")

    with pytest.raises(UnicodeDecodeError):
        read_text_exact(path)


def test_detect_newline() -> None:
    assert detect_newline("a\r\nb\r\n") == "\r\n"
    assert detect_newline("a\nb\n") == "\n"
    assert detect_newline("") == "\n"


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_atomic_write_text_preserves_existing_mode(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("old", encoding="utf-8")
    path.chmod(0o644)

    atomic_write_text(path, "new")

    assert stat.S_IMODE(path.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_atomic_write_text_preserves_executable_bit(tmp_path: Path) -> None:
    path = tmp_path / "bump.sh"
    path.write_text("old", encoding="utf-8")
    path.chmod(0o755)

    atomic_write_text(path, "new")

    assert stat.S_IMODE(path.stat().st_mode) == 0o755


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_atomic_write_text_new_file_follows_umask(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    old_mask = os.umask(0o022)
    try:
        atomic_write_text(path, "# Changelog\n")
    finally:
        os.umask(old_mask)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
