"""Filesystem helpers."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "detect_newline", "read_text_exact"]


def read_text_exact(path: Path, *, encoding: str = "utf-8") -> str:
    """Read text without newline translation, so CRLF stays CRLF.

    Raises OSError when the file cannot be read and UnicodeDecodeError when
    it is not valid ``encoding``.
    """
    return path.read_bytes().decode(encoding)


def detect_newline(text: str) -> str:
    """Line ending used by ``text``: CRLF if any line has one, else LF."""
    return "\r\n" if "\r\n" in text else "\n"


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path via a sibling temp file and ``os.replace``.

    Readers never observe a partially written file. Content is written as-is
    (no newline translation). An existing file keeps its permission bits; a
    new one gets the usual ``0o666 & ~umask``. Raises OSError on failure; the
    temp file is removed either way.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def _current_umask() -> int:
    # os.umask() can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask
