from __future__ import annotations

import re
from pathlib import Path

from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.platform.files import atomic_write_text, read_text_exact
from deliverb_release.services.release.errors import ReleaseError


def _project_version_re(project: str) -> re.Pattern[str]:
    return re.compile(rf"project\({re.escape(project)} VERSION \d+\.\d+\.\d+")


def patch_cmake_text(text: str, *, project: str, version: str) -> tuple[str, bool]:
    """Replace the version of the first ``project(<project> VERSION X.Y.Z``.

    Returns the new text and whether the pattern was found. Text without the
    pattern comes back unchanged.
    """
    pattern = _project_version_re(project)
    m = pattern.search(text)
    if m is None:
        return (text, False)
    replacement = f"project({project} VERSION {version}"
    return (text[: m.start()] + replacement + text[m.end() :], True)


def update_cmake_version(*, path: Path, project: str, version: str) -> Result[bool, ReleaseError]:
    """Patch the project version in CMakeLists.txt.

    Returns Ok(False) without touching the file when the project() line is
    not found.
    """
    try:
        text = read_text_exact(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    out, matched = patch_cmake_text(text, project=project, version=version)
    if not matched:
        return Ok(False)

    try:
        atomic_write_text(path, out, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(True)
