from __future__ import annotations

from datetime import date
from pathlib import Path

from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.platform.files import atomic_write_text, detect_newline, read_text_exact
from deliverb_release.services.release.errors import ReleaseError
from deliverb_release.services.release.model import ChangelogUpdate


UNRELEASED_MARKER = "## [Unreleased]"
PLACEHOLDER_COMMENT = "<!-- Add new changes here -->"


def release_heading(version: str, today: date) -> str:
    return f"## [{version}] - {today.isoformat()}"


def render_new_changelog(*, version: str, today: date) -> str:
    lines: list[str] = []
    lines.append("# Changelog")
    lines.append("")
    lines.append(UNRELEASED_MARKER)
    lines.append("")
    lines.append(PLACEHOLDER_COMMENT)
    lines.append("")
    lines.append(release_heading(version, today))
    lines.append("")
    lines.append("- Initial release")
    return "\n".join(lines) + "\n"


def insert_release_section(text: str, *, version: str, today: date) -> tuple[str, bool]:
    """Open a dated section for ``version`` right below the Unreleased marker.

    Whatever followed the marker ends up under the new heading. Only the first
    marker is used; text without a marker is returned unchanged. The inserted
    lines use the line ending already in ``text``.
    """
    idx = text.find(UNRELEASED_MARKER)
    if idx < 0:
        return (text, False)

    gap = detect_newline(text) * 2
    block = gap.join([UNRELEASED_MARKER, PLACEHOLDER_COMMENT, release_heading(version, today)])
    end = idx + len(UNRELEASED_MARKER)
    return (text[:idx] + block + text[end:], True)


def update_changelog(
    *,
    path: Path,
    version: str,
    today: date,
) -> Result[ChangelogUpdate, ReleaseError]:
    if not path.exists():
        text = render_new_changelog(version=version, today=today)
        return _write(path=path, text=text, outcome="created")

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

    out, matched = insert_release_section(text, version=version, today=today)
    if not matched:
        return Ok("unchanged")
    return _write(path=path, text=out, outcome="updated")


def _write(
    *,
    path: Path,
    text: str,
    outcome: ChangelogUpdate,
) -> Result[ChangelogUpdate, ReleaseError]:
    try:
        atomic_write_text(path, text, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(outcome)
