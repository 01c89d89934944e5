from __future__ import annotations

import json
from pathlib import Path

from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.core.structured import StrDict, as_str_dict
from deliverb_release.platform.files import atomic_write_text, detect_newline, read_text_exact
from deliverb_release.services.release.errors import ReleaseError


def read_manifest_version(*, path: Path) -> Result[str, ReleaseError]:
    loaded = _load_manifest(path=path)
    if isinstance(loaded, Err):
        return loaded

    value = loaded.value.get("version")
    if not isinstance(value, str):
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f"missing version in {path.name}",
                hint=f"Expected a string \"version\" field in {path}",
            )
        )
    return Ok(value)


def write_manifest_version(*, path: Path, version: str) -> Result[None, ReleaseError]:
    """Rewrite the ``version`` field, keeping key order, other values and line endings."""
    raw = _read(path=path)
    if isinstance(raw, Err):
        return raw
    loaded = _parse(raw.value, path=path)
    if isinstance(loaded, Err):
        return loaded

    data = loaded.value
    if not isinstance(data.get("version"), str):
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f"missing version in {path.name}",
                hint=f"Expected a string \"version\" field in {path}",
            )
        )

    data["version"] = version
    newline = detect_newline(raw.value)
    text = json.dumps(data, indent=2, ensure_ascii=False).replace("\n", newline) + newline

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
    return Ok(None)


def _load_manifest(*, path: Path) -> Result[StrDict, ReleaseError]:
    raw = _read(path=path)
    if isinstance(raw, Err):
        return raw
    return _parse(raw.value, path=path)


def _read(*, path: Path) -> Result[str, ReleaseError]:
    try:
        return Ok(read_text_exact(path, encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )


def _parse(text: str, *, path: Path) -> Result[StrDict, ReleaseError]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok(data)
