from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeGuard

from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.services.release.errors import ReleaseError
from deliverb_release.services.release.model import RELEASE_BUMPS, ReleaseBump


_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: ReleaseBump) -> "SemVer":
        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def is_release_bump(value: str) -> TypeGuard[ReleaseBump]:
    return value in RELEASE_BUMPS


def parse_version(text: str) -> SemVer | None:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def bump_version(version: str, kind: str) -> Result[str, ReleaseError]:
    """Compute the version that follows ``version`` for a release of ``kind``."""
    if not is_release_bump(kind):
        return Err(
            ReleaseError(
                kind="invalid_argument",
                message=f"invalid version type: {kind}",
                hint=f"Expected one of: {', '.join(RELEASE_BUMPS)}",
            )
        )

    current = parse_version(version)
    if current is None:
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f"invalid version: {version!r}",
                hint="Expected MAJOR.MINOR.PATCH",
            )
        )

    return Ok(str(current.bump(kind)))
