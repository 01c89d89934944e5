from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


ReleaseBump = Literal["major", "minor", "patch"]
RELEASE_BUMPS: tuple[ReleaseBump, ...] = ("major", "minor", "patch")

ChangelogUpdate = Literal["created", "updated", "unchanged"]


@dataclass(frozen=True, slots=True)
class ReleaseFiles:
    """Absolute paths of the files a release rewrites."""

    package_json: Path
    cmake_lists: Path
    changelog: Path


@dataclass(frozen=True, slots=True)
class AppliedRelease:
    """What a release run changed on disk."""

    version: str
    cmake_updated: bool
    changelog: ChangelogUpdate
