from __future__ import annotations

from datetime import date
from pathlib import Path

from deliverb_release.core.config import ReleaseConfig
from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.git.repository import GitStatus, Repository
from deliverb_release.output.console import ConsoleProtocol
from deliverb_release.services.release.changelog import update_changelog
from deliverb_release.services.release.cmake import update_cmake_version
from deliverb_release.services.release.errors import ReleaseError
from deliverb_release.services.release.manifest import (
    read_manifest_version,
    write_manifest_version,
)
from deliverb_release.services.release.model import AppliedRelease, ReleaseFiles

_MAX_LISTED_CHANGES = 10


def release_files(*, root: Path, config: ReleaseConfig) -> ReleaseFiles:
    return ReleaseFiles(
        package_json=root / config.files.package_json,
        cmake_lists=root / config.files.cmake_lists,
        changelog=root / config.files.changelog,
    )


def ensure_clean_worktree(*, repo: Repository) -> Result[GitStatus, ReleaseError]:
    status = repo.status()
    if isinstance(status, Err):
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"git status failed: {status.error.message}",
                hint=f"Run from inside a git checkout (looked at {repo.path})",
            )
        )

    st = status.value
    if not st.is_clean:
        listed = [f"{e.pretty_xy()} {e.path}" for e in st.entries[:_MAX_LISTED_CHANGES]]
        if len(st.entries) > _MAX_LISTED_CHANGES:
            listed.append(f"... and {len(st.entries) - _MAX_LISTED_CHANGES} more")
        return Err(
            ReleaseError(
                kind="dirty_working_tree",
                message="You have uncommitted changes!",
                hint="\n".join(listed),
            )
        )
    return Ok(st)


def current_version(*, files: ReleaseFiles) -> Result[str, ReleaseError]:
    return read_manifest_version(path=files.package_json)


def apply_release(
    *,
    files: ReleaseFiles,
    cmake_project: str,
    version: str,
    today: date,
    console: ConsoleProtocol,
) -> Result[AppliedRelease, ReleaseError]:
    """Write ``version`` to package.json, CMakeLists.txt and CHANGELOG.md.

    Files are written in that order. A failure stops the run; files written
    before it keep their new content.
    """
    console.info(f"Updating {files.package_json.name}...")
    pkg = write_manifest_version(path=files.package_json, version=version)
    if isinstance(pkg, Err):
        return pkg

    console.info(f"Updating {files.cmake_lists.name}...")
    cmake = update_cmake_version(path=files.cmake_lists, project=cmake_project, version=version)
    if isinstance(cmake, Err):
        return cmake
    if not cmake.value:
        console.warning(
            f"no 'project({cmake_project} VERSION x.y.z' line in {files.cmake_lists.name}; "
            "left unchanged"
        )

    console.info(f"Updating {files.changelog.name}...")
    changelog = update_changelog(path=files.changelog, version=version, today=today)
    if isinstance(changelog, Err):
        return changelog
    if changelog.value == "unchanged":
        console.warning(f"no '## [Unreleased]' section in {files.changelog.name}; left unchanged")

    return Ok(
        AppliedRelease(
            version=version,
            cmake_updated=cmake.value,
            changelog=changelog.value,
        )
    )
