"""Release run as a linear state machine.

start -> args_validated -> cleanliness_checked -> version_computed -> files_updated

Each handler either advances the session to the next step or returns an
error, which ends the run.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Literal

from deliverb_release.cli.context import CLIContext
from deliverb_release.cli.release_fsm import (
    FINISH,
    StepHandler,
    StepOutcome,
    advance,
    run_state_machine,
)
from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.git.repository import Repository
from deliverb_release.output.console import ConsoleProtocol, Style
from deliverb_release.services.release.errors import ReleaseError
from deliverb_release.services.release.model import RELEASE_BUMPS, AppliedRelease, ReleaseBump
from deliverb_release.services.release.semver import bump_version, is_release_bump
from deliverb_release.services.release.service import (
    apply_release,
    current_version,
    ensure_clean_worktree,
    release_files,
)

ReleaseStep = Literal[
    "start",
    "args_validated",
    "cleanliness_checked",
    "version_computed",
    "files_updated",
]

_RULE = "=" * 50


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    step: ReleaseStep
    args: tuple[str, ...]
    bump: ReleaseBump | None = None
    current_version: str | None = None
    new_version: str | None = None
    applied: AppliedRelease | None = None


def print_usage(console: ConsoleProtocol) -> None:
    console.print("Usage: deliverb-release [major|minor|patch]", Style.ERROR)
    console.newline()
    console.print("  1. major: Breaking changes (1.0.0 -> 2.0.0)", Style.WARNING)
    console.print("  2. minor: New features (1.0.0 -> 1.1.0)", Style.WARNING)
    console.print("  3. patch: Bug fixes (1.0.0 -> 1.0.1)", Style.WARNING)


def next_steps(version: str) -> list[str]:
    return [
        "Review the changes in CHANGELOG.md and add any missing items",
        f'Commit the changes: git add -A && git commit -m "chore: release v{version}"',
        f"Create a git tag: git tag v{version}",
        "Build the release: ./scripts/build.sh",
        "Install and test: ./scripts/install.sh",
        "Build installer: ./scripts/build-installer.sh",
        "Push changes: git push && git push --tags",
    ]


def release_handlers(
    ctx: CLIContext,
    *,
    repo: Repository,
) -> Mapping[str, StepHandler[ReleaseSession]]:
    files = release_files(root=ctx.root, config=ctx.config)
    console = ctx.console

    def validate_args(s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], ReleaseError]:
        kind = s.args[0] if len(s.args) == 1 else ""
        if not is_release_bump(kind):
            got = " ".join(s.args) if s.args else "<none>"
            return Err(
                ReleaseError(
                    kind="invalid_argument",
                    message=f"invalid release type: {got}",
                    hint=f"Expected exactly one of: {', '.join(RELEASE_BUMPS)}",
                )
            )
        return Ok(advance(replace(s, step="args_validated", bump=kind)))

    def check_clean(s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], ReleaseError]:
        status = ensure_clean_worktree(repo=repo)
        if isinstance(status, Err):
            return status
        return Ok(advance(replace(s, step="cleanliness_checked")))

    def compute_version(s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], ReleaseError]:
        assert s.bump is not None
        current = current_version(files=files)
        if isinstance(current, Err):
            return current
        bumped = bump_version(current.value, s.bump)
        if isinstance(bumped, Err):
            return bumped

        console.newline()
        console.print(_RULE, Style.HEADER)
        console.print(f"  Creating {s.bump} release", Style.BOLD)
        console.print(_RULE, Style.HEADER)
        console.newline()
        console.print(f"Current version: {current.value}", Style.WARNING)
        console.print(f"New version:     {bumped.value}", Style.SUCCESS)
        console.newline()

        return Ok(
            advance(
                replace(
                    s,
                    step="version_computed",
                    current_version=current.value,
                    new_version=bumped.value,
                )
            )
        )

    def write_files(s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], ReleaseError]:
        assert s.new_version is not None
        applied = apply_release(
            files=files,
            cmake_project=ctx.config.cmake.project,
            version=s.new_version,
            today=ctx.today,
            console=console,
        )
        if isinstance(applied, Err):
            return applied
        return Ok(advance(replace(s, step="files_updated", applied=applied.value)))

    def summarize(s: ReleaseSession) -> Result[StepOutcome[ReleaseSession], ReleaseError]:
        assert s.new_version is not None
        console.newline()
        console.success("Version updated successfully!")
        console.newline()
        console.header("Next steps:")
        for i, line in enumerate(next_steps(s.new_version), start=1):
            console.print(f"  {i}. {line}", Style.WARNING)
        console.newline()
        return Ok(FINISH)

    return {
        "start": validate_args,
        "args_validated": check_clean,
        "cleanliness_checked": compute_version,
        "version_computed": write_files,
        "files_updated": summarize,
    }


def run_release(
    args: Sequence[str],
    ctx: CLIContext,
    *,
    repo: Repository | None = None,
) -> Result[ReleaseSession, ReleaseError]:
    return run_state_machine(
        initial_state=ReleaseSession(step="start", args=tuple(args)),
        get_step=lambda s: s.step,
        handlers=release_handlers(ctx, repo=repo or Repository(ctx.root)),
    )
