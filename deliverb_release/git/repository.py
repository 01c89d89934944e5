"""Git working tree queries.

Usage:
    repo = Repository(Path.cwd())
    match repo.status():
        case Ok(status):
            if not status.is_clean:
                for entry in status.entries:
                    print(entry.pretty_xy(), entry.path)
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.platform.process import ProcessError
from deliverb_release.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git invocation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (git's stderr when available)
        returncode: Process return code, -1 when git could not be started
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One line of ``git status --porcelain``.

    Attributes:
        xy: Two-character status code (e.g. "M ", " M", "??")
        path: File path as printed by git
    """

    xy: str
    path: str

    def pretty_xy(self) -> str:
        """Format XY with dots for spaces (".M" instead of " M")."""
        return self.xy.replace(" ", ".")


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed working tree status.

    Attributes:
        branch: Current branch name ("" if git printed no branch line)
        entries: Changed, staged and untracked files
    """

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if git reported no pending changes."""
        return len(self.entries) == 0


class Repository:
    """A git working tree rooted at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Run ``git status --porcelain=v1 -b`` and parse the output.

        Returns:
            Ok(GitStatus) on success
            Err(GitError) when git is missing or the path is not a repository
        """
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="status",
                        message=e.stderr.strip() or "git status failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(parse_status(stdout))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )


def parse_status(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 -b`` output."""
    branch = ""
    entries: list[StatusEntry] = []

    for line in output.splitlines():
        if not line.strip():
            continue
        if line.startswith("## "):
            branch = _parse_branch_line(line)
            continue
        entry = _parse_entry(line)
        if entry is not None:
            entries.append(entry)

    return GitStatus(branch=branch, entries=tuple(entries))


def _parse_branch_line(line: str) -> str:
    """Extract the branch from ``## branch...upstream [ahead N]``."""
    s = line[3:].split(" [", 1)[0].strip()
    return s.split("...", 1)[0].strip()


def _parse_entry(line: str) -> StatusEntry | None:
    # Format: "XY path"; anything shorter is not an entry.
    if len(line) < 4:
        return None
    return StatusEntry(xy=line[:2], path=line[3:])
