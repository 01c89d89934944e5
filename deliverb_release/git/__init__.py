"""Git operations.

Usage:
    from deliverb_release.git import Repository

    status = Repository(Path.cwd()).status()
    if isinstance(status, Ok) and status.value.is_clean:
        print("Working tree clean")
"""

from deliverb_release.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
    parse_status,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "parse_status",
]
