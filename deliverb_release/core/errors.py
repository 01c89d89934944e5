"""Process exit codes.

The release tool only distinguishes success from failure: bad arguments, a
dirty working tree and any I/O or parse error all exit with ``FAILURE``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI. Values are part of the public interface."""

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()
