"""Process exit codes for the shipyard commands.

Both pipelines report any failure (validation, file update, commit, tag,
build or manifest verification) with the same failure code; the message
printed alongside it names what went wrong. Typer keeps its own code for
command-line usage errors.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    FAILURE = 1
    USAGE_ERROR = 2

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
