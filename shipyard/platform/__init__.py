"""Platform abstraction layer: processes, files, repository context."""

from .context import RepositoryContext
from .files import atomic_write_text
from .process import (
    CommandOutput,
    CommandRunner,
    ProcessError,
    SubprocessRunner,
    run,
)

__all__ = [
    # context
    "RepositoryContext",
    # files
    "atomic_write_text",
    # process
    "CommandOutput",
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run",
]
