"""Explicit repository context handed to every pipeline component.

Components never read the process working directory; they run commands in
`ctx.root` through `ctx.runner`. A test builds a context around a tmp_path and
a fake runner to get fully deterministic behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from shipyard.platform.process import CommandRunner, SubprocessRunner

__all__ = ["RepositoryContext"]


@dataclass(frozen=True, slots=True)
class RepositoryContext:
    """Repository root plus the runner used for git and docker commands."""

    root: Path
    runner: CommandRunner = field(default_factory=SubprocessRunner)

    def path(self, relative: str) -> Path:
        """Resolve a repository-relative path."""
        return self.root / relative
