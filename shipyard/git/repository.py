"""Git repository abstraction.

All operations run `git <args>` in the context root through the context's
runner and return Result types.

Usage:
    repo = Repository(RepositoryContext(root=Path(".")))

    match repo.current_branch():
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from shipyard.core.result import Err, Ok, Result
from shipyard.platform.context import RepositoryContext
from shipyard.platform.process import CommandRunner, ProcessError
from shipyard.platform.process import run as run_process

__all__ = [
    "GitError",
    "Repository",
    "StatusEntry",
    "find_repository_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "push origin v1.2.0")
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in `git status --porcelain`.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


class Repository:
    """Git operations needed by the release and build pipelines.

    Attributes:
        ctx: Repository root and command runner
    """

    def __init__(self, ctx: RepositoryContext) -> None:
        self.ctx = ctx

    @property
    def root(self) -> Path:
        return self.ctx.root

    def current_branch(self) -> Result[str, GitError]:
        """Name of the checked-out branch; empty string on a detached HEAD."""
        result = self._git(["branch", "--show-current"])
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def tracked_changes(self) -> Result[tuple[StatusEntry, ...], GitError]:
        """Uncommitted modifications to tracked files (untracked files ignored)."""
        result = self._git(["status", "--porcelain=v1", "--untracked-files=no"])
        if isinstance(result, Err):
            return result
        entries: list[StatusEntry] = []
        for line in result.value.splitlines():
            entry = _parse_entry(line)
            if entry is not None:
                entries.append(entry)
        return Ok(tuple(entries))

    def fetch(self, remote: str, branch: str) -> Result[None, GitError]:
        result = self._git(["fetch", remote, branch])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def rev_parse(self, ref: str) -> Result[str, GitError]:
        """Resolve ref to a full commit SHA."""
        result = self._git(["rev-parse", ref])
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def short_head(self) -> Result[str, GitError]:
        result = self._git(["rev-parse", "--short", "HEAD"])
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def list_tags(self, pattern: str = "v*") -> Result[list[str], GitError]:
        result = self._git(["tag", "--list", pattern])
        if isinstance(result, Err):
            return result
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        # `git tag --list <name>` treats the name as a pattern; require an exact line.
        result = self._git(["tag", "--list", tag])
        if isinstance(result, Err):
            return result
        return Ok(any(ln.strip() == tag for ln in result.value.splitlines()))

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]:
        result = self._git(["tag", "-a", tag, "-m", message])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def push(self, remote: str, ref: str) -> Result[None, GitError]:
        result = self._git(["push", remote, ref])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def add(self, paths: Sequence[str]) -> Result[None, GitError]:
        result = self._git(["add", "--", *paths])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Create a commit from the index and return its SHA."""
        result = self._git(["commit", "-m", message])
        if isinstance(result, Err):
            return result
        return self.rev_parse("HEAD")

    def log_subjects(self, rev_range: str, *, limit: int) -> Result[list[str], GitError]:
        """Commit subject lines in rev_range, most recent first."""
        result = self._git(["log", "--pretty=format:%s", "-n", str(limit), rev_range])
        if isinstance(result, Err):
            return result
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def _git(self, args: list[str]) -> Result[str, GitError]:
        result = run_process(["git", *args], cwd=self.root, runner=self.ctx.runner)
        if isinstance(result, Err):
            return Err(_git_error(args, result.error))
        return result


def find_repository_root(start: Path, runner: CommandRunner) -> Path | None:
    """Top-level directory of the work tree containing start, if any."""
    result = run_process(["git", "rev-parse", "--show-toplevel"], cwd=start, runner=runner)
    if isinstance(result, Err):
        return None
    top = result.value.strip()
    return Path(top) if top else None


def _git_error(args: list[str], error: ProcessError) -> GitError:
    command = " ".join(args[:3])
    return GitError(
        command=command,
        message=error.detail() or f"git {command} failed",
        returncode=error.returncode,
    )


def _parse_entry(line: str) -> StatusEntry | None:
    """Parse a single porcelain v1 status line."""
    if len(line) < 4:
        return None
    if line.startswith("?? "):
        return StatusEntry(xy="??", path=line[3:])
    return StatusEntry(xy=line[:2], path=line[3:])
