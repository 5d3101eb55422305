"""Subprocess execution behind an injectable runner.

Commands are always structured argument lists, never shell strings. The
runner returns a typed CommandOutput for every invocation (including a
failure to start the program), and `run` turns that into a Result:

    result = run(["git", "tag", "--list", "v*"], cwd=root, runner=ctx.runner)
    match result:
        case Ok(stdout):
            tags = stdout.splitlines()
        case Err(error):
            print(f"Failed: {error.stderr}")

Tests substitute a fake runner so no real git or docker is needed. There is
no timeout: a hung command blocks until it exits.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from shipyard.core.result import Err, Ok, Result

__all__ = [
    "CommandOutput",
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run",
]

# Return code used when the program could not be started at all.
SPAWN_FAILED = -1


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Exit status and captured output of one command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    def detail(self) -> str | None:
        """Most useful diagnostic text, stderr first."""
        return self.stderr.strip() or self.stdout.strip() or None


class CommandRunner(Protocol):
    """Executes one command and reports how it ended."""

    def run(self, cmd: Sequence[str], *, cwd: Path, stream: bool = False) -> CommandOutput:
        """Run cmd in cwd.

        Args:
            cmd: Program and arguments.
            cwd: Working directory.
            stream: Let output go straight to the terminal instead of
                capturing it (long-running builds).
        """
        ...


class SubprocessRunner:
    """Production runner backed by subprocess.run."""

    def run(self, cmd: Sequence[str], *, cwd: Path, stream: bool = False) -> CommandOutput:
        try:
            proc = subprocess.run(
                list(cmd),
                cwd=str(cwd),
                capture_output=not stream,
                text=True,
                check=False,
            )
        except OSError as e:
            return CommandOutput(returncode=SPAWN_FAILED, stdout="", stderr=str(e))

        return CommandOutput(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


def run(
    cmd: list[str],
    cwd: Path,
    *,
    runner: CommandRunner,
    stream: bool = False,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Returns:
        Ok(stdout) on exit 0, Err(ProcessError) otherwise.
    """
    out = runner.run(cmd, cwd=cwd, stream=stream)
    if not out.succeeded:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=out.returncode,
                stdout=out.stdout,
                stderr=out.stderr,
            )
        )
    return Ok(out.stdout)
