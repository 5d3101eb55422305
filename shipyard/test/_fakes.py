"""Scripted command runner for pipeline tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from shipyard.platform.process import CommandOutput


@dataclass
class Call:
    argv: tuple[str, ...]
    cwd: Path
    stream: bool


@dataclass
class FakeRunner:
    """CommandRunner returning scripted outputs keyed by argv prefix.

    The longest registered prefix wins. Each key holds a queue; the last
    response repeats once the queue is down to one. Unscripted commands
    succeed with empty output.
    """

    calls: list[Call] = field(default_factory=lambda: [])
    _responses: dict[tuple[str, ...], list[CommandOutput]] = field(default_factory=lambda: {})

    def on(
        self,
        *prefix: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> FakeRunner:
        out = CommandOutput(returncode=returncode, stdout=stdout, stderr=stderr)
        self._responses.setdefault(tuple(prefix), []).append(out)
        return self

    def run(self, cmd: Sequence[str], *, cwd: Path, stream: bool = False) -> CommandOutput:
        argv = tuple(cmd)
        self.calls.append(Call(argv=argv, cwd=cwd, stream=stream))

        best: tuple[str, ...] | None = None
        for key in self._responses:
            if argv[: len(key)] == key and (best is None or len(key) > len(best)):
                best = key
        if best is None:
            return CommandOutput(returncode=0)

        queue = self._responses[best]
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @property
    def commands(self) -> list[str]:
        return [" ".join(c.argv) for c in self.calls]

    def called(self, *prefix: str) -> bool:
        return any(c.argv[: len(prefix)] == prefix for c in self.calls)

    def index(self, *prefix: str) -> int:
        """Position of the first call starting with prefix."""
        for i, c in enumerate(self.calls):
            if c.argv[: len(prefix)] == prefix:
                return i
        raise AssertionError(f"not called: {' '.join(prefix)}")


HEAD_SHA = "1111111111111111111111111111111111111111"
RELEASE_SHA = "2222222222222222222222222222222222222222"


def script_releasable_main(
    runner: FakeRunner,
    *,
    tags: Sequence[str] = (),
    head: str = HEAD_SHA,
    committed: str = RELEASE_SHA,
) -> FakeRunner:
    """On main, clean, in sync with origin/main, with the given tags."""
    runner.on("git", "branch", "--show-current", stdout="main\n")
    runner.on("git", "status", stdout="")
    runner.on("git", "rev-parse", "HEAD", stdout=f"{head}\n")
    runner.on("git", "rev-parse", "HEAD", stdout=f"{committed}\n")
    runner.on("git", "rev-parse", "origin/main", stdout=f"{head}\n")
    runner.on("git", "tag", "--list", "v*", stdout="".join(f"{t}\n" for t in tags))
    return runner
