"""Multi-architecture image builds with docker buildx.

A build is one `docker buildx build --platform ... --push` invocation for all
platforms at once; there is no per-platform partial success.
"""

from __future__ import annotations

from shipyard.core.result import Err, Ok, Result
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.platform.context import RepositoryContext
from shipyard.platform.process import ProcessError
from shipyard.platform.process import run as run_process
from shipyard.services.release.config import BUILDER_DRIVER
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import BuildTarget


def _docker(
    ctx: RepositoryContext, args: list[str], *, stream: bool = False
) -> Result[str, ProcessError]:
    return run_process(["docker", *args], cwd=ctx.root, runner=ctx.runner, stream=stream)


def ensure_builder(
    *,
    ctx: RepositoryContext,
    builder: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, ReleaseError]:
    """Make builder the active buildx builder, creating it when missing."""
    version = _docker(ctx, ["buildx", "version"])
    if isinstance(version, Err):
        return Err(
            ReleaseError(
                kind="builder_unavailable",
                message="docker buildx is not available",
                hint=version.error.detail() or "Install Docker with the buildx plugin.",
            )
        )

    inspected = _docker(ctx, ["buildx", "inspect", builder])
    if isinstance(inspected, Err):
        cmd = ["buildx", "create", "--name", builder, "--driver", BUILDER_DRIVER, "--use"]
        console.info(f"creating buildx builder {builder}")
    else:
        cmd = ["buildx", "use", builder]

    console.print(f"docker {' '.join(cmd)}", Style.DIM)
    if dry_run:
        return Ok(None)

    selected = _docker(ctx, cmd)
    if isinstance(selected, Err):
        return Err(
            ReleaseError(
                kind="builder_unavailable",
                message=f"failed to set up buildx builder {builder}",
                hint=selected.error.detail(),
            )
        )
    return Ok(None)


def build_command(target: BuildTarget, *, context: str) -> list[str]:
    cmd = ["docker", "buildx", "build", "--platform", ",".join(target.platforms)]
    for ref in target.references:
        cmd += ["-t", ref]
    cmd += ["--push", context]
    return cmd


def build_and_push(
    *,
    ctx: RepositoryContext,
    target: BuildTarget,
    context: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, ReleaseError]:
    cmd = build_command(target, context=context)
    console.print(" ".join(cmd), Style.DIM)
    if dry_run:
        return Ok(None)

    # Build output goes straight to the terminal.
    result = run_process(cmd, cwd=ctx.root, runner=ctx.runner, stream=True)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"multi-architecture build failed for {target.references[0]}",
                hint=result.error.detail() or f"exit code {result.error.returncode}",
            )
        )
    return Ok(None)
