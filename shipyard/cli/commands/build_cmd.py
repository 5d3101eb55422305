"""Build command - build, push and verify a multi-architecture image."""

from __future__ import annotations

import typer

from shipyard.cli.commands._helpers import exit_with_error
from shipyard.cli.context import build_context
from shipyard.core.result import Err
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.services.release.config import DOCKER_HUB_URL, describe_platform
from shipyard.services.release.model import BuildReport
from shipyard.services.release.pipeline import run_build


def build(
    version: str | None = typer.Argument(
        None,
        help="Image version (default: <base>-<timestamp>-<short sha>)",
        show_default=False,
    ),
    no_latest: bool = typer.Option(False, "--no-latest", help="Do not push the 'latest' tag"),
    no_git_tag: bool = typer.Option(False, "--no-git-tag", help="Do not create a git tag"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without modifying"),
) -> None:
    """Build and push the image for every configured platform, then verify it."""
    ctx = build_context()
    console = ctx.console

    console.header("Multi-architecture build")
    result = run_build(
        ctx=ctx.repo,
        config=ctx.config,
        console=console,
        version=version,
        push_latest=not no_latest,
        git_tag=not no_git_tag,
        dry_run=dry_run,
    )
    if isinstance(result, Err):
        exit_with_error(result.error, console)

    print_build_report(result.value, console=console)


def print_build_report(report: BuildReport, *, console: ConsoleProtocol) -> None:
    target = report.target
    version_ref = f"{target.repository}:{report.version}"

    console.header("Image Information")
    console.print(f"  Docker Hub:    {DOCKER_HUB_URL}/{target.repository}")
    console.print(f"  Image:         {version_ref}")
    console.print(f"  Architectures: {', '.join(target.platforms)}")
    for platform in target.platforms:
        console.print(f"    - {describe_platform(platform)}", Style.DIM)

    if report.entries:
        console.header("Manifest")
        for entry in report.entries:
            console.print(f"  {entry.platform:<16} {entry.short_digest}", Style.DIM)

    console.header("Pull Commands")
    for ref in target.references:
        console.print(f"  docker pull {ref}")

    console.header("Kubernetes Usage")
    console.print(f"  image: {version_ref}")

    if report.tag is not None:
        console.print(f"git tag {report.tag.tag}: {report.tag.status}", Style.DIM)
