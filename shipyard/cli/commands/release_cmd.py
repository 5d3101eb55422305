"""Release command - bump, commit, tag and push a new version."""

from __future__ import annotations

import typer

from shipyard.cli.commands._helpers import exit_with_error
from shipyard.cli.context import build_context
from shipyard.core.result import Err
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.services.release.model import ReleaseRecord
from shipyard.services.release.pipeline import run_release


def release(
    action: str = typer.Argument(..., help="major, minor, patch or custom", show_default=False),
    version: str | None = typer.Argument(
        None, help="Version for 'custom' (e.g. v2.0.0-rc1)", show_default=False
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without modifying"),
) -> None:
    """Cut a release: update image references, commit, tag and push.

    Examples: `shipyard release patch`, `shipyard release custom v2.0.0-rc1`.
    """
    ctx = build_context()
    console = ctx.console

    if action != "custom" and version is not None:
        console.warning(f"version argument ignored for '{action}' release")

    console.header("Release")
    result = run_release(
        ctx=ctx.repo,
        config=ctx.config,
        console=console,
        action=action,
        custom_version=version,
        dry_run=dry_run,
    )
    if isinstance(result, Err):
        exit_with_error(result.error, console)

    print_release_summary(
        result.value,
        image_repository=ctx.config.image.repository,
        console=console,
        dry_run=dry_run,
    )


def print_release_summary(
    record: ReleaseRecord,
    *,
    image_repository: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> None:
    if dry_run:
        console.success(f"release {record.version} planned (dry run)")
    else:
        console.success(f"release {record.version} completed")

    console.header("Release Summary")
    console.print(f"  Previous: {record.previous_version}")
    console.print(f"  New:      {record.version}")
    console.print(f"  Docker:   {image_repository}:{record.version}")
    console.print(f"  Commit:   {record.commit_sha}", Style.DIM)
    if record.changed_files:
        console.print(f"  Updated:  {', '.join(record.changed_files)}", Style.DIM)

    console.header("Next Steps")
    console.print("  1. CI builds the multi-architecture images")
    console.print("  2. Images are pushed to Docker Hub")
    console.print("  3. A GitHub release is created")
    console.print("  4. Deploy using: kubectl apply -f rancher/")
