"""Release and build pipelines.

Release: validate -> resolve version -> update artifacts -> commit ->
changelog -> tag (tag must not exist).

Build: resolve version -> builder -> build and push -> verify manifest ->
tag (existing tag tolerated) -> report. The build runs as a state machine
over BuildStage; the first failing step aborts it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path

from shipyard.core.config import Config, ImageConfig
from shipyard.core.result import Err, Ok, Result
from shipyard.git.repository import Repository
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.platform.context import RepositoryContext
from shipyard.services.release.artifacts import apply_version
from shipyard.services.release.buildx import build_and_push, ensure_builder
from shipyard.services.release.changelog import generate_changelog
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from shipyard.services.release.manifest import verify_manifest
from shipyard.services.release.model import (
    LATEST_TAG,
    BuildReport,
    BuildStage,
    BuildTarget,
    ManifestEntry,
    OnExisting,
    ReleaseRecord,
    TagOutcome,
    Version,
)
from shipyard.services.release.repo_state import validate_repository_state
from shipyard.services.release.semver import accept, bump, latest_version
from shipyard.services.release.tags import publish_tag


# ---------------------------------------------------------------------------
# Release
# ---------------------------------------------------------------------------


def release_commit_message(version: Version) -> str:
    return (
        f"chore: release {version}\n\n"
        f"- Update Docker image references to {version}\n"
        "- Multi-architecture support (AMD64 + ARM64)\n"
        "- Ready for production deployment"
    )


def release_tag_message(version: Version, changelog: str) -> str:
    return f"Release {version}\n\n{changelog}"


def resolve_release_version(
    *,
    previous: Version,
    action: str,
    custom_version: str | None,
) -> Result[Version, ReleaseError]:
    if action == "custom":
        return accept(custom_version or "")
    return bump(previous, action)


def _relative(root: Path, paths: Sequence[Path]) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


def run_release(
    *,
    ctx: RepositoryContext,
    config: Config,
    console: ConsoleProtocol,
    action: str,
    custom_version: str | None = None,
    today: date | None = None,
    dry_run: bool = False,
) -> Result[ReleaseRecord, ReleaseError]:
    repo = Repository(ctx)
    release = config.release
    image = config.image

    console.info("validating repository state")
    state = validate_repository_state(
        repo=repo,
        remote=release.remote,
        release_branch=release.branch,
        console=console,
    )
    if isinstance(state, Err):
        return state
    console.success(f"on {state.value.current_branch}, clean and in sync with {release.remote}")

    previous = latest_version(repo=repo)
    if isinstance(previous, Err):
        return previous
    if previous.value.baseline:
        console.warning(f"no version tags found, starting from {previous.value}")

    version = resolve_release_version(
        previous=previous.value,
        action=action,
        custom_version=custom_version,
    )
    if isinstance(version, Err):
        return version
    console.info(f"releasing {version.value} (previous: {previous.value})")

    # Refuse before touching any file; the tag publisher checks again.
    exists = repo.tag_exists(version.value.raw)
    if isinstance(exists, Err):
        return Err(
            ReleaseError(
                kind="tag_failed",
                message=f"failed to check for tag {version.value}",
                hint=exists.error.message,
            )
        )
    if exists.value:
        return Err(
            ReleaseError(
                kind="tag_exists",
                message=f"tag {version.value} already exists",
                hint="Choose a different version.",
            )
        )

    changed = apply_version(
        ctx=ctx,
        image_repository=image.repository,
        version=version.value,
        files=config.artifacts,
        console=console,
        dry_run=dry_run,
    )
    if isinstance(changed, Err):
        return changed
    changed_files = _relative(ctx.root, changed.value)

    commit_sha = _commit_release(
        repo=repo,
        version=version.value,
        changed_files=changed_files,
        head=state.value.local_head,
        console=console,
        dry_run=dry_run,
    )
    if isinstance(commit_sha, Err):
        return commit_sha

    changelog = generate_changelog(
        repo=repo,
        version=version.value,
        previous=previous.value,
        image_repository=image.repository,
        platforms=image.platforms,
        today=today or date.today(),
    )
    if isinstance(changelog, Err):
        return changelog

    tag = publish_tag(
        repo=repo,
        remote=release.remote,
        version=version.value,
        message=release_tag_message(version.value, changelog.value),
        on_existing=OnExisting.FAIL,
        push_branch=release.branch,
        console=console,
        dry_run=dry_run,
    )
    if isinstance(tag, Err):
        return tag
    if tag.value.created:
        console.success(f"git tag {tag.value.tag} created and pushed")

    return Ok(
        ReleaseRecord(
            version=version.value,
            previous_version=previous.value,
            changelog=changelog.value,
            commit_sha=commit_sha.value,
            changed_files=tuple(changed_files),
        )
    )


def _commit_release(
    *,
    repo: Repository,
    version: Version,
    changed_files: list[str],
    head: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[str, ReleaseError]:
    """Commit the rewritten artifacts; HEAD is reused when nothing changed."""
    if not changed_files:
        console.warning("no artifact references changed, tagging current HEAD")
        return Ok(head)

    console.print(f"git add -- {' '.join(changed_files)}", Style.DIM)
    console.print(f"git commit -m 'chore: release {version}'", Style.DIM)
    if dry_run:
        return Ok(head)

    added = repo.add(changed_files)
    if isinstance(added, Err):
        return Err(
            ReleaseError(
                kind="commit_failed",
                message="failed to stage release artifacts",
                hint=added.error.message,
            )
        )

    sha = repo.commit(release_commit_message(version))
    if isinstance(sha, Err):
        return Err(
            ReleaseError(
                kind="commit_failed",
                message=f"failed to commit release {version}",
                hint=sha.error.message,
            )
        )
    console.success(f"committed release {version}")
    return Ok(sha.value)


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def auto_build_version(*, base: str, now: datetime, short_sha: str) -> str:
    return f"{base}-{now.strftime('%Y%m%d-%H%M%S')}-{short_sha}"


def resolve_build_version(
    *,
    repo: Repository,
    image: ImageConfig,
    version: str | None,
    now: datetime,
) -> Result[Version, ReleaseError]:
    """The requested version verbatim, or `<base>-<timestamp>-<sha>`."""
    if version is not None:
        return accept(version)

    sha = repo.short_head()
    if isinstance(sha, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="failed to read current commit for the build version",
                hint=sha.error.message,
            )
        )
    return accept(auto_build_version(base=image.build_base_version, now=now, short_sha=sha.value))


def build_target(*, image: ImageConfig, version: Version, push_latest: bool) -> BuildTarget:
    tags = [version.raw]
    if push_latest:
        tags.append(LATEST_TAG)
    return BuildTarget(
        repository=image.repository,
        platforms=tuple(dict.fromkeys(image.platforms)),
        tags=tuple(dict.fromkeys(tags)),
    )


def build_tag_message(version: Version, platforms: Sequence[str]) -> str:
    archs = " and ".join(p.split("/", 1)[-1].upper() for p in platforms)
    return f"Release {version} - Multi-architecture Docker image with {archs} support"


@dataclass(frozen=True, slots=True)
class BuildSession:
    stage: BuildStage
    version: Version
    target: BuildTarget
    entries: tuple[ManifestEntry, ...] = ()
    tag: TagOutcome | None = None


_STAGE_MESSAGES: dict[BuildStage, str] = {
    BuildStage.BUILDER_READY: "buildx builder ready",
    BuildStage.BUILT: "multi-architecture build pushed",
    BuildStage.VERIFIED: "multi-architecture manifest verified",
    BuildStage.TAGGED: "tagging finished",
}


def run_build(
    *,
    ctx: RepositoryContext,
    config: Config,
    console: ConsoleProtocol,
    version: str | None = None,
    push_latest: bool = True,
    git_tag: bool = True,
    now: datetime | None = None,
    dry_run: bool = False,
) -> Result[BuildReport, ReleaseError]:
    repo = Repository(ctx)
    image = config.image

    resolved = resolve_build_version(repo=repo, image=image, version=version, now=now or datetime.now())
    if isinstance(resolved, Err):
        return resolved

    target = build_target(image=image, version=resolved.value, push_latest=push_latest)
    console.info(f"building {', '.join(target.references)} for {', '.join(target.platforms)}")

    def on_builder(s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        r = ensure_builder(ctx=ctx, builder=image.builder, console=console, dry_run=dry_run)
        if isinstance(r, Err):
            return r
        return Ok(advance(replace(s, stage=BuildStage.BUILDER_READY)))

    def on_build(s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        r = build_and_push(ctx=ctx, target=s.target, context=image.context, console=console, dry_run=dry_run)
        if isinstance(r, Err):
            return r
        return Ok(advance(replace(s, stage=BuildStage.BUILT)))

    def on_verify(s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        if dry_run:
            console.print(f"docker buildx imagetools inspect --raw {s.target.references[0]}", Style.DIM)
            return Ok(advance(replace(s, stage=BuildStage.VERIFIED)))
        r = verify_manifest(
            ctx=ctx,
            repository=s.target.repository,
            version=s.version.raw,
            expected_platforms=s.target.platforms,
            console=console,
        )
        if isinstance(r, Err):
            return r
        return Ok(advance(replace(s, stage=BuildStage.VERIFIED, entries=tuple(r.value))))

    def on_tag(s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        if not git_tag:
            console.info("git tag skipped (--no-git-tag)")
            return Ok(advance(replace(s, stage=BuildStage.TAGGED)))
        r = publish_tag(
            repo=repo,
            remote=config.release.remote,
            version=s.version,
            message=build_tag_message(s.version, s.target.platforms),
            on_existing=OnExisting.SKIP,
            push_branch=None,
            console=console,
            dry_run=dry_run,
        )
        if isinstance(r, Err):
            return r
        return Ok(advance(replace(s, stage=BuildStage.TAGGED, tag=r.value)))

    def on_tagged(s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        return Ok(advance(replace(s, stage=BuildStage.DONE)))

    def on_done(_s: BuildSession) -> Result[StepOutcome[BuildSession], ReleaseError]:
        return Ok(FINISH)

    handlers: dict[str, StepHandler[BuildSession]] = {
        BuildStage.INIT: on_builder,
        BuildStage.BUILDER_READY: on_build,
        BuildStage.BUILT: on_verify,
        BuildStage.VERIFIED: on_tag,
        BuildStage.TAGGED: on_tagged,
        BuildStage.DONE: on_done,
    }

    def on_transition(s: BuildSession) -> None:
        msg = _STAGE_MESSAGES.get(s.stage)
        if msg is not None:
            console.success(msg)

    outcome = run_state_machine(
        initial_state=BuildSession(stage=BuildStage.INIT, version=resolved.value, target=target),
        get_step=_stage_of,
        handlers=handlers,
        on_transition=on_transition,
    )
    if isinstance(outcome, Err):
        session, error = outcome.error
        console.print(f"stage: {BuildStage.FAILED} (after {session.stage})", Style.DIM)
        return Err(error)

    final = outcome.value
    return Ok(
        BuildReport(
            version=final.version,
            target=final.target,
            entries=final.entries,
            tag=final.tag,
            stage=final.stage,
        )
    )


def _stage_of(session: BuildSession) -> str:
    return session.stage.value
