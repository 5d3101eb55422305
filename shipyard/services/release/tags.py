from __future__ import annotations

from shipyard.core.result import Err, Ok, Result
from shipyard.git.repository import GitError, Repository
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import OnExisting, TagOutcome, Version


def _tag_failed(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="tag_failed", message=message, hint=error.message)


def publish_tag(
    *,
    repo: Repository,
    remote: str,
    version: Version,
    message: str,
    on_existing: OnExisting,
    push_branch: str | None,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[TagOutcome, ReleaseError]:
    """Create an annotated tag for version and push it.

    When push_branch is given, that branch is pushed before the tag. An
    existing tag is an error with OnExisting.FAIL; with OnExisting.SKIP it is
    reported and left alone.
    """
    tag = version.raw

    exists = repo.tag_exists(tag)
    if isinstance(exists, Err):
        return Err(_tag_failed(f"failed to check for tag {tag}", exists.error))
    if exists.value:
        if on_existing is OnExisting.SKIP:
            console.warning(f"git tag {tag} already exists, skipping")
            return Ok(TagOutcome(tag=tag, status="skipped"))
        return Err(
            ReleaseError(
                kind="tag_exists",
                message=f"tag {tag} already exists",
                hint=f"Delete it (git tag -d {tag}) or release a different version.",
            )
        )

    console.print(f"git tag -a {tag}", Style.DIM)
    if push_branch is not None:
        console.print(f"git push {remote} {push_branch}", Style.DIM)
    console.print(f"git push {remote} {tag}", Style.DIM)
    if dry_run:
        return Ok(TagOutcome(tag=tag, status="planned"))

    created = repo.create_annotated_tag(tag, message)
    if isinstance(created, Err):
        return Err(_tag_failed(f"failed to create tag {tag}", created.error))

    if push_branch is not None:
        pushed_branch = repo.push(remote, push_branch)
        if isinstance(pushed_branch, Err):
            return Err(_tag_failed(f"failed to push {push_branch} to {remote}", pushed_branch.error))

    pushed = repo.push(remote, tag)
    if isinstance(pushed, Err):
        return Err(_tag_failed(f"failed to push tag {tag} to {remote}", pushed.error))

    return Ok(TagOutcome(tag=tag, status="created"))
