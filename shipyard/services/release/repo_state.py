from __future__ import annotations

from shipyard.core.result import Err, Ok, Result
from shipyard.git.repository import GitError, Repository
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import RepositoryState


_MAX_LISTED_PATHS = 10


def _git_failed(action: str, error: GitError) -> ReleaseError:
    return ReleaseError(
        kind="git_failed",
        message=f"failed to {action}",
        hint=error.message,
    )


def validate_repository_state(
    *,
    repo: Repository,
    remote: str,
    release_branch: str,
    console: ConsoleProtocol,
) -> Result[RepositoryState, ReleaseError]:
    """Check that a release may start from the current checkout.

    Checks run in order (branch, clean tree, in sync with remote) and stop at
    the first violation. The remote branch is fetched before comparing heads.
    """
    branch = repo.current_branch()
    if isinstance(branch, Err):
        return Err(_git_failed("read current branch", branch.error))
    if branch.value != release_branch:
        return Err(
            ReleaseError(
                kind="wrong_branch",
                message=(
                    f"must be on {release_branch} branch to release "
                    f"(current: {branch.value or 'detached HEAD'})"
                ),
                hint=f"git checkout {release_branch}",
            )
        )

    changes = repo.tracked_changes()
    if isinstance(changes, Err):
        return Err(_git_failed("check working tree", changes.error))
    if changes.value:
        paths = [e.path for e in changes.value]
        listed = ", ".join(paths[:_MAX_LISTED_PATHS])
        if len(paths) > _MAX_LISTED_PATHS:
            listed += f", ... ({len(paths) - _MAX_LISTED_PATHS} more)"
        return Err(
            ReleaseError(
                kind="dirty_working_tree",
                message="working directory has uncommitted changes",
                hint=f"Commit or stash: {listed}",
            )
        )

    console.print(f"git fetch {remote} {release_branch}", Style.DIM)
    fetched = repo.fetch(remote, release_branch)
    if isinstance(fetched, Err):
        return Err(_git_failed(f"fetch {remote}/{release_branch}", fetched.error))

    local = repo.rev_parse("HEAD")
    if isinstance(local, Err):
        return Err(_git_failed("resolve HEAD", local.error))
    remote_ref = f"{remote}/{release_branch}"
    upstream = repo.rev_parse(remote_ref)
    if isinstance(upstream, Err):
        return Err(_git_failed(f"resolve {remote_ref}", upstream.error))

    if local.value != upstream.value:
        return Err(
            ReleaseError(
                kind="out_of_sync_with_remote",
                message=f"local {release_branch} is not up to date with {remote_ref}",
                hint=f"git pull {remote} {release_branch}",
            )
        )

    return Ok(
        RepositoryState(
            current_branch=branch.value,
            is_clean=True,
            local_head=local.value,
            remote_head=upstream.value,
        )
    )
