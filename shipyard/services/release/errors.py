from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_bump_kind",
    "empty_version",
    "wrong_branch",
    "dirty_working_tree",
    "out_of_sync_with_remote",
    "git_failed",
    "artifact_write_failed",
    "commit_failed",
    "tag_exists",
    "tag_failed",
    "builder_unavailable",
    "build_failed",
    "incomplete_manifest",
    "manifest_unreadable",
]

ErrorCategory = Literal[
    "VersionError",
    "RepositoryStateError",
    "ArtifactUpdateError",
    "TagError",
    "BuildError",
    "ManifestError",
]

_CATEGORIES: dict[str, ErrorCategory] = {
    "invalid_bump_kind": "VersionError",
    "empty_version": "VersionError",
    "wrong_branch": "RepositoryStateError",
    "dirty_working_tree": "RepositoryStateError",
    "out_of_sync_with_remote": "RepositoryStateError",
    "git_failed": "RepositoryStateError",
    "artifact_write_failed": "ArtifactUpdateError",
    "commit_failed": "ArtifactUpdateError",
    "tag_exists": "TagError",
    "tag_failed": "TagError",
    "builder_unavailable": "BuildError",
    "build_failed": "BuildError",
    "incomplete_manifest": "ManifestError",
    "manifest_unreadable": "ManifestError",
}


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Failure of a release or build step.

    Every error aborts the running pipeline; `kind` identifies the exact
    failure and `category` the component family it belongs to.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self.kind]
