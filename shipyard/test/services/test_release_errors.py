from __future__ import annotations

from typing import get_args

import pytest

from shipyard.services.release.errors import ReleaseError, ReleaseErrorKind


@pytest.mark.parametrize(
    ("kind", "category"),
    [
        ("invalid_bump_kind", "VersionError"),
        ("empty_version", "VersionError"),
        ("wrong_branch", "RepositoryStateError"),
        ("dirty_working_tree", "RepositoryStateError"),
        ("out_of_sync_with_remote", "RepositoryStateError"),
        ("artifact_write_failed", "ArtifactUpdateError"),
        ("tag_exists", "TagError"),
        ("builder_unavailable", "BuildError"),
        ("build_failed", "BuildError"),
        ("incomplete_manifest", "ManifestError"),
    ],
)
def test_category(kind: ReleaseErrorKind, category: str) -> None:
    assert ReleaseError(kind=kind, message="x").category == category


def test_every_kind_has_a_category() -> None:
    for kind in get_args(ReleaseErrorKind):
        assert ReleaseError(kind=kind, message="x").category

