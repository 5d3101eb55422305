from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Literal


BumpKind = Literal["major", "minor", "patch"]
BUMP_KINDS: tuple[BumpKind, ...] = ("major", "minor", "patch")

LATEST_TAG = "latest"


@dataclass(frozen=True, slots=True)
class Version:
    """A release version.

    `raw` is the tag name exactly as it is written to git and the registry.
    The numeric components are None when `raw` does not start with a
    recognisable X.Y.Z (custom versions are accepted verbatim).
    """

    raw: str
    major: int | None = None
    minor: int | None = None
    patch: int | None = None
    # True only for the implicit v1.0.0 used when no version tag exists yet.
    baseline: bool = field(default=False, compare=False)

    @property
    def is_numeric(self) -> bool:
        return self.major is not None and self.minor is not None and self.patch is not None

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True, slots=True)
class RepositoryState:
    current_branch: str
    is_clean: bool
    local_head: str
    remote_head: str

    def is_releasable_from(self, release_branch: str) -> bool:
        return (
            self.current_branch == release_branch
            and self.is_clean
            and self.local_head == self.remote_head
        )


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    version: Version
    previous_version: Version
    changelog: str
    commit_sha: str
    changed_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """What one buildx invocation produces.

    `platforms` and `tags` are ordered and free of duplicates; the first tag
    is always the version tag.
    """

    repository: str
    platforms: tuple[str, ...]
    tags: tuple[str, ...]

    @property
    def references(self) -> tuple[str, ...]:
        return tuple(f"{self.repository}:{t}" for t in self.tags)


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    platform: str  # os/arch[/variant]
    digest: str

    @property
    def short_digest(self) -> str:
        algo, _, hex_digest = self.digest.partition(":")
        return f"{algo}:{hex_digest[:12]}" if hex_digest else self.digest[:12]


class OnExisting(Enum):
    """What TagPublisher does when the tag is already present."""

    FAIL = "fail"
    SKIP = "skip"


TagStatus = Literal["created", "skipped", "planned"]


@dataclass(frozen=True, slots=True)
class TagOutcome:
    tag: str
    status: TagStatus

    @property
    def created(self) -> bool:
        return self.status == "created"


class BuildStage(StrEnum):
    INIT = "init"
    BUILDER_READY = "builder_ready"
    BUILT = "built"
    VERIFIED = "verified"
    TAGGED = "tagged"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BuildReport:
    version: Version
    target: BuildTarget
    entries: tuple[ManifestEntry, ...]
    tag: TagOutcome | None
    stage: BuildStage
