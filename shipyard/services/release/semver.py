from __future__ import annotations

import re

from shipyard.core.result import Err, Ok, Result
from shipyard.git.repository import Repository
from shipyard.services.release.config import BASELINE_VERSION, VERSION_TAG_PATTERN
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import BUMP_KINDS, Version


_TAG_RE = re.compile(
    r"^v(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)
_LOOSE_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_tag(tag: str) -> Version | None:
    """Parse a `vX.Y.Z[-pre][+build]` tag; None for anything else."""
    m = _TAG_RE.match(tag)
    if m is None:
        return None
    return Version(raw=tag, major=int(m.group(1)), minor=int(m.group(2)), patch=int(m.group(3)))


def prerelease_of(version: Version) -> str | None:
    m = _TAG_RE.match(version.raw)
    if m is None:
        return None
    return m.group(4)


def _prerelease_key(pre: str) -> tuple[tuple[int, int, str], ...]:
    # Numeric identifiers sort numerically and before alphanumeric ones.
    key: list[tuple[int, int, str]] = []
    for ident in pre.split("."):
        if ident.isdigit():
            key.append((0, int(ident), ""))
        else:
            key.append((1, 0, ident))
    return tuple(key)


def sort_key(version: Version) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
    """Semantic ordering key: v1.10.0 > v1.9.0, v1.2.0 > v1.2.0-rc1."""
    pre = prerelease_of(version)
    return (
        version.major or 0,
        version.minor or 0,
        version.patch or 0,
        1 if pre is None else 0,
        () if pre is None else _prerelease_key(pre),
    )


def select_latest(tags: list[str]) -> Version:
    """Highest version among tags; the baseline when none parse."""
    versions = [v for v in (parse_tag(t) for t in tags) if v is not None]
    if not versions:
        return BASELINE_VERSION
    return max(versions, key=sort_key)


def latest_version(*, repo: Repository) -> Result[Version, ReleaseError]:
    tags = repo.list_tags(VERSION_TAG_PATTERN)
    if isinstance(tags, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="failed to list version tags",
                hint=tags.error.message,
            )
        )
    return Ok(select_latest(tags.value))


def bump(current: Version, kind: str) -> Result[Version, ReleaseError]:
    """Next version for a major, minor or patch bump.

    Any pre-release or build suffix on `current` is dropped. Components a
    custom version lacks default to 1.0.0.
    """
    major = current.major if current.major is not None else 1
    minor = current.minor if current.minor is not None else 0
    patch = current.patch if current.patch is not None else 0

    match kind:
        case "major":
            major, minor, patch = major + 1, 0, 0
        case "minor":
            minor, patch = minor + 1, 0
        case "patch":
            patch = patch + 1
        case _:
            return Err(
                ReleaseError(
                    kind="invalid_bump_kind",
                    message=f"invalid bump type: {kind}",
                    hint=f"Expected one of: {', '.join(BUMP_KINDS)}",
                )
            )

    return Ok(Version(raw=f"v{major}.{minor}.{patch}", major=major, minor=minor, patch=patch))


def accept(custom: str) -> Result[Version, ReleaseError]:
    """Take a user-supplied version as-is.

    Only emptiness is rejected; `v2.0.0-rc1` or any other ad-hoc tag is
    accepted verbatim. Numeric components are filled in when a leading X.Y.Z
    can be read.
    """
    raw = custom.strip()
    if not raw:
        return Err(
            ReleaseError(
                kind="empty_version",
                message="custom version required",
                hint="Example: shipyard release custom v2.0.0-rc1",
            )
        )

    m = _LOOSE_RE.match(raw)
    if m is None:
        return Ok(Version(raw=raw))
    parts = [int(g) if g is not None else None for g in m.groups()]
    return Ok(Version(raw=raw, major=parts[0], minor=parts[1], patch=parts[2]))
