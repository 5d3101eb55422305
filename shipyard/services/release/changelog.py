from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from shipyard.core.result import Err, Ok, Result
from shipyard.git.repository import Repository
from shipyard.services.release.config import CHANGELOG_COMMIT_LIMIT, describe_platform
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import LATEST_TAG, Version


INITIAL_RELEASE_NOTES: tuple[str, ...] = (
    "Multi-architecture Docker support (AMD64 + ARM64)",
    "Kubernetes deployment configurations",
    "Portfolio tracking application",
)


def render_changelog(
    *,
    version: Version,
    previous: Version,
    subjects: Sequence[str],
    image_repository: str,
    platforms: Sequence[str],
    today: date,
) -> str:
    """Markdown changelog for one release.

    `subjects` is ignored when previous is the baseline (no earlier tag).
    """
    lines = [f"## {version} ({today.isoformat()})", ""]

    if previous.baseline:
        lines += ["### Initial Release", ""]
        lines.extend(f"- {note}" for note in INITIAL_RELEASE_NOTES)
    else:
        lines += [f"### Changes since {previous}", ""]
        if subjects:
            lines.extend(f"- {s}" for s in subjects)
        else:
            lines.append("- No changes recorded")
    lines.append("")

    lines += ["### Docker Images", ""]
    lines.append(f"- `{image_repository}:{version}`")
    lines.append(f"- `{image_repository}:{LATEST_TAG}`")
    lines.append("")

    lines += ["### Supported Architectures", ""]
    lines.extend(f"- {describe_platform(p)}" for p in platforms)

    return "\n".join(lines) + "\n"


def generate_changelog(
    *,
    repo: Repository,
    version: Version,
    previous: Version,
    image_repository: str,
    platforms: Sequence[str],
    today: date,
) -> Result[str, ReleaseError]:
    subjects: list[str] = []
    if not previous.baseline:
        log = repo.log_subjects(f"{previous}..HEAD", limit=CHANGELOG_COMMIT_LIMIT)
        if isinstance(log, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"failed to read commits since {previous}",
                    hint=log.error.message,
                )
            )
        subjects = log.value

    return Ok(
        render_changelog(
            version=version,
            previous=previous,
            subjects=subjects,
            image_repository=image_repository,
            platforms=platforms,
            today=today,
        )
    )
