from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from shipyard.core.config import ArtifactConfig, ArtifactRule
from shipyard.core.result import Err, Ok, Result
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.platform.context import RepositoryContext
from shipyard.platform.files import atomic_write_text
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import Version


def _image_line_pattern(image_repository: str) -> re.Pattern[str]:
    # `image: repo:tag`, optionally quoted; the tag is whatever precedes
    # whitespace, a quote or end of line.
    repo = re.escape(image_repository)
    return re.compile(rf"(image:\s*)([\"']?){repo}:[^\s\"']+\2")


def _versioned_reference_pattern(image_repository: str) -> re.Pattern[str]:
    repo = re.escape(image_repository)
    return re.compile(rf"(?<![\w./-]){repo}:v\d+\.\d+\.\d+(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?")


def rewrite_reference(
    text: str,
    *,
    rule: ArtifactRule,
    image_repository: str,
    version: Version,
) -> str:
    """Point every image reference in text at version."""
    reference = f"{image_repository}:{version.raw}"
    match rule:
        case "image_line":
            pattern = _image_line_pattern(image_repository)
            return pattern.sub(lambda m: f"{m.group(1)}{m.group(2)}{reference}{m.group(2)}", text)
        case "versioned_reference":
            pattern = _versioned_reference_pattern(image_repository)
            return pattern.sub(lambda _m: reference, text)


def _read_artifact(path: Path, display: str) -> Result[str, ReleaseError]:
    # Bytes are decoded as-is so CRLF line endings survive the rewrite.
    try:
        return Ok(path.read_bytes().decode("utf-8"))
    except OSError as e:
        message = f"failed to read {display}: {e}"
    except UnicodeDecodeError as e:
        message = f"{display} is not valid UTF-8: {e}"
    return Err(ReleaseError(kind="artifact_write_failed", message=message, hint=str(path)))


def apply_version(
    *,
    ctx: RepositoryContext,
    image_repository: str,
    version: Version,
    files: Sequence[ArtifactConfig],
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[list[Path], ReleaseError]:
    """Rewrite the image references in the configured artifacts.

    Returns the files whose content changed. Missing files are skipped with
    a warning; files already pointing at version are left untouched. Every
    file is read and rewritten before the first write, so an unreadable
    artifact leaves the tree unchanged.
    """
    pending: list[tuple[ArtifactConfig, Path, str]] = []

    for artifact in files:
        path = ctx.path(artifact.path)
        if not path.is_file():
            console.warning(f"{artifact.path} not found, skipping")
            continue

        text = _read_artifact(path, artifact.path)
        if isinstance(text, Err):
            return text

        updated = rewrite_reference(
            text.value,
            rule=artifact.rule,
            image_repository=image_repository,
            version=version,
        )
        if updated != text.value:
            pending.append((artifact, path, updated))

    changed: list[Path] = []
    for artifact, path, updated in pending:
        console.print(f"update {artifact.path} -> {image_repository}:{version}", Style.DIM)
        changed.append(path)
        if dry_run:
            continue

        try:
            atomic_write_text(path, updated, encoding="utf-8")
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="artifact_write_failed",
                    message=f"failed to write {artifact.path}: {e}",
                    hint=str(path),
                )
            )

    return Ok(changed)
