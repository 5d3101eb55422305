from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from shipyard.core.result import Err, Ok, Result
from shipyard.core.structured import as_str_dict, get_list, get_str, get_table
from shipyard.output.console import ConsoleProtocol, Style
from shipyard.platform.context import RepositoryContext
from shipyard.platform.process import run as run_process
from shipyard.services.release.errors import ReleaseError
from shipyard.services.release.model import ManifestEntry


# Attestation manifests pushed by buildx carry this placeholder platform.
_ATTESTATION_PLATFORM = "unknown/unknown"


def _unreadable(reference: str, detail: str) -> ReleaseError:
    return ReleaseError(
        kind="manifest_unreadable",
        message=f"could not read manifest for {reference}",
        hint=detail,
    )


def parse_manifest(raw: str, *, reference: str) -> Result[list[ManifestEntry], ReleaseError]:
    """Platform entries of an OCI image index or Docker manifest list.

    A single-platform image manifest has no `manifests` array and yields no
    entries.
    """
    try:
        obj: object = json.loads(raw)
    except json.JSONDecodeError as e:
        return Err(_unreadable(reference, f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(_unreadable(reference, "manifest root is not an object"))

    if "manifests" not in data:
        return Ok([])

    manifests = get_list(data, "manifests")
    if manifests is None:
        return Err(_unreadable(reference, "'manifests' is not a list"))

    entries: list[ManifestEntry] = []
    for item in manifests:
        m = as_str_dict(item)
        if m is None:
            continue
        platform = get_table(m, "platform")
        if platform is None:
            continue
        os_name = get_str(platform, "os")
        arch = get_str(platform, "architecture")
        if os_name is None or arch is None:
            continue
        name = f"{os_name}/{arch}"
        variant = get_str(platform, "variant")
        if variant is not None:
            name += f"/{variant}"
        if name == _ATTESTATION_PLATFORM:
            continue
        entries.append(ManifestEntry(platform=name, digest=get_str(m, "digest") or ""))

    return Ok(entries)


def inspect_manifest(
    *,
    ctx: RepositoryContext,
    reference: str,
) -> Result[list[ManifestEntry], ReleaseError]:
    result = run_process(
        ["docker", "buildx", "imagetools", "inspect", "--raw", reference],
        cwd=ctx.root,
        runner=ctx.runner,
    )
    if isinstance(result, Err):
        return Err(_unreadable(reference, result.error.detail() or str(result.error)))
    return parse_manifest(result.value, reference=reference)


def missing_platforms(expected: Iterable[str], entries: Sequence[ManifestEntry]) -> list[str]:
    observed = {e.platform for e in entries}
    return [p for p in expected if p not in observed]


def verify_manifest(
    *,
    ctx: RepositoryContext,
    repository: str,
    version: str,
    expected_platforms: Sequence[str],
    console: ConsoleProtocol,
) -> Result[list[ManifestEntry], ReleaseError]:
    """Confirm the pushed image covers every expected platform."""
    reference = f"{repository}:{version}"
    console.print(f"docker buildx imagetools inspect --raw {reference}", Style.DIM)

    entries = inspect_manifest(ctx=ctx, reference=reference)
    if isinstance(entries, Err):
        return entries

    missing = missing_platforms(expected_platforms, entries.value)
    if missing:
        observed = ", ".join(e.platform for e in entries.value) or "none"
        return Err(
            ReleaseError(
                kind="incomplete_manifest",
                message=f"manifest for {reference} is missing platforms: {', '.join(missing)}",
                hint=f"observed: {observed}",
            )
        )
    return Ok(entries.value)
