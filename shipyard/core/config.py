"""Typed configuration loading for shipyard.toml.

The file is optional: every field has a default matching the portfolio
tracker's release layout. Example:

    [release]
    branch = "main"
    remote = "origin"

    [image]
    repository = "adamchilders/portfolio-tracker"
    platforms = ["linux/amd64", "linux/arm64"]

    [[artifacts]]
    path = "rancher/deployment.yaml"
    rule = "image_line"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_str_list, get_table

__all__ = [
    "ArtifactConfig",
    "ArtifactRule",
    "Config",
    "ConfigError",
    "ImageConfig",
    "ReleaseConfig",
    "CONFIG_FILE_NAME",
    "DEFAULT_IMAGE_REPOSITORY",
    "DEFAULT_PLATFORMS",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "shipyard.toml"

DEFAULT_RELEASE_BRANCH = "main"
DEFAULT_REMOTE = "origin"

DEFAULT_IMAGE_REPOSITORY = "adamchilders/portfolio-tracker"
DEFAULT_PLATFORMS: tuple[str, ...] = ("linux/amd64", "linux/arm64")
DEFAULT_BUILDER = "multiplatform"
DEFAULT_BUILD_CONTEXT = "."
# Prefix for auto-generated build versions: <base>-<timestamp>-<sha>.
DEFAULT_BUILD_BASE_VERSION = "v1.0.3"

ArtifactRule = Literal["image_line", "versioned_reference"]
_ARTIFACT_RULES: frozenset[str] = frozenset({"image_line", "versioned_reference"})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Where releases are cut from and pushed to."""

    branch: str = DEFAULT_RELEASE_BRANCH
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class ImageConfig:
    """Container image coordinates and buildx settings."""

    repository: str = DEFAULT_IMAGE_REPOSITORY
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS
    builder: str = DEFAULT_BUILDER
    context: str = DEFAULT_BUILD_CONTEXT
    build_base_version: str = DEFAULT_BUILD_BASE_VERSION


@dataclass(frozen=True, slots=True)
class ArtifactConfig:
    """A tracked file whose image reference is rewritten on release.

    Attributes:
        path: Path relative to the repository root.
        rule: image_line rewrites `image: <repo>:<tag>` lines (deployment
            manifests); versioned_reference rewrites `<repo>:vX.Y.Z` anywhere
            (docs).
    """

    path: str
    rule: ArtifactRule


DEFAULT_ARTIFACTS: tuple[ArtifactConfig, ...] = (
    ArtifactConfig(path="rancher/deployment.yaml", rule="image_line"),
    ArtifactConfig(path="README.md", rule="versioned_reference"),
)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    artifacts: tuple[ArtifactConfig, ...] = DEFAULT_ARTIFACTS

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: On structurally invalid values (empty platform list,
                unknown artifact rule, malformed artifact entry).
        """
        release: StrDict = get_table(data, "release") or {}
        image: StrDict = get_table(data, "image") or {}

        platforms = get_str_list(image, "platforms")
        if platforms is not None and not platforms:
            raise ValueError("[image].platforms must not be empty")

        return cls(
            release=ReleaseConfig(
                branch=get_str(release, "branch") or DEFAULT_RELEASE_BRANCH,
                remote=get_str(release, "remote") or DEFAULT_REMOTE,
            ),
            image=ImageConfig(
                repository=get_str(image, "repository") or DEFAULT_IMAGE_REPOSITORY,
                platforms=tuple(dict.fromkeys(platforms)) if platforms else DEFAULT_PLATFORMS,
                builder=get_str(image, "builder") or DEFAULT_BUILDER,
                context=get_str(image, "context") or DEFAULT_BUILD_CONTEXT,
                build_base_version=get_str(image, "build_base_version")
                or DEFAULT_BUILD_BASE_VERSION,
            ),
            artifacts=_parse_artifacts(data),
        )


def _parse_artifacts(data: Mapping[str, object]) -> tuple[ArtifactConfig, ...]:
    if "artifacts" not in data:
        return DEFAULT_ARTIFACTS

    raw = get_list(data, "artifacts")
    if raw is None:
        raise ValueError("'artifacts' must be an array of tables")

    out: list[ArtifactConfig] = []
    for item in raw:
        table = as_str_dict(item)
        if table is None:
            raise ValueError("each [[artifacts]] entry must be a table")
        path = get_str(table, "path")
        if path is None:
            raise ValueError("[[artifacts]] entry is missing 'path'")
        rule = get_str(table, "rule") or "image_line"
        if rule not in _ARTIFACT_RULES:
            raise ValueError(f"unknown artifact rule for {path}: {rule}")
        out.append(ArtifactConfig(path=path, rule=cast(ArtifactRule, rule)))
    return tuple(out)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to shipyard.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
