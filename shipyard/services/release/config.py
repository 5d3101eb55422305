from __future__ import annotations

from shipyard.services.release.model import Version


# Used as the previous version when the repository has no version tags yet.
BASELINE_VERSION = Version(raw="v1.0.0", major=1, minor=0, patch=0, baseline=True)

VERSION_TAG_PATTERN = "v*"

CHANGELOG_COMMIT_LIMIT = 20

PLATFORM_DESCRIPTIONS: dict[str, str] = {
    "linux/amd64": "Intel/AMD x86_64",
    "linux/arm64": "Apple Silicon, ARM servers",
    "linux/arm/v7": "32-bit ARM boards",
}

BUILDER_DRIVER = "docker-container"

DOCKER_HUB_URL = "https://hub.docker.com/r"


def describe_platform(platform: str) -> str:
    desc = PLATFORM_DESCRIPTIONS.get(platform)
    return f"{platform} ({desc})" if desc else platform
