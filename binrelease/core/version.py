"""Release version rules: semver validation, tag checks, latest release lookup."""

from __future__ import annotations

import json
import logging
import re

from binrelease.core.errors import CommandError, ReleaseError, VersionError
from binrelease.core.process import CommandRunner

logger = logging.getLogger(__name__)

# MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]
SEMVER_PATTERN = re.compile(
    r"^\d+\.\d+\.\d+"
    r"(-[a-zA-Z0-9]+(\.[a-zA-Z0-9]+)*)?"
    r"(\+[a-zA-Z0-9]+(\.[a-zA-Z0-9]+)*)?$"
)

VERSION_PREFIX = re.compile(r"^\d+\.\d+\.\d+")


def is_valid_semver(version: str) -> bool:
    return SEMVER_PATTERN.match(version) is not None


def version_from_tag(tag: str) -> str | None:
    """Strip the leading ``v`` from a tag; ``None`` if there is none."""
    if tag.startswith("v"):
        return tag[1:]
    return None


def validate_release_tag(
    tag: str, expected: str, cargo_version: str | None = None
) -> str:
    """Check a release tag against the version the project expects.

    Parameters
    ----------
    tag:
        Git tag being released, e.g. ``v1.2.3``.
    expected:
        Version the maintainers intend to release (``NEXT_RELEASE_VERSION``).
    cargo_version:
        When given, the ``Cargo.toml`` version must match the tag as well.

    Returns
    -------
    str
        The validated version, without the ``v``.

    Raises
    ------
    VersionError
        With a message that tells the maintainer how to fix the mismatch.
    """
    if not tag:
        raise VersionError(
            "GITHUB_REF_NAME is not available\n\n"
            "Set TAG to the git tag being released (e.g., v1.2.3)"
        )
    if not expected:
        raise VersionError(
            "NEXT_RELEASE_VERSION variable is not set\n\n"
            "Set it at: Settings > Secrets and variables > Actions > Variables"
        )

    tag_version = version_from_tag(tag)
    if tag_version is None:
        raise VersionError(
            f"Tag should start with 'v', got '{tag}'\n\n"
            f"Push a tag like: git tag v{expected} && git push origin v{expected}"
        )

    if not is_valid_semver(tag_version):
        raise VersionError(
            f"Invalid version format: {tag_version}\n\n"
            "Expected semantic versioning: MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]\n"
            "Examples: 1.2.3, 1.0.0-alpha.1, 2.0.0-rc.1+build.123"
        )

    if expected != tag_version:
        raise VersionError(
            f"NEXT_RELEASE_VERSION ({expected}) does not match tag ({tag})\n\n"
            "Either:\n"
            f"  1. Update NEXT_RELEASE_VERSION to '{tag_version}' at: "
            "Settings > Secrets and variables > Actions > Variables\n"
            f"  2. Or push the correct tag: git tag v{expected} && "
            f"git push origin v{expected}"
        )

    if cargo_version is not None:
        if not cargo_version:
            raise VersionError("Could not read version from Cargo.toml")
        if cargo_version != tag_version:
            raise VersionError(
                f"Cargo.toml version ({cargo_version}) does not match tag "
                f"({tag_version})\n\n"
                f"Update Cargo.toml version to '{tag_version}' before tagging"
            )

    return tag_version


def check_manifest_version(version: str) -> str:
    """Validate a version read from ``Cargo.toml`` for ``get-version``."""
    if not version:
        raise VersionError(
            "no version found in Cargo.toml\n\n"
            "Ensure [package] or [workspace.package] has a version field"
        )
    if not VERSION_PREFIX.match(version):
        raise VersionError(f"invalid version format: {version}")
    return version


def fetch_latest_release_tag(
    runner: CommandRunner, repository: str, token: str = ""
) -> str:
    """Look up the tag of the repository's latest GitHub release.

    Uses the ``gh`` CLI when a token is available, otherwise the public
    REST API via ``curl``.
    """
    try:
        if token:
            result = runner.run(
                "gh",
                ["release", "view", "--repo", repository, "--json", "tagName"],
                env={"GH_TOKEN": token},
            )
            key = "tagName"
        else:
            api_url = f"https://api.github.com/repos/{repository}/releases/latest"
            result = runner.run("curl", ["-fsSL", api_url])
            key = "tag_name"
    except CommandError as exc:
        raise ReleaseError(f"failed to fetch release: {exc.stderr}") from exc

    try:
        data = json.loads(result.stdout)
    except ValueError as exc:
        raise ReleaseError(f"JSON error: {exc}") from exc
    tag = data.get(key) if isinstance(data, dict) else None
    return tag if isinstance(tag, str) else ""


def resolve_release_version(
    runner: CommandRunner,
    *,
    override: str = "",
    repository: str = "",
    token: str = "",
) -> str:
    """Return the version to publish downstream manifests for.

    An explicit *override* wins; otherwise the latest release of
    *repository* is fetched and its leading ``v`` stripped.
    """
    version = override
    if not version:
        if not repository:
            raise VersionError("GITHUB_REPOSITORY not set")
        logger.info("Fetching latest release from %s", repository)
        tag = fetch_latest_release_tag(runner, repository, token)
        if not tag:
            raise VersionError("no releases found")
        version = version_from_tag(tag) or tag

    if not version[:1].isdigit() or not version[:1].isascii():
        raise VersionError(f"invalid version format: {version}")
    return version
