"""Artifact and build records produced by the release commands."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from binrelease.models.checksums import ChecksumSet
from binrelease.models.platform import DisplayPlatform, ShortPlatform


class CargoInfo(BaseModel):
    """Name and version read from a Cargo manifest."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    version: str = ""


class CollectedArtifact(BaseModel):
    """One distributable found by ``collect-artifacts``."""

    model_config = ConfigDict(frozen=True)

    artifact: str
    path: str
    sha256: str
    platform: ShortPlatform
    url: str = ""


class ReleaseAsset(BaseModel):
    """A file listed in the release-notes asset table."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: str
    platform: DisplayPlatform


class BuildSummary(BaseModel):
    """JSON summary emitted after a build/package command."""

    model_config = ConfigDict(frozen=True)

    binary_name: str
    version: str
    target: str
    artifact: str
    artifact_path: str
    sha256: str = ""
    sha512: str = ""
    b2: str = ""

    @classmethod
    def from_checksums(
        cls,
        *,
        binary_name: str,
        version: str,
        target: str,
        artifact: str,
        artifact_path: str,
        checksums: ChecksumSet,
    ) -> BuildSummary:
        return cls(
            binary_name=binary_name,
            version=version,
            target=target,
            artifact=artifact,
            artifact_path=artifact_path,
            sha256=checksums.sha256,
            sha512=checksums.sha512,
            b2=checksums.b2,
        )


class SignatureFiles(BaseModel):
    """Files written by cosign for one signed artifact."""

    model_config = ConfigDict(frozen=True)

    artifact_path: str
    signature_path: str | None = None
    certificate_path: str | None = None
    bundle_path: str | None = None


class SbomFiles(BaseModel):
    """SPDX and CycloneDX documents generated for one crate version."""

    model_config = ConfigDict(frozen=True)

    binary_name: str
    version: str
    spdx_path: str
    cyclonedx_path: str


class ReleaseResult(BaseModel):
    """Outcome of a release command: the reported artifact plus everything created."""

    model_config = ConfigDict(frozen=True)

    summary: BuildSummary
    binary_path: str
    created: list[str]


class WindowsArtifacts(BaseModel):
    """Windows release assets fetched for an installer smoke test."""

    model_config = ConfigDict(frozen=True)

    binary_path: str
    msi_path: str
