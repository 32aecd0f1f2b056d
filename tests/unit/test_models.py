"""Tests for binrelease data models: enums, validation and immutability."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from binrelease.models import (
    BINARY_PLATFORMS,
    BuildSummary,
    ChecksumAlgorithm,
    ChecksumSet,
    CollectedArtifact,
    DisplayPlatform,
    PackageMetadata,
    PkgbuildConfig,
    ShortPlatform,
)
from binrelease.models.manifests import default_description

SHA256 = "a" * 64
SHA512 = "b" * 128


class TestChecksumAlgorithm:
    def test_extensions(self):
        assert [a.extension for a in ChecksumAlgorithm] == [".sha256", ".sha512", ".b2"]

    def test_hex_lengths(self):
        assert ChecksumAlgorithm.SHA256.hex_length == 64
        assert ChecksumAlgorithm.SHA512.hex_length == 128
        assert ChecksumAlgorithm.B2.hex_length == 128

    def test_labels(self):
        assert ChecksumAlgorithm.B2.label == "BLAKE2"


class TestChecksumSet:
    def test_empty_is_valid(self):
        assert ChecksumSet().present() == {}

    def test_valid_digests(self):
        checksums = ChecksumSet(sha256=SHA256, sha512=SHA512)
        assert checksums.get(ChecksumAlgorithm.SHA256) == SHA256
        assert checksums.present() == {
            ChecksumAlgorithm.SHA256: SHA256,
            ChecksumAlgorithm.SHA512: SHA512,
        }

    def test_wrong_length_rejected(self):
        with pytest.raises(ValidationError):
            ChecksumSet(sha256="abc")

    def test_uppercase_rejected(self):
        with pytest.raises(ValidationError):
            ChecksumSet(sha256="A" * 64)

    def test_non_hex_rejected(self):
        with pytest.raises(ValidationError):
            ChecksumSet(b2="z" * 128)

    def test_frozen(self):
        checksums = ChecksumSet(sha256=SHA256)
        with pytest.raises(ValidationError):
            checksums.sha256 = "b" * 64


class TestPlatformEnums:
    def test_short_vocabulary(self):
        assert [p.value for p in ShortPlatform] == [
            "macos-arm64",
            "macos-x64",
            "linux-arm64",
            "linux-x64",
            "windows-x64",
            "windows-arm64",
            "linux-deb",
            "linux-rpm",
            "linux-apk",
            "macos-dmg",
            "windows-msi",
            "unknown",
        ]

    def test_display_vocabulary_includes_other(self):
        assert DisplayPlatform.OTHER.value == "Other"
        assert DisplayPlatform.MACOS_APPLE_SILICON.value == "macOS (Apple Silicon)"
        assert len(DisplayPlatform) == 16

    def test_output_prefix(self):
        assert ShortPlatform.LINUX_X64.output_prefix == "linux_x64"
        assert ShortPlatform.MACOS_ARM64.output_prefix == "macos_arm64"

    def test_binary_platforms_exclude_installers(self):
        assert ShortPlatform.LINUX_DEB not in BINARY_PLATFORMS
        assert len(BINARY_PLATFORMS) == 6


class TestArtifactModels:
    def test_collected_artifact_serialises_platform_token(self):
        artifact = CollectedArtifact(
            artifact="a.tar.gz", path="dist/a.tar.gz", sha256=SHA256, platform=ShortPlatform.LINUX_X64
        )
        data = json.loads(artifact.model_dump_json())
        assert data["platform"] == "linux-x64"
        assert data["url"] == ""

    def test_build_summary_from_checksums(self):
        summary = BuildSummary.from_checksums(
            binary_name="myapp",
            version="1.0.0",
            target="x86_64-unknown-linux-gnu",
            artifact="a.tar.gz",
            artifact_path="target/a.tar.gz",
            checksums=ChecksumSet(sha256=SHA256),
        )
        assert summary.sha256 == SHA256
        assert summary.sha512 == ""


class TestManifestModels:
    def test_package_metadata_defaults(self):
        metadata = PackageMetadata()
        assert metadata.maintainer == "Unknown <unknown@example.com>"
        assert metadata.section == "utils"
        assert metadata.priority == "optional"
        assert metadata.group == "Applications/System"
        assert metadata.depends == []

    def test_pkgbuild_defaults(self):
        config = PkgbuildConfig(pkgname="myapp", pkgver="1.0.0", pkgdesc="d", binary_name="myapp")
        assert config.makedepends == ["cargo"]
        assert config.license == "MIT"

    def test_default_description(self):
        assert default_description("myapp") == "myapp - built with binrelease"
