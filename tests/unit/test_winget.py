"""Tests for Winget manifest rendering."""

from __future__ import annotations

from pathlib import Path

from binrelease.models.manifests import WingetInstallerConfig, WingetLocaleConfig
from binrelease.packaging.winget import (
    command_name,
    default_publisher_id,
    generate_installer_manifest,
    generate_locale_manifest,
    generate_version_manifest,
    manifest_dir,
    write_manifests,
)

LOCALE = WingetLocaleConfig(
    package_id="Acme.MyApp",
    version="1.2.3",
    publisher="Acme Corp",
    name="MyApp",
    description="A tool",
)


def test_identifiers():
    assert default_publisher_id("Acme Corp") == "AcmeCorp"
    assert command_name("Acme.MyApp") == "MyApp"
    assert command_name("myapp") == "myapp"


def test_manifest_dir_layout(tmp_dir: Path):
    assert manifest_dir(tmp_dir, "AcmeCorp", "MyApp", "1.2.3") == (
        tmp_dir / "manifests" / "a" / "AcmeCorp" / "MyApp" / "1.2.3"
    )


def test_version_manifest():
    text = generate_version_manifest("Acme.MyApp", "1.2.3")
    assert text.splitlines() == [
        "# yaml-language-server: $schema=https://aka.ms/winget-manifest.version.1.6.0.schema.json",
        "PackageIdentifier: Acme.MyApp",
        "PackageVersion: 1.2.3",
        "DefaultLocale: en-US",
        "ManifestType: version",
        "ManifestVersion: 1.6.0",
    ]


class TestLocaleManifest:
    def test_minimal(self):
        text = generate_locale_manifest(LOCALE)
        assert "Publisher: Acme Corp\nPackageName: MyApp\nLicense: MIT\n" in text
        assert "PackageUrl" not in text
        assert "Tags" not in text
        assert text.endswith("ManifestType: defaultLocale\nManifestVersion: 1.6.0")

    def test_optional_fields(self):
        text = generate_locale_manifest(
            LOCALE.model_copy(
                update={
                    "homepage": "https://example.com",
                    "license_url": "https://example.com/LICENSE",
                    "copyright": "(c) Acme",
                    "tags": ["cli", "rust"],
                }
            )
        )
        assert "PackageUrl: https://example.com\nPublisherUrl: https://example.com\n" in text
        assert "LicenseUrl: https://example.com/LICENSE\n" in text
        assert "Copyright: (c) Acme\n" in text
        assert "Tags:\n  - cli\n  - rust\n" in text


class TestInstallerManifest:
    def test_uppercases_digests(self):
        text = generate_installer_manifest(
            WingetInstallerConfig(
                package_id="Acme.MyApp",
                version="1.2.3",
                x64_url="https://x/x64.zip",
                x64_sha256="abcdef",
            )
        )
        assert "InstallerType: portable\nCommands:\n  - MyApp\n" in text
        assert "  - Architecture: x64\n    InstallerUrl: https://x/x64.zip\n" in text
        assert "    InstallerSha256: ABCDEF\n" in text
        assert "arm64" not in text

    def test_url_without_digest(self):
        text = generate_installer_manifest(
            WingetInstallerConfig(
                package_id="Acme.MyApp", version="1.2.3", arm64_url="https://x/arm.zip"
            )
        )
        assert "  - Architecture: arm64\n    InstallerUrl: https://x/arm.zip\n" in text
        assert "InstallerSha256" not in text


def test_write_manifests(tmp_dir: Path):
    installer = WingetInstallerConfig(package_id="Acme.MyApp", version="1.2.3")
    files = write_manifests(tmp_dir / "out", LOCALE, installer)
    assert Path(files.version_manifest).name == "Acme.MyApp.yaml"
    assert Path(files.locale_manifest).name == "Acme.MyApp.locale.en-US.yaml"
    assert Path(files.installer_manifest).read_text().startswith("# yaml-language-server")
    assert files.manifest_dir == str(tmp_dir / "out")
