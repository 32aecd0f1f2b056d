"""Winget manifest rendering (schema 1.6.0, portable installer)."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from binrelease.models.manifests import WingetInstallerConfig, WingetLocaleConfig

MANIFEST_VERSION = "1.6.0"
SCHEMA_URL = "https://aka.ms/winget-manifest.{kind}.1.6.0.schema.json"


def _schema_comment(kind: str) -> str:
    return f"# yaml-language-server: $schema={SCHEMA_URL.format(kind=kind)}"


def _footer(manifest_type: str) -> list[str]:
    return [f"ManifestType: {manifest_type}", f"ManifestVersion: {MANIFEST_VERSION}"]


def default_publisher_id(publisher: str) -> str:
    return publisher.replace(" ", "")


def command_name(package_id: str) -> str:
    """The command a portable install exposes: last dotted segment of the id."""
    return package_id.rsplit(".", 1)[-1]


def manifest_dir(
    output_dir: Path | str, publisher_id: str, package_id: str, version: str
) -> Path:
    """``<out>/manifests/<p>/<publisher_id>/<package_id>/<version>``.

    ``<p>`` is the lowercased first letter of the publisher id, as in the
    winget-pkgs repository layout.
    """
    first = (publisher_id[:1] or "x").lower()
    return Path(output_dir) / "manifests" / first / publisher_id / package_id / version


def generate_version_manifest(package_id: str, version: str) -> str:
    lines = [
        _schema_comment("version"),
        f"PackageIdentifier: {package_id}",
        f"PackageVersion: {version}",
        "DefaultLocale: en-US",
        *_footer("version"),
    ]
    return "\n".join(lines)


def generate_locale_manifest(config: WingetLocaleConfig) -> str:
    lines = [
        _schema_comment("defaultLocale"),
        f"PackageIdentifier: {config.package_id}",
        f"PackageVersion: {config.version}",
        "PackageLocale: en-US",
        f"Publisher: {config.publisher}",
        f"PackageName: {config.name}",
        f"License: {config.license}",
        f"ShortDescription: {config.description}",
    ]
    if config.homepage:
        lines.append(f"PackageUrl: {config.homepage}")
        lines.append(f"PublisherUrl: {config.homepage}")
    if config.license_url:
        lines.append(f"LicenseUrl: {config.license_url}")
    if config.copyright:
        lines.append(f"Copyright: {config.copyright}")
    if config.tags:
        lines.append("Tags:")
        lines.extend(f"  - {tag}" for tag in config.tags)
    lines.extend(_footer("defaultLocale"))
    return "\n".join(lines)


def generate_installer_manifest(config: WingetInstallerConfig) -> str:
    """Render the installer manifest; digests are written in uppercase."""
    lines = [
        _schema_comment("installer"),
        f"PackageIdentifier: {config.package_id}",
        f"PackageVersion: {config.version}",
        "InstallerType: portable",
        "Commands:",
        f"  - {command_name(config.package_id)}",
        "Installers:",
    ]
    for arch, url, sha256 in (
        ("x64", config.x64_url, config.x64_sha256),
        ("arm64", config.arm64_url, config.arm64_sha256),
    ):
        if not url:
            continue
        lines.append(f"  - Architecture: {arch}")
        lines.append(f"    InstallerUrl: {url}")
        if sha256:
            lines.append(f"    InstallerSha256: {sha256.upper()}")
    lines.extend(_footer("installer"))
    return "\n".join(lines)


class WingetManifestFiles(BaseModel):
    """Paths of the three manifests written for one package version."""

    model_config = ConfigDict(frozen=True)

    manifest_dir: str
    version_manifest: str
    locale_manifest: str
    installer_manifest: str


def write_manifests(
    directory: Path | str,
    locale: WingetLocaleConfig,
    installer: WingetInstallerConfig,
) -> WingetManifestFiles:
    """Write version, locale and installer manifests into *directory*."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    package_id = locale.package_id

    version_path = directory / f"{package_id}.yaml"
    locale_path = directory / f"{package_id}.locale.en-US.yaml"
    installer_path = directory / f"{package_id}.installer.yaml"

    version_path.write_text(
        generate_version_manifest(package_id, locale.version), encoding="utf-8"
    )
    locale_path.write_text(generate_locale_manifest(locale), encoding="utf-8")
    installer_path.write_text(generate_installer_manifest(installer), encoding="utf-8")

    return WingetManifestFiles(
        manifest_dir=str(directory),
        version_manifest=str(version_path),
        locale_manifest=str(locale_path),
        installer_manifest=str(installer_path),
    )
