"""Package-manager manifests: ``generate-homebrew``, ``generate-aur``, ``generate-winget``.

Name and version default to the crate's ``Cargo.toml``; download URLs and
digests come from the ``HOMEBREW_*``, ``AUR_*`` and ``WINGET_*`` settings,
normally filled in from ``collect-artifacts`` outputs.
"""

from __future__ import annotations

import logging

from rich.console import Console

from binrelease.cli.common import open_step, reported_errors, require
from binrelease.config import ReleaseSettings, parse_comma_list
from binrelease.core.cargo_info import read_cargo_info
from binrelease.core.outputs import print_rule
from binrelease.models.manifests import (
    FormulaConfig,
    PkgbuildConfig,
    WingetInstallerConfig,
    WingetLocaleConfig,
    default_description,
)
from binrelease.packaging.aur import write_aur_files
from binrelease.packaging.homebrew import to_class_name, write_formula
from binrelease.packaging.winget import (
    default_publisher_id,
    generate_version_manifest,
    manifest_dir,
    write_manifests,
)

console = Console()
logger = logging.getLogger(__name__)


def _name_and_version(settings: ReleaseSettings) -> tuple[str, str]:
    info = read_cargo_info(settings.manifest_path)
    return settings.binary_name or info.name, settings.version or info.version


def generate_homebrew_cmd() -> None:
    """Render ``<binary>.rb`` into ``HOMEBREW_OUTPUT_DIR``."""
    with reported_errors():
        settings, _, outputs = open_step()
        binary_name, version = _name_and_version(settings)
        require(binary_name, "could not determine binary name")
        require(version, "could not determine version")

        formula_class = settings.homebrew_formula_class or to_class_name(binary_name)
        config = FormulaConfig(
            formula_class=formula_class,
            binary_name=binary_name,
            version=version,
            description=settings.pkg_description or default_description(binary_name),
            homepage=settings.pkg_homepage,
            license=settings.pkg_license,
            macos_arm64_url=settings.homebrew_macos_arm64_url,
            macos_arm64_sha256=settings.homebrew_macos_arm64_sha256,
            macos_x64_url=settings.homebrew_macos_x64_url,
            macos_x64_sha256=settings.homebrew_macos_x64_sha256,
            linux_arm64_url=settings.homebrew_linux_arm64_url,
            linux_arm64_sha256=settings.homebrew_linux_arm64_sha256,
            linux_x64_url=settings.homebrew_linux_x64_url,
            linux_x64_sha256=settings.homebrew_linux_x64_sha256,
        )
        console.print(f"[green]Generating Homebrew formula:[/green] {formula_class}")

        formula_file = write_formula(config, settings.homebrew_output_dir)
        formula = formula_file.read_text(encoding="utf-8")

        console.print()
        console.print("[green]Formula file:[/green]")
        print_rule(console)
        console.print(formula, end="", markup=False, highlight=False)
        print_rule(console)

        outputs.set("formula_file", str(formula_file))
        outputs.set("formula_class", formula_class)
        outputs.set_multiline("formula", formula)


def generate_aur_cmd() -> None:
    """Render ``PKGBUILD`` and ``.SRCINFO`` into ``AUR_OUTPUT_DIR``."""
    with reported_errors():
        settings, _, outputs = open_step()
        binary_name, version = _name_and_version(settings)
        pkg_name = settings.aur_package_name or binary_name
        require(pkg_name, "could not determine package name - set 'aur-name' or 'binary-name'")
        require(version, "could not determine version - set the 'version' input")

        if settings.aur_source_url and not settings.aur_source_sha256:
            logger.warning("source URL provided without SHA256, PKGBUILD will use SKIP")

        console.print(f"[green]Generating AUR PKGBUILD:[/green] {pkg_name} v{version}")
        config = PkgbuildConfig(
            pkgname=pkg_name,
            pkgver=version,
            pkgdesc=settings.pkg_description or default_description(pkg_name),
            binary_name=settings.binary_name or pkg_name,
            url=settings.pkg_homepage,
            license=settings.pkg_license or "MIT",
            maintainer=settings.aur_maintainer,
            source_url=settings.aur_source_url,
            source_sha256=settings.aur_source_sha256,
            depends=parse_comma_list(settings.pkg_depends),
            makedepends=parse_comma_list(settings.aur_makedepends),
            optdepends=parse_comma_list(settings.aur_optdepends),
            provides=parse_comma_list(settings.pkg_provides),
            conflicts=parse_comma_list(settings.pkg_conflicts),
        )
        pkgbuild_path, srcinfo_path = write_aur_files(config, settings.aur_output_dir)
        pkgbuild = pkgbuild_path.read_text(encoding="utf-8")

        console.print()
        console.print("[green]PKGBUILD:[/green]")
        print_rule(console)
        console.print(pkgbuild, end="", markup=False, highlight=False)
        print_rule(console)

        outputs.set("pkgbuild_path", str(pkgbuild_path))
        outputs.set("srcinfo_path", str(srcinfo_path))
        outputs.set_multiline("pkgbuild", pkgbuild)


def generate_winget_cmd() -> None:
    """Render the version, locale and installer manifests for a portable install."""
    with reported_errors():
        settings, _, outputs = open_step()
        binary_name, version = _name_and_version(settings)
        require(binary_name, "could not determine binary name")
        require(version, "could not determine version")
        publisher = require(settings.winget_publisher, "WINGET_PUBLISHER is required")

        publisher_id = settings.winget_publisher_id or default_publisher_id(publisher)
        package_id = settings.winget_package_id or binary_name
        manifest_id = f"{publisher_id}.{package_id}"
        console.print(f"[green]Generating Winget manifest:[/green] {manifest_id} v{version}")

        directory = manifest_dir(settings.winget_output_dir, publisher_id, package_id, version)
        files = write_manifests(
            directory,
            WingetLocaleConfig(
                package_id=manifest_id,
                version=version,
                publisher=publisher,
                name=binary_name,
                description=settings.pkg_description or default_description(binary_name),
                homepage=settings.pkg_homepage,
                license=settings.pkg_license or "MIT",
                license_url=settings.winget_license_url,
                copyright=settings.winget_copyright,
                tags=parse_comma_list(settings.winget_tags),
            ),
            WingetInstallerConfig(
                package_id=manifest_id,
                version=version,
                x64_url=settings.winget_x64_url,
                x64_sha256=settings.winget_x64_sha256,
                arm64_url=settings.winget_arm64_url,
                arm64_sha256=settings.winget_arm64_sha256,
            ),
        )

        console.print()
        console.print("[green]Manifest files:[/green]")
        print_rule(console)
        console.print(f"Version: {files.version_manifest}", highlight=False)
        console.print(f"Locale:  {files.locale_manifest}", highlight=False)
        console.print(f"Installer: {files.installer_manifest}", highlight=False)
        print_rule(console)
        console.print()
        console.print("[green]Version manifest:[/green]")
        console.print(generate_version_manifest(manifest_id, version), markup=False)

        outputs.set("manifest_dir", files.manifest_dir)
        outputs.set("manifest_id", manifest_id)
        outputs.set("version_manifest", files.version_manifest)
        outputs.set("locale_manifest", files.locale_manifest)
        outputs.set("installer_manifest", files.installer_manifest)
