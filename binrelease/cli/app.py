"""Main Typer application: imports and registers all CLI commands.

Entry point: ``binrelease`` (configured via pyproject.toml scripts).

Commands take no options; every input comes from the environment (see
``binrelease.config``), so a composite action can call
``binrelease <command>`` with its ``with:`` values exported.
"""

from __future__ import annotations

import typer

from binrelease.cli.commands.changelog import extract_changelog_cmd, validate_changelog_cmd
from binrelease.cli.commands.checksums import generate_checksums_cmd, verify_checksum_cmd
from binrelease.cli.commands.manifests import (
    generate_aur_cmd,
    generate_homebrew_cmd,
    generate_winget_cmd,
)
from binrelease.cli.commands.provenance import generate_sbom_cmd, sign_artifact_cmd
from binrelease.cli.commands.publish import collect_artifacts_cmd, format_release_cmd
from binrelease.cli.commands.release import (
    release_cmd,
    release_linux_apk_cmd,
    release_linux_cmd,
    release_linux_deb_cmd,
    release_linux_rpm_cmd,
    release_macos_cmd,
    release_macos_dmg_cmd,
    release_windows_cmd,
    release_windows_msi_cmd,
)
from binrelease.cli.commands.smoke import (
    smoke_test_deb_cmd,
    smoke_test_rpm_cmd,
    smoke_test_windows_cmd,
)
from binrelease.cli.commands.version import (
    get_release_version_cmd,
    get_version_cmd,
    validate_version_cmd,
)

app = typer.Typer(
    name="binrelease",
    help="binrelease: build, package, sign and publish Rust binaries from CI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Changelog and versions
app.command(name="extract-changelog", help="Extract release notes for VERSION.")(extract_changelog_cmd)
app.command(name="validate-changelog", help="Check the changelog has an entry for VERSION.")(
    validate_changelog_cmd
)
app.command(name="validate-version", help="Check the release tag matches the expected version.")(
    validate_version_cmd
)
app.command(name="get-version", help="Print the version from Cargo.toml.")(get_version_cmd)
app.command(name="get-release-version", help="Resolve the version of the latest release.")(
    get_release_version_cmd
)

# Build and package
app.command(name="release", help="Build a release for TARGET, picking the platform.")(release_cmd)
app.command(name="release-linux", help="Build a Linux binary and optional tarball.")(
    release_linux_cmd
)
app.command(name="release-linux-deb", help="Build a .deb package with nfpm.")(release_linux_deb_cmd)
app.command(name="release-linux-rpm", help="Build a .rpm package with nfpm.")(release_linux_rpm_cmd)
app.command(name="release-linux-apk", help="Build an .apk package with nfpm.")(release_linux_apk_cmd)
app.command(name="release-macos", help="Build a macOS binary and optional tarball.")(
    release_macos_cmd
)
app.command(name="release-macos-dmg", help="Build a macOS .dmg disk image.")(release_macos_dmg_cmd)
app.command(name="release-windows", help="Build a Windows binary and optional zip.")(
    release_windows_cmd
)
app.command(name="release-windows-msi", help="Build a Windows .msi with cargo-wix.")(
    release_windows_msi_cmd
)

# Integrity and provenance
app.command(name="generate-checksums", help="Write checksum sidecars for ARTIFACT_PATH.")(
    generate_checksums_cmd
)
app.command(name="verify-checksum", help="Verify ARTIFACT_PATH against CHECKSUM_FILE.")(
    verify_checksum_cmd
)
app.command(name="sign-artifact", help="Sign ARTIFACT_PATH with Sigstore cosign.")(sign_artifact_cmd)
app.command(name="generate-sbom", help="Generate SPDX and CycloneDX SBOMs.")(generate_sbom_cmd)

# Distribution
app.command(name="collect-artifacts", help="Hash and classify built artifacts.")(
    collect_artifacts_cmd
)
app.command(name="format-release", help="Assemble the GitHub release body.")(format_release_cmd)
app.command(name="generate-homebrew", help="Generate a Homebrew formula.")(generate_homebrew_cmd)
app.command(name="generate-aur", help="Generate an AUR PKGBUILD and .SRCINFO.")(generate_aur_cmd)
app.command(name="generate-winget", help="Generate Winget manifests.")(generate_winget_cmd)

# Installer smoke tests
app.command(name="test-deb", help="Install a .deb and check the binary version.")(
    smoke_test_deb_cmd
)
app.command(name="test-rpm", help="Install an .rpm and check the binary version.")(
    smoke_test_rpm_cmd
)
app.command(name="test-windows", help="Check the Windows binary and MSI versions.")(
    smoke_test_windows_cmd
)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
