"""Pipeline configuration, read from the environment.

binrelease runs as a step in a CI job, so every setting arrives as an
environment variable (or from a ``.env`` file when run locally).  Field
names match the variable names in lowercase, without a prefix::

    export TARGET=x86_64-unknown-linux-musl
    export CHECKSUM=sha256,sha512
    export ARCHIVE=true

When invoked from a GitHub composite action, the ``with:`` values arrive as
``INPUT_*`` variables instead.  ``map_action_inputs`` translates those into
field values and ``load_settings`` gives them precedence over plain
environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_list(raw: str | None) -> list[str]:
    """Split a comma-separated value into trimmed, non-empty items."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


class ReleaseSettings(BaseSettings):
    """Every knob a release step can be given.

    Empty environment values are treated as unset so that an action input
    left blank falls back to the default below.  Some defaults depend on
    the command being run (default target, package release number, the
    artifacts directory); those fields default to ``""`` here and the
    command supplies its own fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Build inputs
    version: str = ""
    target: str = ""
    binary_name: str = ""
    package: str = ""
    manifest_path: str = "Cargo.toml"
    pre_build: str = ""
    binary_path: str = ""
    features: str = ""
    profile: str = "release"
    target_rustflags: str = ""
    rustflags: str = ""
    checksum: str = "sha256"
    archive_include: str = ""
    skip_build: bool = False
    locked: bool = False
    no_default_features: bool = False
    use_zigbuild: bool = False
    archive: bool = False

    # Changelog and version validation
    changelog_path: str = "CHANGELOG.md"
    output_path: str = "release_notes.md"
    tag: str = ""
    expected_version: str = ""
    next_release_version: str = ""
    validate_cargo_toml: bool = False

    # Linux packages (nfpm)
    pkg_description: str = ""
    pkg_maintainer: str = "Unknown <unknown@example.com>"
    pkg_homepage: str = ""
    pkg_license: str = ""
    pkg_vendor: str = ""
    pkg_depends: str = ""
    pkg_recommends: str = ""
    pkg_suggests: str = ""
    pkg_conflicts: str = ""
    pkg_replaces: str = ""
    pkg_provides: str = ""
    pkg_contents: str = ""
    pkg_section: str = "utils"
    pkg_priority: str = "optional"
    pkg_group: str = "Applications/System"
    pkg_release: str = ""
    pkg_summary: str = ""

    # SBOM
    sbom_output_dir: str = "target/sbom"

    # Homebrew
    homebrew_formula_class: str = ""
    homebrew_macos_arm64_url: str = ""
    homebrew_macos_arm64_sha256: str = ""
    homebrew_macos_x64_url: str = ""
    homebrew_macos_x64_sha256: str = ""
    homebrew_linux_arm64_url: str = ""
    homebrew_linux_arm64_sha256: str = ""
    homebrew_linux_x64_url: str = ""
    homebrew_linux_x64_sha256: str = ""
    homebrew_output_dir: str = "target/homebrew"

    # Artifacts, signing and release notes
    artifact_path: str = ""
    artifacts_dir: str = ""
    base_url: str = ""
    release_notes_file: str = "release_notes.md"
    include_checksums: bool = True
    include_signatures: bool = True
    homebrew_tap: str = ""
    aur_package: str = ""
    winget_id: str = ""
    checksum_file: str = ""

    # Installer smoke tests
    download_from_release: bool = False
    arch: str = ""
    msi_path: str = ""
    msi_checksum_file: str = ""
    userprofile: str = "C:/Users/runneradmin"

    # AUR
    aur_package_name: str = ""
    aur_maintainer: str = ""
    aur_source_url: str = ""
    aur_source_sha256: str = ""
    aur_makedepends: str = "cargo"
    aur_optdepends: str = ""
    aur_output_dir: str = "target/aur"

    # Winget
    winget_publisher: str = ""
    winget_publisher_id: str = ""
    winget_package_id: str = ""
    winget_license_url: str = ""
    winget_copyright: str = ""
    winget_tags: str = ""
    winget_x64_url: str = ""
    winget_x64_sha256: str = ""
    winget_arm64_url: str = ""
    winget_arm64_sha256: str = ""
    winget_output_dir: str = "target/winget"

    # Runner context
    github_output: str = ""
    github_ref_name: str = ""
    github_repository: str = ""
    github_token: str = ""
    gh_token: str = ""

    # Observability
    log_level: str = "INFO"

    @property
    def token(self) -> str:
        """GitHub API token, ``GITHUB_TOKEN`` preferred over ``GH_TOKEN``."""
        return self.github_token or self.gh_token

    @property
    def release_tag(self) -> str:
        """Tag under validation: ``TAG``, else the ref that triggered the run."""
        return self.tag or self.github_ref_name

    @property
    def expected_release_version(self) -> str:
        return self.expected_version or self.next_release_version


# ---------------------------------------------------------------------------
# GitHub Action input mapping
# ---------------------------------------------------------------------------

# INPUT_<NAME> -> settings field, copied when non-empty.
ACTION_INPUTS: dict[str, str] = {
    "INPUT_TARGET": "target",
    "INPUT_BINARY_NAME": "binary_name",
    "INPUT_PACKAGE": "package",
    "INPUT_MANIFEST": "manifest_path",
    "INPUT_PRE_BUILD": "pre_build",
    "INPUT_BINARY_PATH": "binary_path",
    "INPUT_FEATURES": "features",
    "INPUT_PROFILE": "profile",
    "INPUT_RUSTFLAGS": "target_rustflags",
    "INPUT_CHECKSUM": "checksum",
    "INPUT_INCLUDE": "archive_include",
    "INPUT_CHANGELOG": "changelog_path",
    "INPUT_NOTES_OUTPUT": "output_path",
    "INPUT_TAG": "tag",
    "INPUT_EXPECTED_VERSION": "expected_version",
    "INPUT_PKG_DESCRIPTION": "pkg_description",
    "INPUT_PKG_MAINTAINER": "pkg_maintainer",
    "INPUT_PKG_HOMEPAGE": "pkg_homepage",
    "INPUT_PKG_LICENSE": "pkg_license",
    "INPUT_PKG_VENDOR": "pkg_vendor",
    "INPUT_PKG_DEPENDS": "pkg_depends",
    "INPUT_PKG_RECOMMENDS": "pkg_recommends",
    "INPUT_PKG_SUGGESTS": "pkg_suggests",
    "INPUT_PKG_CONFLICTS": "pkg_conflicts",
    "INPUT_PKG_REPLACES": "pkg_replaces",
    "INPUT_PKG_PROVIDES": "pkg_provides",
    "INPUT_PKG_CONTENTS": "pkg_contents",
    "INPUT_PKG_SECTION": "pkg_section",
    "INPUT_PKG_PRIORITY": "pkg_priority",
    "INPUT_PKG_GROUP": "pkg_group",
    "INPUT_PKG_RELEASE": "pkg_release",
    "INPUT_SBOM_DIR": "sbom_output_dir",
    "INPUT_BREW_CLASS": "homebrew_formula_class",
    "INPUT_BREW_MACOS_ARM64_URL": "homebrew_macos_arm64_url",
    "INPUT_BREW_MACOS_ARM64_SHA256": "homebrew_macos_arm64_sha256",
    "INPUT_BREW_MACOS_X64_URL": "homebrew_macos_x64_url",
    "INPUT_BREW_MACOS_X64_SHA256": "homebrew_macos_x64_sha256",
    "INPUT_BREW_LINUX_ARM64_URL": "homebrew_linux_arm64_url",
    "INPUT_BREW_LINUX_ARM64_SHA256": "homebrew_linux_arm64_sha256",
    "INPUT_BREW_LINUX_X64_URL": "homebrew_linux_x64_url",
    "INPUT_BREW_LINUX_X64_SHA256": "homebrew_linux_x64_sha256",
    "INPUT_BREW_DIR": "homebrew_output_dir",
    "INPUT_ARTIFACT": "artifact_path",
    "INPUT_ARTIFACTS_DIR": "artifacts_dir",
    "INPUT_BASE_URL": "base_url",
    "INPUT_NOTES_FILE": "release_notes_file",
    "INPUT_INCLUDE_CHECKSUMS": "include_checksums",
    "INPUT_INCLUDE_SIGNATURES": "include_signatures",
    "INPUT_HOMEBREW_TAP": "homebrew_tap",
    "INPUT_AUR_PACKAGE": "aur_package",
    "INPUT_WINGET_ID": "winget_id",
    "INPUT_AUR_NAME": "aur_package_name",
    "INPUT_AUR_MAINTAINER": "aur_maintainer",
    "INPUT_AUR_SOURCE_URL": "aur_source_url",
    "INPUT_AUR_SOURCE_SHA256": "aur_source_sha256",
    "INPUT_AUR_MAKEDEPENDS": "aur_makedepends",
    "INPUT_AUR_OPTDEPENDS": "aur_optdepends",
    "INPUT_AUR_DIR": "aur_output_dir",
    "INPUT_WINGET_PUBLISHER": "winget_publisher",
    "INPUT_WINGET_PUBLISHER_ID": "winget_publisher_id",
    "INPUT_WINGET_PACKAGE_ID": "winget_package_id",
    "INPUT_WINGET_LICENSE_URL": "winget_license_url",
    "INPUT_WINGET_COPYRIGHT": "winget_copyright",
    "INPUT_WINGET_TAGS": "winget_tags",
    "INPUT_WINGET_X64_URL": "winget_x64_url",
    "INPUT_WINGET_X64_SHA256": "winget_x64_sha256",
    "INPUT_WINGET_ARM64_URL": "winget_arm64_url",
    "INPUT_WINGET_ARM64_SHA256": "winget_arm64_sha256",
    "INPUT_WINGET_DIR": "winget_output_dir",
    "INPUT_CHECKSUM_FILE": "checksum_file",
    "INPUT_MSI_PATH": "msi_path",
    "INPUT_MSI_CHECKSUM_FILE": "msi_checksum_file",
    "INPUT_ARCH": "arch",
}

# INPUT_<NAME> -> boolean field, set only when the input is exactly "true".
ACTION_FLAGS: dict[str, str] = {
    "INPUT_SKIP_BUILD": "skip_build",
    "INPUT_LOCKED": "locked",
    "INPUT_NO_DEFAULT_FEATURES": "no_default_features",
    "INPUT_USE_ZIGBUILD": "use_zigbuild",
    "INPUT_ARCHIVE": "archive",
    "INPUT_VALIDATE_CARGO_TOML": "validate_cargo_toml",
    "INPUT_DOWNLOAD_FROM_RELEASE": "download_from_release",
}


def map_action_inputs(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Translate ``INPUT_*`` variables into ``ReleaseSettings`` field values.

    Parameters
    ----------
    environ:
        Environment to read; defaults to ``os.environ``.

    Returns
    -------
    dict[str, str]
        Field name to raw value, containing only the inputs that were set.
        ``version`` is taken from ``INPUT_VERSION``, or derived from a
        ``v``-prefixed ``GITHUB_REF_NAME`` when the input is blank.
    """
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}

    version = env.get("INPUT_VERSION", "")
    if not version:
        ref_name = env.get("GITHUB_REF_NAME", "")
        if ref_name.startswith("v"):
            version = ref_name[1:]
    if version:
        values["version"] = version

    for input_key, field in ACTION_INPUTS.items():
        raw = env.get(input_key, "")
        if raw:
            values[field] = raw

    for input_key, field in ACTION_FLAGS.items():
        if env.get(input_key) == "true":
            values[field] = "true"

    return values


def load_settings(environ: Mapping[str, str] | None = None) -> ReleaseSettings:
    """Build settings from the environment, action inputs taking precedence."""
    return ReleaseSettings(**map_action_inputs(environ))
