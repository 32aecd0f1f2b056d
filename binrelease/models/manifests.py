"""Package-manager manifest configuration records.

These are the typed inputs to the text renderers in ``binrelease.packaging``.
The orchestration layer builds them from ``ReleaseSettings``; renderers never
read settings or the environment themselves.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESCRIPTION_SUFFIX = "built with binrelease"


def default_description(name: str) -> str:
    """Fallback package description when none is configured."""
    return f"{name} - {DEFAULT_DESCRIPTION_SUFFIX}"


class PackageMetadata(BaseModel):
    """Descriptive metadata shared by the nfpm-built Linux packages."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    maintainer: str = "Unknown <unknown@example.com>"
    homepage: str = ""
    license: str = ""
    vendor: str = ""
    depends: list[str] = Field(default_factory=list)
    recommends: list[str] = Field(default_factory=list)
    suggests: list[str] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)
    replaces: list[str] = Field(default_factory=list)
    provides: list[str] = Field(default_factory=list)
    contents: list[str] = Field(default_factory=list)  # "src:dst" pairs
    section: str = "utils"
    priority: str = "optional"
    group: str = "Applications/System"
    release: str = ""
    summary: str = ""


class FormulaConfig(BaseModel):
    """Inputs for a Homebrew formula."""

    model_config = ConfigDict(frozen=True)

    formula_class: str
    binary_name: str
    version: str
    description: str
    homepage: str = ""
    license: str = ""
    macos_arm64_url: str = ""
    macos_arm64_sha256: str = ""
    macos_x64_url: str = ""
    macos_x64_sha256: str = ""
    linux_arm64_url: str = ""
    linux_arm64_sha256: str = ""
    linux_x64_url: str = ""
    linux_x64_sha256: str = ""


class PkgbuildConfig(BaseModel):
    """Inputs for an AUR PKGBUILD and its .SRCINFO."""

    model_config = ConfigDict(frozen=True)

    pkgname: str
    pkgver: str
    pkgdesc: str
    binary_name: str
    url: str = ""
    license: str = "MIT"
    maintainer: str = ""
    source_url: str = ""
    source_sha256: str = ""
    depends: list[str] = Field(default_factory=list)
    makedepends: list[str] = Field(default_factory=lambda: ["cargo"])
    optdepends: list[str] = Field(default_factory=list)
    provides: list[str] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)


class WingetLocaleConfig(BaseModel):
    """Inputs for the Winget defaultLocale manifest."""

    model_config = ConfigDict(frozen=True)

    package_id: str
    version: str
    publisher: str
    name: str
    description: str
    homepage: str = ""
    license: str = "MIT"
    license_url: str = ""
    copyright: str = ""
    tags: list[str] = Field(default_factory=list)


class WingetInstallerConfig(BaseModel):
    """Inputs for the Winget installer manifest."""

    model_config = ConfigDict(frozen=True)

    package_id: str
    version: str
    x64_url: str = ""
    x64_sha256: str = ""
    arm64_url: str = ""
    arm64_sha256: str = ""
