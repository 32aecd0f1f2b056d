"""Platform vocabularies: package formats, short ids and display labels.

All enums are ``str``-valued so they serialize to the exact tokens other
tooling (workflow outputs, release notes) depends on.
"""

from __future__ import annotations

from enum import Enum


class PackageFormat(str, Enum):
    """Linux package formats built through nfpm."""

    DEB = "deb"
    RPM = "rpm"
    APK = "apk"


class ShortPlatform(str, Enum):
    """Terse, machine-oriented platform id derived from an artifact filename."""

    MACOS_ARM64 = "macos-arm64"
    MACOS_X64 = "macos-x64"
    LINUX_ARM64 = "linux-arm64"
    LINUX_X64 = "linux-x64"
    WINDOWS_X64 = "windows-x64"
    WINDOWS_ARM64 = "windows-arm64"
    LINUX_DEB = "linux-deb"
    LINUX_RPM = "linux-rpm"
    LINUX_APK = "linux-apk"
    MACOS_DMG = "macos-dmg"
    WINDOWS_MSI = "windows-msi"
    UNKNOWN = "unknown"

    @property
    def output_prefix(self) -> str:
        """Prefix used for per-platform workflow output keys (``linux_x64``)."""
        return self.value.replace("-", "_")


class DisplayPlatform(str, Enum):
    """Human-readable platform label used in release-note tables."""

    MACOS_APPLE_SILICON = "macOS (Apple Silicon)"
    MACOS_INTEL = "macOS (Intel)"
    WINDOWS_ARM64 = "Windows (ARM64)"
    WINDOWS_X64 = "Windows (x64)"
    LINUX_ARM64_MUSL = "Linux (ARM64, musl)"
    LINUX_X64_MUSL = "Linux (x64, musl)"
    LINUX_ARM64 = "Linux (ARM64)"
    LINUX_ARMV7 = "Linux (ARMv7)"
    LINUX_X64 = "Linux (x64)"
    DEBIAN = "Debian/Ubuntu"
    RHEL = "RHEL/Fedora"
    ALPINE = "Alpine Linux"
    MACOS_INSTALLER = "macOS Installer"
    WINDOWS_INSTALLER = "Windows Installer"
    ARCH_LINUX = "Arch Linux"
    OTHER = "Other"


class TargetOS(str, Enum):
    """Operating system family a target triple builds for."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


# Short ids that identify a concrete OS/arch binary; these are the ones
# that get individual ``<prefix>_sha256`` style outputs.
BINARY_PLATFORMS: tuple[ShortPlatform, ...] = (
    ShortPlatform.MACOS_ARM64,
    ShortPlatform.MACOS_X64,
    ShortPlatform.LINUX_ARM64,
    ShortPlatform.LINUX_X64,
    ShortPlatform.WINDOWS_X64,
    ShortPlatform.WINDOWS_ARM64,
)
