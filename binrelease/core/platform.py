"""Platform classifier.

Two independent concerns:

* Target triple to package architecture token, per package format.  These
  converters fail with ``UnsupportedTargetError`` on unknown triples.
* Artifact filename to a short platform id or a display label.  These
  classifiers are total and fall back to ``unknown`` / ``Other``.

Classification cascades are ordered ``(predicate, result)`` tables: the
first matching rule wins, so table order is significant.
"""

from __future__ import annotations

import re
from typing import Callable

from binrelease.core.errors import UnsupportedTargetError
from binrelease.models.platform import (
    DisplayPlatform,
    PackageFormat,
    ShortPlatform,
    TargetOS,
)

# ---------------------------------------------------------------------------
# Target triple -> package architecture
# ---------------------------------------------------------------------------

_EXACT_ARCH: dict[PackageFormat, dict[str, str]] = {
    PackageFormat.DEB: {
        "x86_64-unknown-linux-gnu": "amd64",
        "x86_64-unknown-linux-musl": "amd64",
        "aarch64-unknown-linux-gnu": "arm64",
        "aarch64-unknown-linux-musl": "arm64",
        "armv7-unknown-linux-gnueabihf": "armhf",
        "i686-unknown-linux-gnu": "i386",
        "i686-unknown-linux-musl": "i386",
    },
    PackageFormat.RPM: {
        "x86_64-unknown-linux-gnu": "x86_64",
        "x86_64-unknown-linux-musl": "x86_64",
        "aarch64-unknown-linux-gnu": "aarch64",
        "aarch64-unknown-linux-musl": "aarch64",
        "armv7-unknown-linux-gnueabihf": "armv7hl",
        "i686-unknown-linux-gnu": "i686",
        "i686-unknown-linux-musl": "i686",
    },
    PackageFormat.APK: {
        "x86_64-unknown-linux-gnu": "x86_64",
        "x86_64-unknown-linux-musl": "x86_64",
        "aarch64-unknown-linux-gnu": "aarch64",
        "aarch64-unknown-linux-musl": "aarch64",
        "armv7-unknown-linux-gnueabihf": "armv7",
        "armv7-unknown-linux-musleabihf": "armv7",
        "i686-unknown-linux-gnu": "x86",
        "i686-unknown-linux-musl": "x86",
    },
}

# Substring fallback, in priority order.
_FALLBACK_ARCH: dict[PackageFormat, tuple[tuple[str, str], ...]] = {
    PackageFormat.DEB: (
        ("x86_64", "amd64"),
        ("aarch64", "arm64"),
        ("armv7", "armhf"),
        ("i686", "i386"),
    ),
    PackageFormat.RPM: (
        ("x86_64", "x86_64"),
        ("aarch64", "aarch64"),
        ("armv7", "armv7hl"),
        ("i686", "i686"),
    ),
    PackageFormat.APK: (
        ("x86_64", "x86_64"),
        ("aarch64", "aarch64"),
        ("armv7", "armv7"),
        ("i686", "x86"),
    ),
}


def target_to_package_arch(target: str, package_format: PackageFormat | str) -> str:
    """Map a Rust target triple to the architecture token of *package_format*.

    Parameters
    ----------
    target:
        Target triple, e.g. ``x86_64-unknown-linux-gnu``.
    package_format:
        ``deb``, ``rpm`` or ``apk``.

    Raises
    ------
    UnsupportedTargetError
        If neither the exact table nor the substring fallback matches.
    """
    package_format = PackageFormat(package_format)
    exact = _EXACT_ARCH[package_format].get(target)
    if exact is not None:
        return exact
    for needle, arch in _FALLBACK_ARCH[package_format]:
        if needle in target:
            return arch
    raise UnsupportedTargetError(target, package_format.value)


def target_to_deb_arch(target: str) -> str:
    return target_to_package_arch(target, PackageFormat.DEB)


def target_to_rpm_arch(target: str) -> str:
    return target_to_package_arch(target, PackageFormat.RPM)


def target_to_apk_arch(target: str) -> str:
    return target_to_package_arch(target, PackageFormat.APK)


def platform_for_target(target: str) -> TargetOS:
    """Return the OS family a target triple builds for."""
    if "linux" in target:
        return TargetOS.LINUX
    if "darwin" in target or "apple" in target:
        return TargetOS.MACOS
    if "windows" in target:
        return TargetOS.WINDOWS
    raise UnsupportedTargetError(target, "release")


# ---------------------------------------------------------------------------
# Filename -> short platform id
# ---------------------------------------------------------------------------

Rule = Callable[[str], bool]


def _pattern(expr: str) -> Rule:
    compiled = re.compile(expr)
    return lambda name: compiled.search(name) is not None


def _suffix(ext: str) -> Rule:
    return lambda name: name.endswith(ext)


def _contains(*needles: str) -> Rule:
    return lambda name: any(n in name for n in needles)


_SHORT_RULES: tuple[tuple[Rule, ShortPlatform], ...] = (
    (
        _pattern(r"darwin.*arm64|aarch64.*apple|apple.*aarch64|macos.*arm64"),
        ShortPlatform.MACOS_ARM64,
    ),
    (
        _pattern(
            r"darwin.*x86_64|x86_64.*apple|apple.*x86_64|macos.*x64|macos.*x86_64"
        ),
        ShortPlatform.MACOS_X64,
    ),
    (
        _pattern(r"linux.*aarch64|aarch64.*linux|linux.*arm64"),
        ShortPlatform.LINUX_ARM64,
    ),
    (
        _pattern(r"linux.*x86_64|x86_64.*linux|linux.*x64|linux.*amd64"),
        ShortPlatform.LINUX_X64,
    ),
    (
        _pattern(r"windows.*x86_64|x86_64.*windows|windows.*x64|pc-windows.*x86_64"),
        ShortPlatform.WINDOWS_X64,
    ),
    (
        _pattern(r"windows.*aarch64|aarch64.*windows|windows.*arm64"),
        ShortPlatform.WINDOWS_ARM64,
    ),
    (_suffix(".deb"), ShortPlatform.LINUX_DEB),
    (_suffix(".rpm"), ShortPlatform.LINUX_RPM),
    (_suffix(".apk"), ShortPlatform.LINUX_APK),
    (_suffix(".dmg"), ShortPlatform.MACOS_DMG),
    (_suffix(".msi"), ShortPlatform.WINDOWS_MSI),
)


def detect_platform_short(filename: str) -> ShortPlatform:
    """Classify an artifact filename into a short platform id.

    Case-insensitive. Returns ``ShortPlatform.UNKNOWN`` when nothing matches.
    """
    name = filename.lower()
    for matches, platform in _SHORT_RULES:
        if matches(name):
            return platform
    return ShortPlatform.UNKNOWN


# ---------------------------------------------------------------------------
# Filename -> display label
# ---------------------------------------------------------------------------

_is_arm64 = _contains("arm64", "aarch64")

_MACOS_RULES: tuple[tuple[Rule, DisplayPlatform], ...] = (
    (_is_arm64, DisplayPlatform.MACOS_APPLE_SILICON),
)

_WINDOWS_RULES: tuple[tuple[Rule, DisplayPlatform], ...] = (
    (_is_arm64, DisplayPlatform.WINDOWS_ARM64),
)

_LINUX_MUSL_RULES: tuple[tuple[Rule, DisplayPlatform], ...] = (
    (_is_arm64, DisplayPlatform.LINUX_ARM64_MUSL),
)

_LINUX_RULES: tuple[tuple[Rule, DisplayPlatform], ...] = (
    (_is_arm64, DisplayPlatform.LINUX_ARM64),
    (_contains("armv7"), DisplayPlatform.LINUX_ARMV7),
)

_DISPLAY_EXTENSIONS: tuple[tuple[Rule, DisplayPlatform], ...] = (
    (_suffix(".deb"), DisplayPlatform.DEBIAN),
    (_suffix(".rpm"), DisplayPlatform.RHEL),
    (_suffix(".apk"), DisplayPlatform.ALPINE),
    (_suffix(".dmg"), DisplayPlatform.MACOS_INSTALLER),
    (_suffix(".msi"), DisplayPlatform.WINDOWS_INSTALLER),
    (_suffix(".pkg.tar.zst"), DisplayPlatform.ARCH_LINUX),
)


def _first_match(
    name: str,
    rules: tuple[tuple[Rule, DisplayPlatform], ...],
    default: DisplayPlatform,
) -> DisplayPlatform:
    for matches, label in rules:
        if matches(name):
            return label
    return default


def detect_platform_display(filename: str) -> DisplayPlatform:
    """Classify an artifact filename into a human-readable platform label.

    The OS family is decided first, then the architecture within it.
    Installer formats are recognised by extension only when no OS token is
    present.  Returns ``DisplayPlatform.OTHER`` when nothing matches.
    """
    name = filename.lower()

    if _contains("darwin", "macos", "osx")(name):
        return _first_match(name, _MACOS_RULES, DisplayPlatform.MACOS_INTEL)
    if _contains("windows", "win")(name):
        return _first_match(name, _WINDOWS_RULES, DisplayPlatform.WINDOWS_X64)
    if "linux" in name:
        if "musl" in name:
            return _first_match(
                name, _LINUX_MUSL_RULES, DisplayPlatform.LINUX_X64_MUSL
            )
        return _first_match(name, _LINUX_RULES, DisplayPlatform.LINUX_X64)

    return _first_match(name, _DISPLAY_EXTENSIONS, DisplayPlatform.OTHER)
