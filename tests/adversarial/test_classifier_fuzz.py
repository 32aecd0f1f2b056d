"""Adversarial tests: platform classifiers fed arbitrary filenames and triples.

Filename classifiers must be total: whatever a build job uploads, they
return a member of their vocabulary and never raise.  Target converters
either return a known architecture token or raise UnsupportedTargetError.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from binrelease.core.errors import UnsupportedTargetError
from binrelease.core.platform import (
    _EXACT_ARCH,
    _FALLBACK_ARCH,
    detect_platform_display,
    detect_platform_short,
    platform_for_target,
    target_to_package_arch,
)
from binrelease.models.platform import DisplayPlatform, PackageFormat, ShortPlatform, TargetOS

TOKENS = [
    "myapp", "-", "_", ".", "1.2.3", "x86_64", "aarch64", "arm64", "armv7", "i686",
    "apple", "darwin", "macos", "osx", "linux", "gnu", "musl", "windows", "win",
    "pc", "msvc", "unknown", "amd64", "x64", ".tar.gz", ".zip", ".deb", ".rpm",
    ".apk", ".dmg", ".msi", ".pkg.tar.zst", ".exe", "MACOS", "Linux",
]

token_names = st.lists(st.sampled_from(TOKENS), max_size=10).map("".join)
filenames = st.one_of(st.text(max_size=80), token_names)


class TestFilenameClassifiersAreTotal:
    @settings(max_examples=300)
    @given(name=filenames)
    def test_short(self, name: str):
        assert isinstance(detect_platform_short(name), ShortPlatform)

    @settings(max_examples=300)
    @given(name=filenames)
    def test_display(self, name: str):
        assert isinstance(detect_platform_display(name), DisplayPlatform)

    @given(name=token_names)
    def test_case_insensitive(self, name: str):
        assert detect_platform_short(name.upper()) == detect_platform_short(name.lower())
        assert detect_platform_display(name.upper()) == detect_platform_display(name.lower())

    @pytest.mark.parametrize("name", ["", ".", "README", "SHA256SUMS", "myapp.sig"])
    def test_unclassifiable(self, name: str):
        assert detect_platform_short(name) is ShortPlatform.UNKNOWN
        assert detect_platform_display(name) is DisplayPlatform.OTHER


class TestTargetConverters:
    @settings(max_examples=300)
    @given(
        target=st.lists(st.sampled_from(TOKENS), max_size=6).map("-".join),
        package_format=st.sampled_from(list(PackageFormat)),
    )
    def test_known_token_or_unsupported(self, target: str, package_format: PackageFormat):
        known = set(_EXACT_ARCH[package_format].values()) | {
            arch for _, arch in _FALLBACK_ARCH[package_format]
        }
        try:
            assert target_to_package_arch(target, package_format) in known
        except UnsupportedTargetError as exc:
            assert exc.target == target
            assert exc.package_format == package_format.value

    @given(target=st.text(max_size=60))
    def test_platform_for_target(self, target: str):
        try:
            assert isinstance(platform_for_target(target), TargetOS)
        except UnsupportedTargetError:
            assert not any(word in target for word in ("linux", "darwin", "apple", "windows"))
