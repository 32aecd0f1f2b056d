"""Tests for PKGBUILD and .SRCINFO rendering."""

from __future__ import annotations

from pathlib import Path

from binrelease.models.manifests import PkgbuildConfig
from binrelease.packaging.aur import generate_pkgbuild, generate_srcinfo, write_aur_files


def _config(**overrides) -> PkgbuildConfig:
    base = dict(pkgname="myapp", pkgver="1.2.3", pkgdesc="A tool", binary_name="myapp")
    base.update(overrides)
    return PkgbuildConfig(**base)


class TestPkgbuild:
    def test_minimal(self):
        pkgbuild = generate_pkgbuild(_config())
        assert pkgbuild.startswith("pkgname=myapp\npkgver=1.2.3\npkgrel=1\n")
        assert "arch=('x86_64' 'aarch64')\n" in pkgbuild
        assert "license=('MIT')\n" in pkgbuild
        assert "makedepends=('cargo')\n" in pkgbuild
        assert "source=" not in pkgbuild
        assert "# Maintainer" not in pkgbuild
        assert '"target/release/myapp" "$pkgdir/usr/bin/myapp"' in pkgbuild

    def test_maintainer_and_arrays(self):
        pkgbuild = generate_pkgbuild(
            _config(
                maintainer="Jo <jo@example.com>",
                depends=["gcc-libs", "openssl"],
                conflicts=["myapp-git"],
            )
        )
        assert pkgbuild.startswith("# Maintainer: Jo <jo@example.com>\n")
        assert "depends=('gcc-libs' 'openssl')\n" in pkgbuild
        assert "conflicts=('myapp-git')\n" in pkgbuild

    def test_source_without_sha_skips(self):
        pkgbuild = generate_pkgbuild(_config(source_url="https://x/v1.2.3.tar.gz"))
        assert 'source=("https://x/v1.2.3.tar.gz")\n' in pkgbuild
        assert "sha256sums=('SKIP')\n" in pkgbuild

    def test_source_with_sha(self):
        pkgbuild = generate_pkgbuild(
            _config(source_url="https://x/v1.2.3.tar.gz", source_sha256="abc")
        )
        assert "sha256sums=('abc')\n" in pkgbuild


class TestSrcinfo:
    def test_fields(self):
        srcinfo = generate_srcinfo(
            _config(url="https://example.com", depends=["openssl"], source_url="https://x/s.tgz")
        )
        assert srcinfo.startswith("pkgbase = myapp\n\tpkgdesc = A tool\n")
        assert "\turl = https://example.com\n" in srcinfo
        assert "\tarch = x86_64\n\tarch = aarch64\n" in srcinfo
        assert "\tmakedepends = cargo\n" in srcinfo
        assert "\tdepends = openssl\n" in srcinfo
        assert "\tsha256sums = SKIP\n" in srcinfo
        assert srcinfo.endswith("\npkgname = myapp\n")


def test_write_aur_files(tmp_dir: Path):
    pkgbuild, srcinfo = write_aur_files(_config(), tmp_dir / "aur")
    assert pkgbuild.name == "PKGBUILD"
    assert srcinfo.name == ".SRCINFO"
    assert pkgbuild.read_text().startswith("pkgname=myapp")
