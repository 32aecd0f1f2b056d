"""Arch User Repository PKGBUILD and .SRCINFO rendering."""

from __future__ import annotations

from pathlib import Path

from binrelease.models.manifests import PkgbuildConfig

ARRAY_FIELDS = ("depends", "makedepends", "optdepends", "provides", "conflicts")


def _pkgbuild_array(key: str, items: list[str]) -> str:
    if not items:
        return ""
    quoted = " ".join(f"'{item}'" for item in items)
    return f"{key}=({quoted})\n"


def generate_pkgbuild(config: PkgbuildConfig) -> str:
    """Render a PKGBUILD that builds the crate from its source tarball."""
    pkgbuild = ""
    if config.maintainer:
        pkgbuild += f"# Maintainer: {config.maintainer}\n"

    pkgbuild += f"pkgname={config.pkgname}\n"
    pkgbuild += f"pkgver={config.pkgver}\n"
    pkgbuild += "pkgrel=1\n"
    pkgbuild += f'pkgdesc="{config.pkgdesc}"\n'
    pkgbuild += "arch=('x86_64' 'aarch64')\n"
    if config.url:
        pkgbuild += f'url="{config.url}"\n'
    pkgbuild += f"license=('{config.license}')\n"

    for key in ARRAY_FIELDS:
        pkgbuild += _pkgbuild_array(key, getattr(config, key))

    if config.source_url:
        pkgbuild += f'source=("{config.source_url}")\n'
        pkgbuild += f"sha256sums=('{config.source_sha256 or 'SKIP'}')\n"

    pkgbuild += (
        "\nbuild() {\n"
        '  cd "$srcdir/$pkgname-$pkgver"\n'
        "  cargo build --release --locked\n"
        "}\n"
        "\npackage() {\n"
        '  cd "$srcdir/$pkgname-$pkgver"\n'
        f'  install -Dm755 "target/release/{config.binary_name}" '
        f'"$pkgdir/usr/bin/{config.binary_name}"\n'
        '  install -Dm644 LICENSE* -t "$pkgdir/usr/share/licenses/$pkgname/" '
        "2>/dev/null || true\n"
        '  install -Dm644 README.md "$pkgdir/usr/share/doc/$pkgname/README.md" '
        "2>/dev/null || true\n"
        "}\n"
    )
    return pkgbuild


def generate_srcinfo(config: PkgbuildConfig) -> str:
    """Render the ``.SRCINFO`` metadata matching ``generate_pkgbuild``."""
    srcinfo = f"pkgbase = {config.pkgname}\n"
    srcinfo += f"\tpkgdesc = {config.pkgdesc}\n"
    srcinfo += f"\tpkgver = {config.pkgver}\n"
    srcinfo += "\tpkgrel = 1\n"
    if config.url:
        srcinfo += f"\turl = {config.url}\n"
    srcinfo += "\tarch = x86_64\n"
    srcinfo += "\tarch = aarch64\n"
    srcinfo += f"\tlicense = {config.license}\n"

    for key in ARRAY_FIELDS:
        for item in getattr(config, key):
            srcinfo += f"\t{key} = {item}\n"

    if config.source_url:
        srcinfo += f"\tsource = {config.source_url}\n"
        srcinfo += f"\tsha256sums = {config.source_sha256 or 'SKIP'}\n"

    srcinfo += f"\npkgname = {config.pkgname}\n"
    return srcinfo


def write_aur_files(config: PkgbuildConfig, output_dir: Path | str) -> tuple[Path, Path]:
    """Write ``PKGBUILD`` and ``.SRCINFO``; return their paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    pkgbuild_path = output_dir / "PKGBUILD"
    srcinfo_path = output_dir / ".SRCINFO"
    pkgbuild_path.write_text(generate_pkgbuild(config), encoding="utf-8")
    srcinfo_path.write_text(generate_srcinfo(config), encoding="utf-8")
    return pkgbuild_path, srcinfo_path
