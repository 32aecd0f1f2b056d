"""Markdown body for a GitHub release.

Sections, each omitted when it would be empty: changelog notes,
installation commands, build asset table, SBOM list, concatenated
checksums, and signature verification instructions.
"""

from __future__ import annotations

import re
from pathlib import Path

from binrelease.core.platform import detect_platform_display
from binrelease.models.artifacts import ReleaseAsset

NON_ASSET = re.compile(r"\.(sha256|sha512|b2|sig|pem|sigstore\.json|spdx\.json|cdx\.json)$")
SBOM_FILE = re.compile(r"\.(spdx|cdx)\.json$")
CHECKSUM_FILE = re.compile(r"\.(sha256|sha512|b2)$")
SIGNATURE_FILE = re.compile(r"\.(sig|pem|sigstore\.json)$")


def format_size(size: int) -> str:
    """Human-readable size: ``B`` below 1 KiB, then ``KB``, then ``MB``."""
    if size < 1024:
        return f"{size} B"
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    return f"{kb / 1024:.1f} MB"


def _names(directory: Path, pattern: re.Pattern[str]) -> list[str]:
    return sorted(e.name for e in directory.iterdir() if pattern.search(e.name))


def list_release_assets(directory: Path | str) -> list[ReleaseAsset]:
    """Regular files in *directory* that are downloadable assets, by name."""
    directory = Path(directory)
    assets = [
        ReleaseAsset(
            name=entry.name,
            size=format_size(entry.stat().st_size),
            platform=detect_platform_display(entry.name),
        )
        for entry in directory.iterdir()
        if entry.is_file() and not NON_ASSET.search(entry.name)
    ]
    return sorted(assets, key=lambda a: a.name)


def format_assets_table(assets: list[ReleaseAsset]) -> str:
    table = "| Platform | File | Size |\n|----------|------|------|\n"
    for asset in assets:
        table += f"| {asset.platform.value} | `{asset.name}` | {asset.size} |\n"
    return table


def format_installation_section(
    homebrew_tap: str = "", aur_package: str = "", winget_id: str = ""
) -> str:
    blocks = []
    if homebrew_tap:
        blocks.append(f"**Homebrew:**\n```bash\nbrew install {homebrew_tap}\n```\n\n")
    if aur_package:
        blocks.append(f"**Arch Linux (AUR):**\n```bash\nyay -S {aur_package}\n```\n\n")
    if winget_id:
        blocks.append(
            f"**Windows (winget):**\n```powershell\nwinget install {winget_id}\n```\n\n"
        )
    if not blocks:
        return ""
    return "## Installation\n\n" + "".join(blocks)


def format_sbom_section(directory: Path | str) -> str:
    names = _names(Path(directory), SBOM_FILE)
    if not names:
        return ""
    section = "\n## SBOM\n\n"
    for name in names:
        fmt = "SPDX" if name.endswith(".spdx.json") else "CycloneDX"
        section += f" * `{name}`: in the {fmt} format\n"
    return section + "\n"


def collect_checksums(directory: Path | str) -> str:
    """Concatenate the trimmed contents of every sidecar, one per line."""
    directory = Path(directory)
    lines = []
    for name in _names(directory, CHECKSUM_FILE):
        content = (directory / name).read_text(encoding="utf-8").strip()
        if content:
            lines.append(content + "\n")
    return "".join(lines)


def format_signatures_section() -> str:
    return (
        "\n## Signatures\n\n"
        "All release artifacts are signed with [Sigstore](https://www.sigstore.dev/). "
        "Verify with:\n\n"
        "```bash\n"
        "cosign verify-blob --bundle <artifact>.sigstore.json <artifact>\n"
        "```\n"
    )


def format_release_body(
    artifacts_dir: Path | str,
    *,
    release_notes_file: Path | str | None = None,
    include_checksums: bool = True,
    include_signatures: bool = True,
    homebrew_tap: str = "",
    aur_package: str = "",
    winget_id: str = "",
) -> str:
    """Assemble the release body.

    Parameters
    ----------
    artifacts_dir:
        Directory of release files; asset, SBOM, checksum and signature
        sections are skipped when it does not exist.
    release_notes_file:
        Extracted changelog section placed at the top, when present.
    """
    body = ""

    if release_notes_file is not None and Path(release_notes_file).exists():
        notes = Path(release_notes_file).read_text(encoding="utf-8").strip()
        if notes:
            body += notes + "\n\n"

    body += format_installation_section(homebrew_tap, aur_package, winget_id)

    directory = Path(artifacts_dir)
    if not directory.exists():
        return body

    assets = list_release_assets(directory)
    if assets:
        body += "## Build Assets\n\n" + format_assets_table(assets)

    body += format_sbom_section(directory)

    if include_checksums:
        checksums = collect_checksums(directory)
        if checksums:
            body += "\n## Checksums\n\n```\n" + checksums + "```\n"

    if include_signatures and _names(directory, SIGNATURE_FILE):
        body += format_signatures_section()

    return body
