"""Staging of files that go into release archives."""

from __future__ import annotations

import glob
import re
import shutil
from pathlib import Path

# Archives, sidecars, signatures and SBOMs never go into an archive.
NON_ARCHIVABLE = re.compile(
    r"\.(tar\.gz|zip|sha256|sha512|b2|sig|pem|sigstore\.json|spdx\.json|cdx\.json)$"
)


def list_archivable_files(directory: Path | str) -> list[str]:
    """Sorted names of the regular files in *directory* to put in an archive.

    A missing directory yields an empty list.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and not NON_ARCHIVABLE.search(entry.name)
    )


def copy_docs(dest: Path | str, root: Path | str = ".") -> list[Path]:
    """Copy ``LICENSE*`` and ``README.md`` from *root* into *dest*."""
    dest, root = Path(dest), Path(root)
    sources = sorted(p for p in root.glob("LICENSE*") if p.is_file())
    readme = root / "README.md"
    if readme.is_file():
        sources.append(readme)

    copied = []
    for src in sources:
        copied.append(Path(shutil.copy2(src, dest / src.name)))
    return copied


def copy_includes(
    dest: Path | str, patterns: list[str], root: Path | str = "."
) -> list[Path]:
    """Copy the files matching each glob pattern into *dest*.

    Patterns are resolved relative to *root*; directories are skipped.
    """
    dest, root = Path(dest), Path(root)
    copied = []
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, root_dir=root, recursive=True)):
            src = root / match
            if src.is_file():
                copied.append(Path(shutil.copy2(src, dest / src.name)))
    return copied
