"""Keep-a-changelog style release note extraction."""

from __future__ import annotations

import re

from binrelease.core.errors import ChangelogError

NEXT_VERSION_HEADER = re.compile(r"^## v?\d+\.\d+\.\d+")


def _is_version_header(line: str, version: str) -> bool:
    return line.startswith(f"## v{version}") or line.startswith(f"## {version}")


def extract_changelog_section(content: str, version: str) -> str:
    """Return the section for *version*, header line included.

    The section runs until the next ``## X.Y.Z`` (or ``## vX.Y.Z``) header
    or the end of the file.

    Raises
    ------
    ChangelogError
        If the version has no header or its section is blank.
    """
    lines = content.splitlines()
    start = next(
        (i for i, line in enumerate(lines) if _is_version_header(line, version)),
        None,
    )
    if start is None:
        raise ChangelogError(f"version {version} not found in changelog")

    end = len(lines)
    for i in range(start + 1, len(lines)):
        if NEXT_VERSION_HEADER.match(lines[i]):
            end = i
            break

    notes = "\n".join(lines[start:end])
    if not notes.strip():
        raise ChangelogError(f"no content found for version {version}")
    return notes


def validate_changelog_entry(content: str, version: str) -> bool:
    """``True`` if the changelog has a header for *version*."""
    return any(_is_version_header(line, version) for line in content.splitlines())
