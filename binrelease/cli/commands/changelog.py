"""``binrelease extract-changelog`` / ``validate-changelog``.

Both read ``CHANGELOG_PATH`` and look for the section of ``VERSION``,
headed ``## vX.Y.Z`` or ``## X.Y.Z``.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from binrelease.cli.common import open_step, reported_errors, require
from binrelease.core.changelog import extract_changelog_section, validate_changelog_entry
from binrelease.core.errors import ChangelogError, ConfigurationError

console = Console()


def _read_changelog(path: str) -> str:
    if not Path(path).exists():
        raise ConfigurationError(f"changelog not found: {path}")
    return Path(path).read_text(encoding="utf-8")


def extract_changelog_cmd() -> None:
    """Write the notes for ``VERSION`` to ``OUTPUT_PATH``."""
    with reported_errors():
        settings, _, outputs = open_step()
        version = require(settings.version, "VERSION environment variable is required")
        content = _read_changelog(settings.changelog_path)
        notes = extract_changelog_section(content, version)

        Path(settings.output_path).write_text(notes, encoding="utf-8")
        console.print(
            f"[green]Extracted[/green] release notes for v{version} to {settings.output_path}"
        )
        outputs.set("version", version)
        outputs.set("release_notes_file", settings.output_path)
        outputs.set_multiline("release_notes", notes)


def validate_changelog_cmd() -> None:
    """Fail unless the changelog has an entry for ``VERSION``."""
    with reported_errors():
        settings, _, outputs = open_step()
        version = require(settings.version, "VERSION environment variable is required")
        content = _read_changelog(settings.changelog_path)

        if not validate_changelog_entry(content, version):
            raise ChangelogError(
                f"No changelog entry found for version {version}. "
                f"Expected header like '## v{version}' or '## {version}'"
            )
        console.print(f"[green]Changelog validated:[/green] found entry for v{version}")
        outputs.set("version", version)
        outputs.set("valid", "true")
