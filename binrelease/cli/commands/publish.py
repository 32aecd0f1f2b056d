"""``binrelease collect-artifacts`` and ``binrelease format-release``.

These run once per release, after the per-target build jobs have uploaded
their artifacts into a single directory.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from binrelease.cli.common import open_step, reported_errors, require
from binrelease.core.outputs import print_rule
from binrelease.release.collect import collect_artifacts, output_collection
from binrelease.release.format_release import format_release_body

console = Console()

DEFAULT_COLLECT_DIR = "artifacts"
DEFAULT_RELEASE_DIR = "release"


def collect_artifacts_cmd() -> None:
    """Hash and classify every distributable in ``ARTIFACTS_DIR``."""
    with reported_errors():
        settings, _, outputs = open_step()
        artifacts_dir = settings.artifacts_dir or DEFAULT_COLLECT_DIR
        console.print(f"[green]Collecting artifacts from:[/green] {artifacts_dir}")

        collection = collect_artifacts(artifacts_dir, settings.base_url)
        console.print(f"[green]Found:[/green] {len(collection)} artifacts")

        table = Table(title="Artifacts")
        table.add_column("Platform", style="cyan")
        table.add_column("Artifact")
        table.add_column("SHA256", style="dim")
        for artifact in collection:
            table.add_row(artifact.platform.value, artifact.artifact, artifact.sha256)
        console.print(table)

        checksums_path = output_collection(outputs, artifacts_dir, collection)
        console.print(f"[green]Checksums written to:[/green] {checksums_path}")


def format_release_cmd() -> None:
    """Assemble the GitHub release body for ``VERSION``."""
    with reported_errors():
        settings, _, outputs = open_step()
        version = require(settings.version, "VERSION is required")
        console.print(f"[green]Formatting release:[/green] v{version}")

        body = format_release_body(
            settings.artifacts_dir or DEFAULT_RELEASE_DIR,
            release_notes_file=settings.release_notes_file,
            include_checksums=settings.include_checksums,
            include_signatures=settings.include_signatures,
            homebrew_tap=settings.homebrew_tap,
            aur_package=settings.aur_package,
            winget_id=settings.winget_id,
        )

        console.print()
        console.print("[green]Release body:[/green]")
        print_rule(console)
        console.print(body, markup=False, highlight=False)
        print_rule(console)

        outputs.set("version", version)
        outputs.set_multiline("body", body)
