"""``binrelease generate-checksums`` and ``binrelease verify-checksum``."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from binrelease.cli.common import open_step, reported_errors, require
from binrelease.core.checksum import detect_type_from_filename, verify_checksum
from binrelease.core.checksum import generate_checksums as write_checksums
from binrelease.core.errors import ConfigurationError

console = Console()


def generate_checksums_cmd() -> None:
    """Write a sidecar for each algorithm in ``CHECKSUM`` next to ``ARTIFACT_PATH``."""
    with reported_errors():
        settings, _, outputs = open_step()
        artifact_path = require(settings.artifact_path, "ARTIFACT_PATH is required")
        if not Path(artifact_path).exists():
            raise ConfigurationError(f"artifact not found: {artifact_path}")

        checksums = write_checksums(artifact_path, settings.checksum)
        for algorithm, digest in checksums.present().items():
            console.print(f"[green]{algorithm.label}:[/green] {digest}", highlight=False)
            outputs.set(algorithm.value, digest)


def verify_checksum_cmd() -> None:
    """Check ``ARTIFACT_PATH`` against the sidecar named by ``CHECKSUM_FILE``."""
    with reported_errors():
        settings, _, outputs = open_step()
        artifact_path = require(settings.artifact_path, "ARTIFACT_PATH is required")
        checksum_file = require(settings.checksum_file, "CHECKSUM_FILE is required")

        digest = verify_checksum(artifact_path, checksum_file)
        algorithm = detect_type_from_filename(checksum_file)
        console.print(
            f"[green]Checksum verified:[/green] {Path(artifact_path).name} "
            f"({algorithm.label} {digest})",
            highlight=False,
        )
        outputs.set("verified", "true")
        outputs.set(algorithm.value, digest)
