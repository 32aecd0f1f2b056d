"""Software bill of materials generation with cargo-sbom."""

from __future__ import annotations

import logging
from pathlib import Path

from binrelease.core.errors import CommandError, ReleaseError
from binrelease.core.process import CommandRunner
from binrelease.models.artifacts import SbomFiles

logger = logging.getLogger(__name__)

# (label, cargo-sbom --output-format, file suffix)
SBOM_FORMATS = (
    ("SPDX", "spdx_json_2_3", "spdx.json"),
    ("CycloneDX", "cyclone_dx_json_1_4", "cdx.json"),
)


def generate_sbom_files(
    runner: CommandRunner,
    output_dir: Path | str,
    binary_name: str,
    version: str,
) -> SbomFiles:
    """Write ``<name>-<version>.spdx.json`` and ``.cdx.json`` into *output_dir*."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths: list[str] = []
    for label, output_format, suffix in SBOM_FORMATS:
        logger.info("Generating %s SBOM...", label)
        try:
            result = runner.run("cargo", ["sbom", "--output-format", output_format])
        except CommandError as exc:
            raise ReleaseError(
                f"cargo-sbom {label} generation failed: {exc.stderr}"
            ) from exc
        path = output_dir / f"{binary_name}-{version}.{suffix}"
        path.write_bytes(result.stdout)
        paths.append(str(path))

    return SbomFiles(
        binary_name=binary_name,
        version=version,
        spdx_path=paths[0],
        cyclonedx_path=paths[1],
    )
