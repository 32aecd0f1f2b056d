"""Gather built artifacts from a directory for downstream manifests."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from binrelease.core.checksum import sha256_file
from binrelease.core.errors import ConfigurationError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.platform import detect_platform_short
from binrelease.models.artifacts import CollectedArtifact
from binrelease.models.platform import BINARY_PLATFORMS

logger = logging.getLogger(__name__)

DISTRIBUTABLE = re.compile(r"\.(tar\.gz|zip|dmg|msi|deb|rpm|apk)$")

CHECKSUMS_FILENAME = "SHA256SUMS"


def find_artifacts(artifacts_dir: str) -> list[str]:
    """Sorted names of the distributable files in *artifacts_dir*."""
    directory = Path(artifacts_dir)
    if not directory.exists():
        raise ConfigurationError(f"artifacts directory not found: {artifacts_dir}")
    names = sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and DISTRIBUTABLE.search(entry.name)
    )
    if not names:
        raise ConfigurationError(f"no artifacts found in {artifacts_dir}")
    return names


def collect_artifacts(artifacts_dir: str, base_url: str = "") -> list[CollectedArtifact]:
    """Hash and classify every distributable in *artifacts_dir*.

    Parameters
    ----------
    artifacts_dir:
        Directory holding the downloaded build outputs.
    base_url:
        Release download prefix; each artifact's ``url`` is
        ``<base_url>/<name>`` (empty when no prefix is given).
    """
    collection = []
    for name in find_artifacts(artifacts_dir):
        path = f"{artifacts_dir}/{name}"
        collection.append(
            CollectedArtifact(
                artifact=name,
                path=path,
                sha256=sha256_file(path),
                platform=detect_platform_short(name),
                url=f"{base_url}/{name}" if base_url else "",
            )
        )
    return collection


def collection_json(collection: list[CollectedArtifact]) -> str:
    return json.dumps([a.model_dump(mode="json") for a in collection], indent=2)


def checksums_manifest(collection: list[CollectedArtifact]) -> str:
    """``SHA256SUMS`` content: one ``<digest>  <name>`` line per artifact."""
    return "\n".join(f"{a.sha256}  {a.artifact}" for a in collection) + "\n"


def output_collection(
    outputs: ActionOutputs, artifacts_dir: str, collection: list[CollectedArtifact]
) -> Path:
    """Emit per-platform outputs and the JSON collection; write ``SHA256SUMS``.

    Per-platform outputs use the first artifact of each binary platform.
    """
    for platform in BINARY_PLATFORMS:
        match = next((a for a in collection if a.platform is platform), None)
        if match is None:
            continue
        prefix = platform.output_prefix
        outputs.set(f"{prefix}_sha256", match.sha256)
        outputs.set(f"{prefix}_url", match.url)
        outputs.set(f"{prefix}_artifact", match.artifact)

    outputs.set_multiline("collection", collection_json(collection))

    checksums_path = Path(f"{artifacts_dir}/{CHECKSUMS_FILENAME}")
    checksums_path.write_text(checksums_manifest(collection), encoding="utf-8")
    outputs.set("checksums_file", str(checksums_path))
    return checksums_path
