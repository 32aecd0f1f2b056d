"""Keyless Sigstore signing of release artifacts with cosign."""

from __future__ import annotations

import logging
from pathlib import Path

from binrelease.core.errors import CommandError, ConfigurationError, ReleaseError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.process import CommandRunner
from binrelease.models.artifacts import SignatureFiles

logger = logging.getLogger(__name__)


def signature_paths(artifact_path: str) -> tuple[str, str, str]:
    """``.sig``, ``.pem`` and ``.sigstore.json`` paths next to the artifact."""
    return (
        f"{artifact_path}.sig",
        f"{artifact_path}.pem",
        f"{artifact_path}.sigstore.json",
    )


def sign_artifact(
    runner: CommandRunner,
    cosign: str,
    artifact_path: str,
    outputs: ActionOutputs,
) -> SignatureFiles:
    """Sign *artifact_path* with ``cosign sign-blob``.

    Only the files cosign actually produced are reported.
    """
    if not artifact_path:
        raise ConfigurationError("ARTIFACT_PATH is required")
    if not Path(artifact_path).exists():
        raise ConfigurationError(f"artifact not found: {artifact_path}")

    logger.info("Signing artifact: %s", artifact_path)
    sig_path, cert_path, bundle_path = signature_paths(artifact_path)
    try:
        runner.run(
            cosign,
            [
                "sign-blob",
                "--yes",
                "--output-signature",
                sig_path,
                "--output-certificate",
                cert_path,
                "--bundle",
                bundle_path,
                artifact_path,
            ],
        )
    except CommandError as exc:
        logger.error("cosign output:\n%s", exc.stderr)
        raise ReleaseError("cosign signing failed") from exc

    produced: dict[str, str | None] = {}
    for key, path in (
        ("signature_path", sig_path),
        ("certificate_path", cert_path),
        ("bundle_path", bundle_path),
    ):
        if Path(path).exists():
            outputs.set(key, path)
            produced[key] = path
        else:
            produced[key] = None
    outputs.set("artifact_path", artifact_path)

    return SignatureFiles(artifact_path=artifact_path, **produced)
