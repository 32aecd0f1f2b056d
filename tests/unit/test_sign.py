"""Tests for cosign signing."""

from __future__ import annotations

from pathlib import Path

import pytest

from binrelease.core.errors import ConfigurationError, ReleaseError
from binrelease.release.sign import sign_artifact, signature_paths


@pytest.fixture
def artifact(tmp_dir: Path) -> str:
    path = tmp_dir / "myapp.tar.gz"
    path.write_bytes(b"archive")
    return str(path)


def _cosign_writes(*suffixes: str):
    def effect(args, cwd):
        artifact = args[-1]
        for suffix in suffixes:
            Path(artifact + suffix).write_text("x")

    return effect


def test_signature_paths():
    assert signature_paths("a.zip") == ("a.zip.sig", "a.zip.pem", "a.zip.sigstore.json")


def test_sign_reports_produced_files(runner, outputs, artifact: str):
    runner.effects["cosign sign-blob"] = _cosign_writes(".sig", ".pem", ".sigstore.json")
    files = sign_artifact(runner, "cosign", artifact, outputs)
    args = runner.find("cosign sign-blob")["args"]
    assert args[:2] == ["sign-blob", "--yes"]
    assert args[-1] == artifact
    assert files.bundle_path == f"{artifact}.sigstore.json"
    assert outputs.values["signature_path"] == f"{artifact}.sig"
    assert outputs.values["artifact_path"] == artifact


def test_missing_outputs_not_reported(runner, outputs, artifact: str):
    runner.effects["cosign sign-blob"] = _cosign_writes(".sigstore.json")
    files = sign_artifact(runner, "cosign", artifact, outputs)
    assert files.signature_path is None
    assert files.certificate_path is None
    assert "signature_path" not in outputs.values
    assert "bundle_path" in outputs.values


def test_uses_given_executable(runner, outputs, artifact: str):
    sign_artifact(runner, "/usr/local/bin/cosign", artifact, outputs)
    assert runner.calls[0]["program"] == "/usr/local/bin/cosign"


def test_requires_artifact(runner, outputs):
    with pytest.raises(ConfigurationError, match="ARTIFACT_PATH is required"):
        sign_artifact(runner, "cosign", "", outputs)


def test_artifact_must_exist(runner, outputs, tmp_dir: Path):
    with pytest.raises(ConfigurationError, match="artifact not found"):
        sign_artifact(runner, "cosign", str(tmp_dir / "missing"), outputs)


def test_cosign_failure(runner, outputs, artifact: str):
    runner.failures["cosign"] = "no OIDC token"
    with pytest.raises(ReleaseError, match="cosign signing failed"):
        sign_artifact(runner, "cosign", artifact, outputs)
