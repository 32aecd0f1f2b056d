"""Tests for artifact collection."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from binrelease.core.checksum import hash_bytes
from binrelease.core.errors import ConfigurationError
from binrelease.models.platform import ShortPlatform
from binrelease.release.collect import (
    checksums_manifest,
    collect_artifacts,
    find_artifacts,
    output_collection,
)


@pytest.fixture
def artifacts(tmp_dir: Path) -> Path:
    directory = tmp_dir / "artifacts"
    directory.mkdir()
    for name in [
        "myapp-1.2.3-x86_64-unknown-linux-gnu.tar.gz",
        "myapp-1.2.3-aarch64-apple-darwin.tar.gz",
        "myapp-1.2.3-x86_64-pc-windows-msvc.zip",
        "myapp_1.2.3_amd64.deb",
        "myapp-1.2.3-x86_64-unknown-linux-gnu.tar.gz.sha256",
        "notes.txt",
    ]:
        (directory / name).write_bytes(name.encode())
    return directory


def test_find_artifacts_filters_and_sorts(artifacts: Path):
    assert find_artifacts(str(artifacts)) == [
        "myapp-1.2.3-aarch64-apple-darwin.tar.gz",
        "myapp-1.2.3-x86_64-pc-windows-msvc.zip",
        "myapp-1.2.3-x86_64-unknown-linux-gnu.tar.gz",
        "myapp_1.2.3_amd64.deb",
    ]


def test_missing_directory(tmp_dir: Path):
    with pytest.raises(ConfigurationError, match="artifacts directory not found"):
        find_artifacts(str(tmp_dir / "nope"))


def test_empty_directory(tmp_dir: Path):
    with pytest.raises(ConfigurationError, match="no artifacts found"):
        find_artifacts(str(tmp_dir))


def test_collect_hashes_and_classifies(artifacts: Path):
    collection = collect_artifacts(str(artifacts), "https://dl.example.com/v1.2.3")
    by_name = {a.artifact: a for a in collection}
    linux = by_name["myapp-1.2.3-x86_64-unknown-linux-gnu.tar.gz"]
    assert linux.platform is ShortPlatform.LINUX_X64
    assert linux.sha256 == hash_bytes(linux.artifact.encode())
    assert linux.url == f"https://dl.example.com/v1.2.3/{linux.artifact}"
    assert by_name["myapp_1.2.3_amd64.deb"].platform is ShortPlatform.LINUX_DEB


def test_collect_without_base_url(artifacts: Path):
    assert all(a.url == "" for a in collect_artifacts(str(artifacts)))


def test_output_collection(artifacts: Path, outputs):
    collection = collect_artifacts(str(artifacts), "https://x")
    path = output_collection(outputs, str(artifacts), collection)

    assert path == artifacts / "SHA256SUMS"
    assert path.read_text() == checksums_manifest(collection)
    assert outputs.values["checksums_file"] == str(path)
    assert outputs.values["macos_arm64_artifact"] == "myapp-1.2.3-aarch64-apple-darwin.tar.gz"
    assert outputs.values["windows_x64_url"] == "https://x/myapp-1.2.3-x86_64-pc-windows-msvc.zip"
    assert "linux_arm64_sha256" not in outputs.values
    assert "linux_deb_sha256" not in outputs.values
    assert [a["platform"] for a in json.loads(outputs.values["collection"])] == [
        "macos-arm64",
        "windows-x64",
        "linux-x64",
        "linux-deb",
    ]


def test_checksums_manifest_format(artifacts: Path):
    collection = collect_artifacts(str(artifacts))
    first = checksums_manifest(collection).splitlines()[0]
    assert first == f"{collection[0].sha256}  {collection[0].artifact}"
