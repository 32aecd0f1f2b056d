"""Fetch published release assets for installer smoke tests.

Assets are downloaded with curl from
``https://github.com/<repository>/releases/download/v<version>/`` into a
destination directory.  When a checksum sidecar (``.sha256``, ``.sha512``
or ``.b2``, tried in that order) is published next to an asset, the
download is verified against it before it is used.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from binrelease.core.checksum import verify_checksum
from binrelease.core.errors import CommandError, ConfigurationError, ReleaseError
from binrelease.core.process import CommandRunner
from binrelease.core.tools import ensure_curl
from binrelease.models.artifacts import WindowsArtifacts
from binrelease.models.checksums import ChecksumAlgorithm
from binrelease.models.platform import PackageFormat
from binrelease.packaging.nfpm import package_artifact_name

logger = logging.getLogger(__name__)

WINDOWS_TARGET = "x86_64-pc-windows-msvc"
EXTRACT_DIR = "extracted"


def release_download_url(repository: str, version: str) -> str:
    """Base URL of the assets attached to release ``v<version>``."""
    if not repository:
        raise ConfigurationError("GITHUB_REPOSITORY not set")
    return f"https://github.com/{repository}/releases/download/v{version}"


def release_asset_name(kind: str, binary_name: str, version: str, arch: str = "") -> str:
    """File name of a published asset.

    *kind* is ``deb``, ``rpm``, ``windows-zip`` or ``windows-msi``.
    """
    if kind in (PackageFormat.DEB.value, PackageFormat.RPM.value):
        return package_artifact_name(kind, binary_name, version, arch)
    if kind == "windows-zip":
        return f"{binary_name}-{version}-{WINDOWS_TARGET}.zip"
    if kind == "windows-msi":
        return f"{binary_name}-{version}-{WINDOWS_TARGET}.msi"
    raise ConfigurationError(f"unknown format: {kind}")


# ---------------------------------------------------------------------------
# curl
# ---------------------------------------------------------------------------


def curl_download(runner: CommandRunner, url: str, output: Path | str, token: str = "") -> bool:
    """Download *url* to *output*; ``False`` when curl fails."""
    ensure_curl(runner)
    args = ["-fsSL"]
    if token:
        args += ["-H", f"Authorization: Bearer {token}"]
    args += [url, "-o", str(output)]
    try:
        runner.run("curl", args)
    except CommandError as exc:
        logger.debug("download of %s failed: %s", url, exc.stderr)
        return False
    return True


def download_file(runner: CommandRunner, url: str, output: Path | str, token: str = "") -> None:
    if not curl_download(runner, url, output, token):
        raise ReleaseError(f"failed to download {url}")


def download_checksum(
    runner: CommandRunner,
    base_url: str,
    artifact_name: str,
    dest: Path | str = ".",
    token: str = "",
) -> Path | None:
    """Fetch the first sidecar published for *artifact_name*, if any."""
    for algorithm in ChecksumAlgorithm:
        name = artifact_name + algorithm.extension
        path = Path(dest) / name
        if curl_download(runner, f"{base_url}/{name}", path, token):
            return path
    return None


def _fetch_verified(
    runner: CommandRunner, base_url: str, name: str, dest: Path, token: str
) -> Path:
    path = dest / name
    download_file(runner, f"{base_url}/{name}", path, token)
    checksum_file = download_checksum(runner, base_url, name, dest, token)
    if checksum_file is None:
        logger.warning("No checksum file available for %s", name)
    else:
        verify_checksum(path, checksum_file)
        logger.info("Checksum verified: %s", checksum_file.name)
    return path


# ---------------------------------------------------------------------------
# Release assets
# ---------------------------------------------------------------------------


def download_artifact(
    runner: CommandRunner,
    *,
    repository: str,
    binary_name: str,
    version: str,
    arch: str,
    kind: str,
    token: str = "",
    dest: Path | str = ".",
) -> Path:
    """Download one release asset and verify it against its sidecar.

    Raises
    ------
    ConfigurationError
        If *repository* is empty or *kind* is unknown.
    ReleaseError
        If the asset cannot be downloaded.
    ChecksumMismatchError
        If a published sidecar does not match the download.
    """
    base_url = release_download_url(repository, version)
    name = release_asset_name(kind, binary_name, version, arch)
    logger.info("Downloading artifact: %s", name)
    return _fetch_verified(runner, base_url, name, Path(dest), token)


def extract_zip(
    runner: CommandRunner, archive: Path | str, dest: Path | str, system: str | None = None
) -> None:
    """Unpack *archive* with PowerShell on Windows, ``unzip`` elsewhere."""
    try:
        if (system or platform.system()).lower() == "windows":
            runner.run(
                "powershell",
                [
                    "-Command",
                    f"Expand-Archive -Path '{archive}' -DestinationPath '{dest}' -Force",
                ],
            )
        else:
            runner.run("unzip", ["-q", str(archive), "-d", str(dest)])
    except CommandError as exc:
        raise ReleaseError(f"failed to extract archive: {exc.stderr}") from exc


def download_windows_artifacts(
    runner: CommandRunner,
    *,
    repository: str,
    binary_name: str,
    version: str,
    token: str = "",
    dest: Path | str = ".",
    system: str | None = None,
) -> WindowsArtifacts:
    """Download the Windows zip and MSI, then unpack the zip.

    The executable is expected at ``<dest>/extracted/<binary_name>.exe``.
    """
    dest = Path(dest)
    base_url = release_download_url(repository, version)
    logger.info("Downloading Windows artifacts")

    zip_path = _fetch_verified(
        runner, base_url, release_asset_name("windows-zip", binary_name, version), dest, token
    )
    msi_path = _fetch_verified(
        runner, base_url, release_asset_name("windows-msi", binary_name, version), dest, token
    )

    extract_dir = dest / EXTRACT_DIR
    extract_zip(runner, zip_path, extract_dir, system)
    binary_path = extract_dir / f"{binary_name}.exe"
    if not binary_path.exists():
        raise ReleaseError(f"binary not found in archive: {binary_path}")

    return WindowsArtifacts(binary_path=str(binary_path), msi_path=str(msi_path))
