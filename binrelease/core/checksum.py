"""Checksum engine: digests, sidecar files and verification.

Sidecar format (one algorithm per file)::

    <lowercase-hex-digest><two spaces><basename>\\n

The sidecar's *filename* selects the algorithm used to re-verify it
(``.sha512`` is SHA-512, ``.b2`` is BLAKE2b-512, anything else SHA-256);
its content is never sniffed.  Only the first token of the first line is
read back, so the recorded basename is informational.

This module never logs, retries or exits: failures are raised to the caller.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Callable

from binrelease.core.errors import (
    ChecksumFileEmptyError,
    ChecksumFileNotFoundError,
    ChecksumMismatchError,
    UnsupportedChecksumTypeError,
)
from binrelease.models.checksums import ChecksumAlgorithm, ChecksumSet

_HASHERS: dict[ChecksumAlgorithm, Callable[[bytes], Any]] = {
    ChecksumAlgorithm.SHA256: hashlib.sha256,
    ChecksumAlgorithm.SHA512: hashlib.sha512,
    ChecksumAlgorithm.B2: hashlib.blake2b,  # 64-byte digest by default
}


def coerce_algorithm(value: ChecksumAlgorithm | str) -> ChecksumAlgorithm:
    """Accept an enum member or its token; reject anything else."""
    if isinstance(value, ChecksumAlgorithm):
        return value
    try:
        return ChecksumAlgorithm(value)
    except ValueError:
        raise UnsupportedChecksumTypeError(str(value)) from None


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def hash_bytes(
    data: bytes, algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.SHA256
) -> str:
    """Return the lowercase hex digest of *data*."""
    return _HASHERS[coerce_algorithm(algorithm)](data).hexdigest()


def hash_file(path: Path | str, algorithm: ChecksumAlgorithm | str) -> str:
    """Return the lowercase hex digest of a file's full contents.

    The whole file is read into memory. Raises ``OSError`` if it cannot be
    read.
    """
    algorithm = coerce_algorithm(algorithm)
    return hash_bytes(Path(path).read_bytes(), algorithm)


def sha256_file(path: Path | str) -> str:
    """Shorthand for ``hash_file(path, sha256)``."""
    return hash_file(path, ChecksumAlgorithm.SHA256)


# ---------------------------------------------------------------------------
# Sidecar files
# ---------------------------------------------------------------------------


def sidecar_path(artifact_path: Path | str, algorithm: ChecksumAlgorithm) -> Path:
    """``<artifact>.<ext>`` next to the artifact."""
    artifact_path = Path(artifact_path)
    return artifact_path.with_name(artifact_path.name + algorithm.extension)


def format_sidecar_line(digest: str, basename: str) -> str:
    """One sidecar line: digest, two spaces, basename, newline."""
    return f"{digest}  {basename}\n"


def write_sidecar(path: Path | str, digest: str, basename: str) -> Path:
    """Write a single-line sidecar file and return its path.

    Basenames decoded from non-UTF-8 file names (surrogate escapes) are
    written back as their original bytes.
    """
    path = Path(path)
    line = format_sidecar_line(digest, basename).encode("utf-8", errors="surrogateescape")
    path.write_bytes(line)
    return path


def parse_sidecar(path: Path | str) -> str:
    """Return the digest recorded in a sidecar file.

    Raises ``ChecksumFileEmptyError`` when the file is blank.  Bytes that
    are not UTF-8 are replaced rather than rejected, so a corrupted sidecar
    fails verification as a mismatch.
    """
    content = Path(path).read_bytes().decode("utf-8", errors="replace").strip()
    if not content:
        raise ChecksumFileEmptyError(str(path))
    first_line = content.splitlines()[0]
    return first_line.split()[0]


def detect_type_from_filename(name: Path | str) -> ChecksumAlgorithm:
    """Infer the digest algorithm from a sidecar filename suffix."""
    name = str(name)
    if name.endswith(ChecksumAlgorithm.SHA512.extension):
        return ChecksumAlgorithm.SHA512
    if name.endswith(ChecksumAlgorithm.B2.extension):
        return ChecksumAlgorithm.B2
    return ChecksumAlgorithm.SHA256


# ---------------------------------------------------------------------------
# Generation and verification
# ---------------------------------------------------------------------------


def parse_checksum_types(raw: str | None) -> list[ChecksumAlgorithm]:
    """Parse a comma-delimited algorithm selection.

    Unknown tokens are ignored; a blank selection means SHA-256 only.
    The result is in canonical order regardless of input order.
    """
    tokens = {t.strip().lower() for t in (raw or "").split(",") if t.strip()}
    if not tokens:
        return [ChecksumAlgorithm.SHA256]
    return [a for a in ChecksumAlgorithm if a.value in tokens]


def generate_checksums(
    path: Path | str, requested_types: str | None = ""
) -> ChecksumSet:
    """Hash *path* with each requested algorithm and write its sidecar.

    Returns the digests computed; unrequested slots stay empty.
    """
    path = Path(path)
    digests: dict[str, str] = {}
    for algorithm in parse_checksum_types(requested_types):
        digest = hash_file(path, algorithm)
        write_sidecar(sidecar_path(path, algorithm), digest, path.name)
        digests[algorithm.value] = digest
    return ChecksumSet(**digests)


def verify_checksum(artifact_path: Path | str, checksum_file: Path | str) -> str:
    """Verify *artifact_path* against a sidecar file.

    Returns the verified digest. Raises ``ChecksumFileNotFoundError`` if the
    sidecar is missing and ``ChecksumMismatchError`` on any difference.
    """
    checksum_file = Path(checksum_file)
    if not checksum_file.exists():
        raise ChecksumFileNotFoundError(str(checksum_file))

    expected = parse_sidecar(checksum_file)
    algorithm = detect_type_from_filename(checksum_file.name)
    actual = hash_file(artifact_path, algorithm)

    if actual != expected:
        raise ChecksumMismatchError(expected, actual)
    return actual
