"""Checksum models: the algorithm vocabulary and the per-artifact digest record."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class ChecksumAlgorithm(str, Enum):
    """Digest algorithms understood by the checksum engine.

    The value doubles as the configuration token and the sidecar extension.
    """

    SHA256 = "sha256"
    SHA512 = "sha512"
    B2 = "b2"  # BLAKE2b-512

    @property
    def extension(self) -> str:
        """Sidecar file suffix, including the leading dot."""
        return f".{self.value}"

    @property
    def hex_length(self) -> int:
        return _HEX_LENGTHS[self]

    @property
    def label(self) -> str:
        """Short human label used in terminal output."""
        return _LABELS[self]


_HEX_LENGTHS: dict[ChecksumAlgorithm, int] = {
    ChecksumAlgorithm.SHA256: 64,
    ChecksumAlgorithm.SHA512: 128,
    ChecksumAlgorithm.B2: 128,
}

_LABELS: dict[ChecksumAlgorithm, str] = {
    ChecksumAlgorithm.SHA256: "SHA256",
    ChecksumAlgorithm.SHA512: "SHA512",
    ChecksumAlgorithm.B2: "BLAKE2",
}

_LOWER_HEX = re.compile(r"^[0-9a-f]*$")


class ChecksumSet(BaseModel):
    """Digests computed for one artifact.

    Each slot is either empty (not requested) or a lowercase hex digest of
    the exact length for its algorithm.
    """

    model_config = ConfigDict(frozen=True)

    sha256: str = ""
    sha512: str = ""
    b2: str = ""

    @model_validator(mode="after")
    def _check_digests(self) -> ChecksumSet:
        for algorithm in ChecksumAlgorithm:
            digest = self.get(algorithm)
            if not digest:
                continue
            if len(digest) != algorithm.hex_length or not _LOWER_HEX.match(digest):
                raise ValueError(
                    f"{algorithm.value} digest must be {algorithm.hex_length} "
                    f"lowercase hex characters, got {digest!r}"
                )
        return self

    def get(self, algorithm: ChecksumAlgorithm) -> str:
        """Return the digest stored for *algorithm* (``""`` if absent)."""
        return getattr(self, algorithm.value)

    def present(self) -> dict[ChecksumAlgorithm, str]:
        """Return only the computed digests, in canonical algorithm order."""
        return {a: self.get(a) for a in ChecksumAlgorithm if self.get(a)}
