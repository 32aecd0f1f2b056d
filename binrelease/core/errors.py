"""Error taxonomy for binrelease.

Every user-facing failure derives from ``ReleaseError``; the CLI turns it
into an ``ERROR:`` line and exit code 1.  File-system failures are not
wrapped and propagate as ``OSError``.
"""

from __future__ import annotations


class ReleaseError(RuntimeError):
    """Base class for failures reported to the pipeline operator."""


class ConfigurationError(ReleaseError):
    """A required input is missing or inconsistent."""


class ChecksumError(ReleaseError):
    """Base class for checksum engine failures."""


class ChecksumFileEmptyError(ChecksumError):
    """A sidecar checksum file has no content after trimming."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        super().__init__("checksum file is empty" + (f": {path}" if path else ""))


class ChecksumFileNotFoundError(ChecksumError):
    """The sidecar checksum file to verify against does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"checksum file not found: {path}")


class ChecksumMismatchError(ChecksumError):
    """The recomputed digest differs from the expected one."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"checksum mismatch: expected {expected}, got {actual}")


class UnsupportedChecksumTypeError(ChecksumError):
    """An algorithm token outside the supported vocabulary was requested."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"unsupported checksum type: {token}")


class UnsupportedTargetError(ReleaseError):
    """A target triple cannot be mapped for the requested package format."""

    def __init__(self, target: str, package_format: str) -> None:
        self.target = target
        self.package_format = package_format
        super().__init__(f"unsupported target for .{package_format}: {target}")


class CommandError(ReleaseError):
    """An external program could not be spawned or exited non-zero."""

    def __init__(self, command: str, stderr: str) -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(f"command failed: {command}\n{stderr}")


class ChangelogError(ReleaseError):
    """The changelog is missing or has no entry for the requested version."""


class VersionError(ReleaseError):
    """A version or tag does not satisfy the release rules."""
