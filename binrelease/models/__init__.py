"""binrelease data models. All Pydantic v2, all frozen (immutable)."""

from binrelease.models.artifacts import (
    BuildSummary,
    CargoInfo,
    CollectedArtifact,
    ReleaseAsset,
    ReleaseResult,
    SbomFiles,
    SignatureFiles,
    WindowsArtifacts,
)
from binrelease.models.checksums import ChecksumAlgorithm, ChecksumSet
from binrelease.models.manifests import (
    FormulaConfig,
    PackageMetadata,
    PkgbuildConfig,
    WingetInstallerConfig,
    WingetLocaleConfig,
)
from binrelease.models.platform import (
    BINARY_PLATFORMS,
    DisplayPlatform,
    PackageFormat,
    ShortPlatform,
    TargetOS,
)

__all__ = [
    # checksums
    "ChecksumAlgorithm",
    "ChecksumSet",
    # platform
    "PackageFormat",
    "ShortPlatform",
    "DisplayPlatform",
    "TargetOS",
    "BINARY_PLATFORMS",
    # artifacts
    "CargoInfo",
    "CollectedArtifact",
    "ReleaseAsset",
    "BuildSummary",
    "ReleaseResult",
    "SignatureFiles",
    "SbomFiles",
    "WindowsArtifacts",
    # manifests
    "PackageMetadata",
    "FormulaConfig",
    "PkgbuildConfig",
    "WingetLocaleConfig",
    "WingetInstallerConfig",
]
