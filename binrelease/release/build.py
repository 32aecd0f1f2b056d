"""Cargo build invocation and build result reporting."""

from __future__ import annotations

import json
import logging

from binrelease.config import ReleaseSettings
from binrelease.core.errors import CommandError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.process import CommandRunner
from binrelease.core.tools import ensure_zigbuild
from binrelease.models.artifacts import BuildSummary
from binrelease.models.checksums import ChecksumAlgorithm, ChecksumSet

logger = logging.getLogger(__name__)

MUSL_STATIC_RUSTFLAGS = "-C target-feature=+crt-static"
MUSL_ALLOCATOR_FEATURE = "mimalloc"


def has_cargo_feature(runner: CommandRunner, feature: str, package: str = "") -> bool:
    """Return ``True`` if the crate (or *package* in a workspace) defines *feature*.

    Any failure to run or parse ``cargo metadata`` counts as "not defined".
    """
    args = ["metadata", "--format-version", "1", "--no-deps"]
    if package:
        args += ["--package", package]
    try:
        result = runner.run("cargo", args)
        data = json.loads(result.stdout)
    except (CommandError, ValueError):
        return False

    packages = data.get("packages") if isinstance(data, dict) else None
    if not isinstance(packages, list) or not packages:
        return False
    if package:
        match = next((p for p in packages if p.get("name") == package), None)
    else:
        match = packages[0]
    features = (match or {}).get("features")
    return isinstance(features, dict) and feature in features


def resolve_features(
    runner: CommandRunner, target: str, settings: ReleaseSettings
) -> str:
    """Requested features, plus ``mimalloc`` for musl builds when available."""
    features = settings.features
    if (
        "musl" in target
        and MUSL_ALLOCATOR_FEATURE not in features
        and has_cargo_feature(runner, MUSL_ALLOCATOR_FEATURE, settings.package)
    ):
        logger.info("Enabling %s feature for musl build", MUSL_ALLOCATOR_FEATURE)
        features = f"{features},{MUSL_ALLOCATOR_FEATURE}" if features else MUSL_ALLOCATOR_FEATURE
    return features


def cargo_build_env(target: str, settings: ReleaseSettings) -> dict[str, str]:
    """``RUSTFLAGS`` for the build.

    ``TARGET_RUSTFLAGS`` replaces the ambient ``RUSTFLAGS``.  musl builds
    without zigbuild are linked statically unless flags were given.
    """
    env: dict[str, str] = {}
    if settings.target_rustflags:
        env["RUSTFLAGS"] = settings.target_rustflags
    rustflags = settings.target_rustflags or settings.rustflags
    if "musl" in target and not settings.use_zigbuild and not rustflags:
        env["RUSTFLAGS"] = MUSL_STATIC_RUSTFLAGS
    return env


def cargo_build_args(
    target: str, binary_name: str, settings: ReleaseSettings, features: str
) -> list[str]:
    """Arguments for ``cargo``: ``rustc``/``zigbuild``, profile and selection flags."""
    if settings.use_zigbuild:
        args = ["zigbuild", "--target", target]
    else:
        args = ["rustc", "--target", target, "-q"]

    if settings.profile == "release":
        args.append("--release")
    elif settings.profile != "dev":
        args += ["--profile", settings.profile]

    if settings.package:
        args += ["--package", settings.package]
    if binary_name:
        args += ["--bin", binary_name]
    if settings.no_default_features:
        args.append("--no-default-features")
    if features:
        args += ["--features", features]
    if settings.locked:
        args.append("--locked")
    return args


def cargo_build(
    runner: CommandRunner,
    target: str,
    binary_name: str,
    settings: ReleaseSettings,
    extra_env: dict[str, str] | None = None,
) -> None:
    """Compile *binary_name* for *target*.

    Parameters
    ----------
    extra_env:
        Additional variables for cargo, e.g. the cross linker returned by
        ``install_linux_cross_deps``.
    """
    features = resolve_features(runner, target, settings)
    if settings.use_zigbuild:
        ensure_zigbuild(runner)
    env = {**(extra_env or {}), **cargo_build_env(target, settings)}
    runner.run(
        "cargo",
        cargo_build_args(target, binary_name, settings, features),
        capture=False,
        env=env or None,
    )


def build_summary(summary: BuildSummary) -> str:
    """Pretty-printed JSON form of a build summary."""
    return summary.model_dump_json(indent=2)


def output_build_results(
    outputs: ActionOutputs,
    *,
    binary_name: str,
    version: str,
    target: str,
    artifact: str,
    artifact_path: str,
    checksums: ChecksumSet,
) -> BuildSummary:
    """Emit artifact, digest and summary outputs for a finished build."""
    outputs.set("artifact", artifact)
    outputs.set("artifact_path", artifact_path)
    for algorithm in ChecksumAlgorithm:
        outputs.set(algorithm.value, checksums.get(algorithm))
    if checksums.sha256:
        outputs.set("checksum_file", f"{artifact_path}.sha256")

    summary = BuildSummary.from_checksums(
        binary_name=binary_name,
        version=version,
        target=target,
        artifact=artifact,
        artifact_path=artifact_path,
        checksums=checksums,
    )
    outputs.set_multiline("summary", build_summary(summary))
    return summary
