"""Release flows: build (or stage) a binary and turn it into artifacts.

Every flow works relative to the current directory, which is expected to
be the crate root, and writes into ``target/`` exactly where cargo would.

Binary flows (``release_linux``, ``release_macos``, ``release_windows``)
always produce a bare ``<bin>-<version>-<target>`` artifact and, when
archiving is enabled, a ``.tar.gz`` (``.zip`` on Windows).  The archive is
then the reported artifact.  Installer flows produce a single .deb, .rpm,
.apk, .dmg or .msi.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from binrelease.config import ReleaseSettings, parse_comma_list
from binrelease.core.archive import copy_docs, copy_includes, list_archivable_files
from binrelease.core.cargo_info import read_cargo_info
from binrelease.core.checksum import generate_checksums
from binrelease.core.errors import ConfigurationError, ReleaseError, UnsupportedTargetError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.platform import platform_for_target, target_to_package_arch
from binrelease.core.process import CommandRunner
from binrelease.core.tools import (
    check_rust_toolchain,
    ensure_cargo_wix,
    ensure_lockfile,
    ensure_nfpm,
    install_linux_cross_deps,
    run_pre_build_hook,
)
from binrelease.models.artifacts import ReleaseResult
from binrelease.models.manifests import PackageMetadata, default_description
from binrelease.models.platform import PackageFormat, TargetOS
from binrelease.packaging.dmg import create_dmg, write_scripts
from binrelease.packaging.nfpm import (
    package_artifact_name,
    package_release,
    render_nfpm_config,
)
from binrelease.release.build import cargo_build, output_build_results

logger = logging.getLogger(__name__)

DEFAULT_TARGETS: dict[TargetOS, str] = {
    TargetOS.LINUX: "x86_64-unknown-linux-gnu",
    TargetOS.MACOS: "aarch64-apple-darwin",
    TargetOS.WINDOWS: "x86_64-pc-windows-msvc",
}

DEFAULT_PACKAGE_TARGETS: dict[PackageFormat, str] = {
    PackageFormat.DEB: "x86_64-unknown-linux-gnu",
    PackageFormat.RPM: "x86_64-unknown-linux-gnu",
    PackageFormat.APK: "x86_64-unknown-linux-musl",
}

DMG_STAGING_DIR = "target/dmg-contents"
WIX_RELEASE_DIR = "target/release"


class BuildContext(BaseModel):
    """What is being released, resolved from settings and ``Cargo.toml``."""

    model_config = ConfigDict(frozen=True)

    binary_name: str
    version: str
    target: str
    package: str
    skip_build: bool
    create_archive: bool

    @property
    def release_dir(self) -> str:
        return f"target/{self.target}/release"


def resolve_context(settings: ReleaseSettings, default_target: str) -> BuildContext:
    """Resolve target, binary name and version for a release flow.

    Raises
    ------
    ConfigurationError
        If the binary name or version cannot be determined.
    """
    if not settings.skip_build:
        check_rust_toolchain()

    info = read_cargo_info(settings.manifest_path)
    binary_name = settings.binary_name or info.name
    if not binary_name:
        raise ConfigurationError("could not determine binary name")
    if not info.version:
        raise ConfigurationError("could not determine version")

    return BuildContext(
        binary_name=binary_name,
        version=info.version,
        target=settings.target or default_target,
        package=settings.package or info.name,
        skip_build=settings.skip_build,
        create_archive=settings.archive,
    )


def package_metadata(settings: ReleaseSettings, binary_name: str) -> PackageMetadata:
    """Linux package metadata from the ``PKG_*`` settings."""
    return PackageMetadata(
        description=settings.pkg_description or default_description(binary_name),
        maintainer=settings.pkg_maintainer,
        homepage=settings.pkg_homepage,
        license=settings.pkg_license,
        vendor=settings.pkg_vendor,
        depends=parse_comma_list(settings.pkg_depends),
        recommends=parse_comma_list(settings.pkg_recommends),
        suggests=parse_comma_list(settings.pkg_suggests),
        conflicts=parse_comma_list(settings.pkg_conflicts),
        replaces=parse_comma_list(settings.pkg_replaces),
        provides=parse_comma_list(settings.pkg_provides),
        contents=parse_comma_list(settings.pkg_contents),
        section=settings.pkg_section,
        priority=settings.pkg_priority,
        group=settings.pkg_group,
        release=settings.pkg_release,
        summary=settings.pkg_summary,
    )


# ---------------------------------------------------------------------------
# Shared steps
# ---------------------------------------------------------------------------


def _make_executable(path: Path | str) -> None:
    path = Path(path)
    path.chmod(path.stat().st_mode | 0o111)


def _reset_dir(path: Path | str) -> None:
    shutil.rmtree(path, ignore_errors=True)
    Path(path).mkdir(parents=True, exist_ok=True)


def _compile(
    runner: CommandRunner,
    ctx: BuildContext,
    settings: ReleaseSettings,
    os_family: TargetOS,
) -> None:
    """Clean the release dir and run the full cargo build for *ctx*."""
    _reset_dir(ctx.release_dir)
    ensure_lockfile(runner)
    run_pre_build_hook(runner, settings.pre_build)
    if os_family is TargetOS.LINUX:
        linker_env = install_linux_cross_deps(runner, ctx.target)
    else:
        runner.run("rustup", ["target", "add", ctx.target], capture=False)
        linker_env = {}
    cargo_build(runner, ctx.target, ctx.binary_name, settings, linker_env)


def _stage_prebuilt(settings: ReleaseSettings, destination: str) -> None:
    """Copy ``BINARY_PATH`` into the release dir for a skip-build release."""
    custom = settings.binary_path
    if not custom:
        raise ConfigurationError("binary-path is required when skip-build is true")
    if not Path(custom).exists():
        raise ConfigurationError(f"binary not found: {custom}")
    Path(destination).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(custom, destination)


def _require_file(path: str, message: str) -> None:
    if not Path(path).exists():
        raise ReleaseError(f"{message}: {path}")


def _binary_for_package(
    runner: CommandRunner,
    ctx: BuildContext,
    settings: ReleaseSettings,
    os_family: TargetOS,
) -> str:
    """Locate the binary for an installer flow, building it if missing."""
    if ctx.skip_build and settings.binary_path:
        binary_path = settings.binary_path
    else:
        binary_path = f"{ctx.release_dir}/{ctx.binary_name}"

    if not Path(binary_path).exists():
        if ctx.skip_build:
            raise ConfigurationError(f"binary not found: {binary_path}")
        logger.warning("Binary not found, building...")
        _compile(runner, ctx, settings, os_family)

    _require_file(binary_path, "binary not found")
    return binary_path


def _output_identity(outputs: ActionOutputs, ctx: BuildContext, binary_path: str) -> None:
    outputs.set("version", ctx.version)
    outputs.set("binary_name", ctx.binary_name)
    outputs.set("target", ctx.target)
    outputs.set("binary_path", binary_path.replace("\\", "/"))


def _finish(
    outputs: ActionOutputs,
    ctx: BuildContext,
    settings: ReleaseSettings,
    *,
    artifact_path: str,
    binary_path: str,
    created: list[str],
) -> ReleaseResult:
    checksums = generate_checksums(artifact_path, settings.checksum)
    artifact_path = artifact_path.replace("\\", "/")
    summary = output_build_results(
        outputs,
        binary_name=ctx.binary_name,
        version=ctx.version,
        target=ctx.target,
        artifact=Path(artifact_path).name,
        artifact_path=artifact_path,
        checksums=checksums,
    )
    return ReleaseResult(summary=summary, binary_path=binary_path, created=created)


# ---------------------------------------------------------------------------
# Binary releases
# ---------------------------------------------------------------------------


def release_binary(
    os_family: TargetOS,
    settings: ReleaseSettings,
    runner: CommandRunner,
    outputs: ActionOutputs,
) -> ReleaseResult:
    """Build or stage the binary for *os_family* and package it.

    Parameters
    ----------
    os_family:
        Decides the default target, the ``.exe`` suffix, how the Rust target
        is prepared, and whether the archive is a tarball or a 7z zip.
    """
    ctx = resolve_context(settings, DEFAULT_TARGETS[os_family])
    windows = os_family is TargetOS.WINDOWS
    exe = ".exe" if windows else ""
    binary_path = f"{ctx.release_dir}/{ctx.binary_name}{exe}"

    if ctx.skip_build:
        logger.info(
            "Packaging %s v%s for %s (skip-build)", ctx.binary_name, ctx.version, ctx.target
        )
        _stage_prebuilt(settings, binary_path)
        if not windows:
            _make_executable(binary_path)
    else:
        logger.info("Building %s v%s for %s", ctx.binary_name, ctx.version, ctx.target)
        _compile(runner, ctx, settings, os_family)

    _require_file(binary_path, "binary not found")

    copy_docs(ctx.release_dir)
    copy_includes(ctx.release_dir, parse_comma_list(settings.archive_include))

    artifact_base = f"{ctx.binary_name}-{ctx.version}-{ctx.target}"
    _output_identity(outputs, ctx, binary_path)

    bare_artifact = f"{artifact_base}{exe}"
    bare_artifact_path = f"{ctx.release_dir}/{bare_artifact}"
    shutil.copyfile(binary_path, bare_artifact_path)
    if not windows:
        _make_executable(bare_artifact_path)
    outputs.set("bare_artifact", bare_artifact)
    outputs.set("bare_artifact_path", bare_artifact_path.replace("\\", "/"))

    if not ctx.create_archive:
        return _finish(
            outputs,
            ctx,
            settings,
            artifact_path=bare_artifact_path,
            binary_path=binary_path,
            created=[bare_artifact],
        )

    artifact = f"{artifact_base}.zip" if windows else f"{artifact_base}.tar.gz"
    artifact_path = f"{ctx.release_dir}/{artifact}"
    logger.info("Creating archive: %s", artifact)
    files = list_archivable_files(ctx.release_dir)
    if windows:
        runner.run("7z", ["a", artifact, *files], capture=False, cwd=ctx.release_dir)
    else:
        runner.run("tar", ["-C", ctx.release_dir, "-czf", artifact_path, *files], capture=False)

    generate_checksums(bare_artifact_path, settings.checksum)
    return _finish(
        outputs,
        ctx,
        settings,
        artifact_path=artifact_path,
        binary_path=binary_path,
        created=[bare_artifact, artifact],
    )


def release_linux(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    return release_binary(TargetOS.LINUX, settings, runner, outputs)


def release_macos(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    return release_binary(TargetOS.MACOS, settings, runner, outputs)


def release_windows(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    return release_binary(TargetOS.WINDOWS, settings, runner, outputs)


def release(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    """Pick the binary release flow from ``TARGET``."""
    if not settings.target:
        raise ConfigurationError("TARGET is required for the unified release command")
    try:
        os_family = platform_for_target(settings.target)
    except UnsupportedTargetError as exc:
        raise ConfigurationError(
            f"Cannot determine platform from target: {settings.target}. "
            "Use release-linux, release-macos, or release-windows directly."
        ) from exc
    logger.info("Auto-selected: %s platform for target %s", os_family.value, settings.target)
    return release_binary(os_family, settings, runner, outputs)


# ---------------------------------------------------------------------------
# Installer releases
# ---------------------------------------------------------------------------


def release_linux_package(
    package_format: PackageFormat | str,
    settings: ReleaseSettings,
    runner: CommandRunner,
    outputs: ActionOutputs,
) -> ReleaseResult:
    """Build a .deb, .rpm or .apk with nfpm."""
    package_format = PackageFormat(package_format)
    ctx = resolve_context(settings, DEFAULT_PACKAGE_TARGETS[package_format])
    ensure_nfpm(runner)

    arch = target_to_package_arch(ctx.target, package_format)
    logger.info(
        "Building .%s package: %s v%s for %s",
        package_format.value,
        ctx.binary_name,
        ctx.version,
        arch,
    )
    binary_path = _binary_for_package(runner, ctx, settings, TargetOS.LINUX)

    pkg_dir = f"target/pkg-{package_format.value}"
    _reset_dir(pkg_dir)

    metadata = package_metadata(settings, ctx.binary_name)
    config = render_nfpm_config(
        package_format,
        name=ctx.binary_name,
        version=ctx.version,
        arch=arch,
        binary_path=str(Path(binary_path).resolve()),
        metadata=metadata,
    )
    config_path = f"{pkg_dir}/nfpm.yaml"
    Path(config_path).write_text(config, encoding="utf-8")

    artifact = package_artifact_name(
        package_format,
        ctx.binary_name,
        ctx.version,
        arch,
        package_release(package_format, metadata),
    )
    artifact_path = f"{ctx.release_dir}/{artifact}"
    Path(ctx.release_dir).mkdir(parents=True, exist_ok=True)

    logger.info("Running nfpm...")
    runner.run(
        "nfpm",
        [
            "package",
            "--config",
            config_path,
            "--packager",
            package_format.value,
            "--target",
            artifact_path,
        ],
        capture=False,
    )
    _require_file(artifact_path, "failed to create package")

    _output_identity(outputs, ctx, binary_path)
    return _finish(
        outputs,
        ctx,
        settings,
        artifact_path=artifact_path,
        binary_path=binary_path,
        created=[artifact],
    )


def release_macos_dmg(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    """Build a .dmg holding the binary, docs and install/uninstall scripts."""
    ctx = resolve_context(settings, DEFAULT_TARGETS[TargetOS.MACOS])
    logger.info(
        "Building .dmg installer: %s v%s for %s", ctx.binary_name, ctx.version, ctx.target
    )
    binary_path = _binary_for_package(runner, ctx, settings, TargetOS.MACOS)

    _reset_dir(DMG_STAGING_DIR)
    staged = f"{DMG_STAGING_DIR}/{ctx.binary_name}"
    shutil.copyfile(binary_path, staged)
    _make_executable(staged)
    copy_docs(DMG_STAGING_DIR)
    copy_includes(DMG_STAGING_DIR, parse_comma_list(settings.archive_include))
    write_scripts(DMG_STAGING_DIR, ctx.binary_name)

    artifact = f"{ctx.binary_name}-{ctx.version}-{ctx.target}.dmg"
    artifact_path = f"{ctx.release_dir}/{artifact}"
    Path(ctx.release_dir).mkdir(parents=True, exist_ok=True)

    logger.info("Creating DMG...")
    create_dmg(runner, DMG_STAGING_DIR, f"{ctx.binary_name}-{ctx.version}", artifact_path)
    _require_file(artifact_path, "failed to create DMG")

    _output_identity(outputs, ctx, binary_path)
    return _finish(
        outputs,
        ctx,
        settings,
        artifact_path=artifact_path,
        binary_path=binary_path,
        created=[artifact],
    )


def release_windows_msi(
    settings: ReleaseSettings, runner: CommandRunner, outputs: ActionOutputs
) -> ReleaseResult:
    """Build an .msi with cargo-wix from the release binary."""
    ctx = resolve_context(settings, DEFAULT_TARGETS[TargetOS.WINDOWS])
    logger.info("Building %s v%s MSI for %s", ctx.binary_name, ctx.version, ctx.target)

    binary_path = f"{ctx.release_dir}/{ctx.binary_name}.exe"
    if ctx.skip_build:
        _stage_prebuilt(settings, binary_path)
    else:
        _compile(runner, ctx, settings, TargetOS.WINDOWS)
    _require_file(binary_path, "binary not found")

    copy_docs(ctx.release_dir)
    copy_includes(ctx.release_dir, parse_comma_list(settings.archive_include))

    # cargo-wix only looks in target/release.
    Path(WIX_RELEASE_DIR).mkdir(parents=True, exist_ok=True)
    for entry in sorted(Path(ctx.release_dir).iterdir()):
        if entry.is_file():
            shutil.copyfile(entry, Path(WIX_RELEASE_DIR) / entry.name)

    ensure_cargo_wix(runner)
    msi_path = f"target/wix/{ctx.binary_name}-{ctx.version}-{ctx.target}.msi"
    logger.info("Creating MSI package...")
    runner.run(
        "cargo",
        [
            "wix",
            "--no-build",
            "--nocapture",
            "--package",
            ctx.package,
            "--output",
            msi_path,
        ],
        capture=False,
    )
    _require_file(msi_path, "MSI not created")

    _output_identity(outputs, ctx, binary_path)
    return _finish(
        outputs,
        ctx,
        settings,
        artifact_path=msi_path,
        binary_path=binary_path,
        created=[Path(msi_path).name],
    )
