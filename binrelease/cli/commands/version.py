"""``binrelease validate-version`` / ``get-version`` / ``get-release-version``."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from binrelease.cli.common import open_step, reported_errors
from binrelease.core.cargo_info import read_cargo_info
from binrelease.core.errors import ConfigurationError
from binrelease.core.version import (
    check_manifest_version,
    resolve_release_version,
    validate_release_tag,
)

console = Console()


def validate_version_cmd() -> None:
    """Check the pushed tag against ``NEXT_RELEASE_VERSION``.

    With ``VALIDATE_CARGO_TOML=true`` the crate version must match too.
    """
    with reported_errors():
        settings, _, outputs = open_step()
        tag = settings.release_tag
        expected = settings.expected_release_version

        cargo_version = None
        if settings.validate_cargo_toml and tag and expected:
            cargo_version = read_cargo_info(settings.manifest_path).version

        version = validate_release_tag(tag, expected, cargo_version)
        console.print(f"[green]Version validated:[/green] {expected} matches tag {tag}")
        if cargo_version is not None:
            console.print(
                f"[green]Cargo.toml validated:[/green] version {cargo_version} matches tag"
            )
        outputs.set("version", version)


def get_version_cmd() -> None:
    """Print the crate version from ``MANIFEST_PATH``."""
    with reported_errors():
        settings, _, outputs = open_step()
        if not Path(settings.manifest_path).exists():
            raise ConfigurationError(f"manifest not found: {settings.manifest_path}")
        version = check_manifest_version(read_cargo_info(settings.manifest_path).version)
        console.print(version, highlight=False)
        outputs.set("version", version)


def get_release_version_cmd() -> None:
    """Resolve the version downstream manifests should publish.

    ``VERSION`` wins; otherwise the latest GitHub release of
    ``GITHUB_REPOSITORY`` is used.
    """
    with reported_errors():
        settings, runner, outputs = open_step()
        version = resolve_release_version(
            runner,
            override=settings.version,
            repository=settings.github_repository,
            token=settings.token,
        )
        console.print(f"[green]Version:[/green] {version}")
        outputs.set("version", version)
