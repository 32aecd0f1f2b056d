"""``binrelease release`` and the per-platform ``release-*`` commands.

Each command builds (or, with ``SKIP_BUILD=true``, stages) the binary for
``TARGET`` and produces one distributable artifact plus checksum sidecars.
The artifact path and digests are written to ``GITHUB_OUTPUT`` for the
signing and upload steps that follow.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console
from rich.panel import Panel

from binrelease.cli.common import open_step, reported_errors
from binrelease.config import ReleaseSettings
from binrelease.core.outputs import ActionOutputs
from binrelease.core.process import CommandRunner
from binrelease.models.artifacts import ReleaseResult
from binrelease.models.platform import PackageFormat
from binrelease.release import release as flows

console = Console()

ReleaseFlow = Callable[[ReleaseSettings, CommandRunner, ActionOutputs], ReleaseResult]


def print_release_result(result: ReleaseResult) -> None:
    """Show the build summary panel for a finished release."""
    summary = result.summary
    lines = [
        "[bold green]Release artifact ready[/bold green]",
        "",
        f"[bold]Binary:[/bold]   {summary.binary_name} v{summary.version}",
        f"[bold]Target:[/bold]   {summary.target}",
        f"[bold]Artifact:[/bold] {summary.artifact_path}",
    ]
    if len(result.created) > 1:
        lines.append(f"[bold]Created:[/bold]  {', '.join(result.created)}")
    lines.append("")
    for label, digest in (
        ("SHA256", summary.sha256),
        ("SHA512", summary.sha512),
        ("BLAKE2", summary.b2),
    ):
        if digest:
            lines.append(f"[dim]{label}:[/dim] {digest}")
    console.print()
    console.print(
        Panel(
            "\n".join(lines).rstrip(),
            title="[bold]Build Summary[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )


def _run(flow: ReleaseFlow) -> None:
    with reported_errors():
        settings, runner, outputs = open_step()
        result = flow(settings, runner, outputs)
    print_release_result(result)


def release_cmd() -> None:
    """Pick linux, macOS or Windows from ``TARGET`` and release a binary."""
    _run(flows.release)


def release_linux_cmd() -> None:
    _run(flows.release_linux)


def release_macos_cmd() -> None:
    _run(flows.release_macos)


def release_windows_cmd() -> None:
    _run(flows.release_windows)


def release_linux_deb_cmd() -> None:
    _run(lambda s, r, o: flows.release_linux_package(PackageFormat.DEB, s, r, o))


def release_linux_rpm_cmd() -> None:
    _run(lambda s, r, o: flows.release_linux_package(PackageFormat.RPM, s, r, o))


def release_linux_apk_cmd() -> None:
    _run(lambda s, r, o: flows.release_linux_package(PackageFormat.APK, s, r, o))


def release_macos_dmg_cmd() -> None:
    """Package the binary, docs and install scripts into a .dmg (macOS runners only)."""
    _run(flows.release_macos_dmg)


def release_windows_msi_cmd() -> None:
    """Build an .msi with cargo-wix (Windows runners only)."""
    _run(flows.release_windows_msi)
