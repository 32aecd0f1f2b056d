"""``binrelease test-deb``, ``test-rpm`` and ``test-windows``."""

from __future__ import annotations

from rich.console import Console

from binrelease.cli.common import open_step, reported_errors
from binrelease.models.platform import PackageFormat
from binrelease.release.smoke_test import smoke_test_package, smoke_test_windows

console = Console()


def _package_cmd(package_format: PackageFormat) -> None:
    with reported_errors():
        settings, runner, outputs = open_step()
        output = smoke_test_package(runner, settings, outputs, package_format)
        console.print(f"[green]Installed binary reports:[/green] {output}", highlight=False)
        console.print("[bold green]All tests passed[/bold green]")


def smoke_test_deb_cmd() -> None:
    """Install the .deb with dpkg, check ``--version``, then remove it."""
    _package_cmd(PackageFormat.DEB)


def smoke_test_rpm_cmd() -> None:
    """Install the .rpm with rpm, check ``--version``, then remove it."""
    _package_cmd(PackageFormat.RPM)


def smoke_test_windows_cmd() -> None:
    """Run the Windows executable and install the MSI, checking the version."""
    with reported_errors():
        settings, runner, outputs = open_step()
        for path in smoke_test_windows(runner, settings, outputs):
            console.print(f"[green]Verified:[/green] {path}", highlight=False)
        console.print("[bold green]All tests passed[/bold green]")
