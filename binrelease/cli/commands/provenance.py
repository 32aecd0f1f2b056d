"""``binrelease sign-artifact`` and ``binrelease generate-sbom``."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from binrelease.cli.common import open_step, reported_errors, require
from binrelease.core.cargo_info import read_cargo_info
from binrelease.core.outputs import print_rule
from binrelease.core.tools import check_rust_toolchain, ensure_cargo_sbom, ensure_cosign
from binrelease.release.sbom import generate_sbom_files
from binrelease.release.sign import sign_artifact

console = Console()


def sign_artifact_cmd() -> None:
    """Sign ``ARTIFACT_PATH`` with keyless Sigstore (cosign ``sign-blob``)."""
    with reported_errors():
        settings, runner, outputs = open_step()
        cosign = ensure_cosign(runner)
        console.print(f"[green]Signing artifact:[/green] {settings.artifact_path}")
        files = sign_artifact(runner, cosign, settings.artifact_path, outputs)

        console.print()
        console.print("[green]Signature files:[/green]")
        print_rule(console)
        for label, path in (
            ("Signature", files.signature_path),
            ("Certificate", files.certificate_path),
            ("Bundle", files.bundle_path),
        ):
            if path is not None:
                console.print(f"[green]{label}:[/green] {path}")


def generate_sbom_cmd() -> None:
    """Write SPDX and CycloneDX documents for the crate to ``SBOM_OUTPUT_DIR``."""
    with reported_errors():
        settings, runner, outputs = open_step()
        check_rust_toolchain()
        ensure_cargo_sbom(runner)

        info = read_cargo_info(settings.manifest_path)
        binary_name = require(settings.binary_name or info.name, "could not determine binary name")
        version = require(info.version, "could not determine version")
        console.print(f"[green]Generating SBOM:[/green] {binary_name} v{version}")

        files = generate_sbom_files(runner, settings.sbom_output_dir, binary_name, version)

        table = Table(title="SBOM files")
        table.add_column("Format", style="cyan")
        table.add_column("Path")
        table.add_row("SPDX", files.spdx_path)
        table.add_row("CycloneDX", files.cyclonedx_path)
        console.print(table)

        outputs.set("version", version)
        outputs.set("binary_name", binary_name)
        outputs.set("sbom_spdx", files.spdx_path)
        outputs.set("sbom_cyclonedx", files.cyclonedx_path)
