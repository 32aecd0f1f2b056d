"""Toolchain checks and on-demand installation of packaging tools.

Each ``ensure_*`` helper is a no-op when the tool is already on ``PATH``
and otherwise installs a pinned release.  Nothing here mutates
``os.environ``; helpers that need to influence later builds return the
variables for the caller to pass along.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from binrelease.core.errors import CommandError, ConfigurationError, ReleaseError
from binrelease.core.process import CommandRunner, command_exists

logger = logging.getLogger(__name__)

NFPM_VERSION = "2.44.2"
COSIGN_VERSION = "3.0.4"
CARGO_WIX_VERSION = "0.3.8"

RUST_TOOLCHAIN_HELP = """Rust toolchain not found

Add a Rust setup step before this action:
  - uses: dtolnay/rust-toolchain@stable

Or install manually:
  rustup toolchain install stable --profile minimal"""


def host_machine() -> str:
    """Host CPU architecture as reported by ``uname -m``."""
    return platform.machine() or "x86_64"


def nfpm_download_url(machine: str, version: str = NFPM_VERSION) -> str:
    arch = "arm64" if machine == "aarch64" else "x86_64"
    return (
        f"https://github.com/goreleaser/nfpm/releases/download/"
        f"v{version}/nfpm_{version}_Linux_{arch}.tar.gz"
    )


def cosign_download_url(system: str, machine: str, version: str = COSIGN_VERSION) -> str:
    """Release asset URL for the host; *system* is ``platform.system()``."""
    base = f"https://github.com/sigstore/cosign/releases/download/v{version}"
    if system.lower() == "windows":
        return f"{base}/cosign-windows-amd64.exe"
    os_name = "darwin" if system.lower() == "darwin" else "linux"
    arch = "arm64" if machine in ("arm64", "aarch64") else "amd64"
    return f"{base}/cosign-{os_name}-{arch}"


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_rust_toolchain() -> None:
    """Fail with setup instructions when ``cargo`` is not installed."""
    if not command_exists("cargo"):
        raise ConfigurationError(RUST_TOOLCHAIN_HELP)


def ensure_nfpm(runner: CommandRunner, machine: str | None = None) -> None:
    if command_exists("nfpm"):
        return
    logger.warning("nfpm not found, installing %s...", NFPM_VERSION)
    url = nfpm_download_url(machine or host_machine())
    runner.run("bash", ["-c", f"curl -fsSL '{url}' | tar xz -C /tmp nfpm"])
    runner.run("sudo", ["mv", "/tmp/nfpm", "/usr/local/bin/nfpm"])


def ensure_cargo_sbom(runner: CommandRunner) -> None:
    if command_exists("cargo-sbom"):
        return
    logger.warning("cargo-sbom not found, installing...")
    runner.run("cargo", ["install", "cargo-sbom"])


def ensure_zigbuild(runner: CommandRunner) -> None:
    """Install cargo-zigbuild, preferring pip3, then pipx, then cargo."""
    if command_exists("cargo-zigbuild"):
        return
    logger.warning("cargo-zigbuild not found, installing...")
    if command_exists("pip3"):
        runner.run("pip3", ["install", "cargo-zigbuild"])
    elif command_exists("pipx"):
        runner.run("pipx", ["install", "cargo-zigbuild"])
    else:
        runner.run("cargo", ["install", "cargo-zigbuild"])


def ensure_cargo_wix(runner: CommandRunner) -> None:
    if command_exists("cargo-wix"):
        return
    logger.warning("cargo-wix not found, installing %s...", CARGO_WIX_VERSION)
    runner.run("cargo", ["install", "cargo-wix", "--version", CARGO_WIX_VERSION])


def ensure_cosign(
    runner: CommandRunner,
    *,
    system: str | None = None,
    machine: str | None = None,
    home: Path | str | None = None,
) -> str:
    """Return the cosign executable to use, downloading it if necessary.

    Parameters
    ----------
    runner:
        Executes curl/chmod/mv.
    system, machine:
        Host OS and CPU; default to the running host.
    home:
        Windows user profile directory; the binary lands in
        ``<home>/.local/bin/cosign.exe``.
    """
    if command_exists("cosign"):
        return "cosign"

    logger.warning("cosign not found, installing %s...", COSIGN_VERSION)
    system = system or platform.system()
    url = cosign_download_url(system, machine or host_machine())

    if system.lower() == "windows":
        dest_dir = Path(home if home is not None else Path.home()) / ".local" / "bin"
        dest_dir.mkdir(parents=True, exist_ok=True)
        dest = (dest_dir / "cosign.exe").as_posix()
        runner.run("curl", ["-fsSL", url, "-o", dest])
        return dest

    runner.run("curl", ["-fsSL", url, "-o", "/tmp/cosign"])
    runner.run("chmod", ["+x", "/tmp/cosign"])
    if command_exists("sudo"):
        runner.run("sudo", ["mv", "/tmp/cosign", "/usr/local/bin/cosign"])
    else:
        runner.run("mv", ["/tmp/cosign", "/usr/local/bin/cosign"])
    return "/usr/local/bin/cosign"


def _best_effort(runner: CommandRunner, program: str, args: list[str]) -> None:
    try:
        runner.run(program, args)
    except CommandError as exc:
        logger.warning("%s", exc)


def ensure_curl(runner: CommandRunner) -> None:
    """Install curl with apt-get, falling back to dnf.

    Failures are logged only; the download that follows reports the error.
    """
    if command_exists("curl"):
        return
    logger.warning("curl not found, attempting to install...")
    _best_effort(runner, "apt-get", ["update", "-qq"])
    _best_effort(runner, "apt-get", ["install", "-y", "-qq", "curl"])
    if not command_exists("curl"):
        _best_effort(runner, "dnf", ["install", "-y", "-q", "curl"])


def ensure_sudo(runner: CommandRunner, package_manager: str) -> None:
    """Install sudo in minimal containers that run as root without it.

    *package_manager* is ``"apt"`` or ``"dnf"``.
    """
    if command_exists("sudo"):
        return
    logger.warning("sudo not found, installing...")
    if package_manager == "apt":
        _best_effort(runner, "apt-get", ["update", "-qq"])
        _best_effort(runner, "apt-get", ["install", "-y", "-qq", "sudo"])
    else:
        _best_effort(runner, "dnf", ["install", "-y", "-q", "sudo"])


# ---------------------------------------------------------------------------
# Build preparation
# ---------------------------------------------------------------------------


def ensure_lockfile(runner: CommandRunner, root: Path | str = ".") -> None:
    """Generate ``Cargo.lock`` if the project does not have one."""
    if not (Path(root) / "Cargo.lock").exists():
        logger.warning("Generating Cargo.lock...")
        runner.run("cargo", ["generate-lockfile"], cwd=root)


def run_pre_build_hook(runner: CommandRunner, command: str) -> None:
    """Run the user's pre-build shell snippet, if any."""
    if not command:
        return
    logger.info("Running pre-build hook...")
    try:
        result = runner.run("bash", ["-c", command])
    except CommandError as exc:
        raise ReleaseError(f"pre-build hook failed: {exc.stderr}") from exc
    if result.stdout:
        logger.info("%s", result.stdout.decode("utf-8", errors="replace").rstrip())


def install_linux_cross_deps(
    runner: CommandRunner, target: str, machine: str | None = None
) -> dict[str, str]:
    """Install the C toolchain a Linux target needs and add the Rust target.

    Returns
    -------
    dict[str, str]
        Linker variables (``CARGO_TARGET_<TRIPLE>_LINKER``) to pass to cargo.
    """
    apt = command_exists("apt-get")
    dnf = command_exists("dnf")
    linker_env: dict[str, str] = {}

    if "musl" in target:
        if apt:
            runner.run("sudo", ["apt-get", "update", "-qq"])
            runner.run("sudo", ["apt-get", "install", "-y", "-qq", "musl-tools"])
    elif target == "aarch64-unknown-linux-gnu":
        if (machine or host_machine()) != "aarch64":
            if apt:
                runner.run("sudo", ["apt-get", "update", "-qq"])
                runner.run(
                    "sudo",
                    ["apt-get", "install", "-y", "-qq", "gcc-aarch64-linux-gnu"],
                )
            elif dnf:
                runner.run("sudo", ["dnf", "install", "-y", "gcc-aarch64-linux-gnu"])
            linker_env["CARGO_TARGET_AARCH64_UNKNOWN_LINUX_GNU_LINKER"] = (
                "aarch64-linux-gnu-gcc"
            )
    elif target == "armv7-unknown-linux-gnueabihf":
        packages = ["pkg-config", "gcc-arm-linux-gnueabihf"]
        if apt:
            runner.run("sudo", ["apt-get", "update", "-qq"])
            runner.run("sudo", ["apt-get", "install", "-y", "-qq", *packages])
        elif dnf:
            runner.run("sudo", ["dnf", "install", "-y", *packages])
        linker_env["CARGO_TARGET_ARMV7_UNKNOWN_LINUX_GNUEABIHF_LINKER"] = (
            "arm-linux-gnueabihf-gcc"
        )

    runner.run("rustup", ["target", "add", target])
    return linker_env
