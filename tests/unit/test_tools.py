"""Tests for toolchain checks and on-demand tool installation."""

from __future__ import annotations

from pathlib import Path

import pytest

from binrelease.core.errors import ConfigurationError, ReleaseError
from binrelease.core.tools import (
    CARGO_WIX_VERSION,
    check_rust_toolchain,
    cosign_download_url,
    ensure_cargo_sbom,
    ensure_cargo_wix,
    ensure_cosign,
    ensure_curl,
    ensure_lockfile,
    ensure_nfpm,
    ensure_sudo,
    ensure_zigbuild,
    install_linux_cross_deps,
    nfpm_download_url,
    run_pre_build_hook,
)


@pytest.fixture
def available(monkeypatch: pytest.MonkeyPatch):
    """Set which executables ``command_exists`` reports as installed."""

    def _set(*names: str) -> None:
        monkeypatch.setattr(
            "binrelease.core.tools.command_exists", lambda name: name in names
        )

    return _set


class TestDownloadUrls:
    def test_nfpm(self):
        assert nfpm_download_url("x86_64").endswith("nfpm_2.44.2_Linux_x86_64.tar.gz")
        assert nfpm_download_url("aarch64").endswith("nfpm_2.44.2_Linux_arm64.tar.gz")

    @pytest.mark.parametrize(
        ("system", "machine", "asset"),
        [
            ("Linux", "x86_64", "cosign-linux-amd64"),
            ("Linux", "aarch64", "cosign-linux-arm64"),
            ("Darwin", "arm64", "cosign-darwin-arm64"),
            ("Darwin", "x86_64", "cosign-darwin-amd64"),
            ("Windows", "AMD64", "cosign-windows-amd64.exe"),
        ],
    )
    def test_cosign(self, system: str, machine: str, asset: str):
        url = cosign_download_url(system, machine)
        assert url == f"https://github.com/sigstore/cosign/releases/download/v3.0.4/{asset}"


class TestChecks:
    def test_rust_toolchain_missing(self, available):
        available()
        with pytest.raises(ConfigurationError, match="Rust toolchain not found"):
            check_rust_toolchain()

    def test_rust_toolchain_present(self, available):
        available("cargo")
        check_rust_toolchain()


class TestEnsureTools:
    def test_present_tools_are_not_installed(self, available, runner):
        available("nfpm", "cargo-sbom", "cargo-zigbuild", "cargo-wix")
        ensure_nfpm(runner)
        ensure_cargo_sbom(runner)
        ensure_zigbuild(runner)
        ensure_cargo_wix(runner)
        assert runner.calls == []

    def test_nfpm_install(self, available, runner):
        available()
        ensure_nfpm(runner, machine="aarch64")
        assert runner.calls[0]["program"] == "bash"
        assert "nfpm_2.44.2_Linux_arm64.tar.gz" in runner.calls[0]["args"][1]
        assert runner.commands[1] == "sudo mv /tmp/nfpm /usr/local/bin/nfpm"

    def test_cargo_sbom_install(self, available, runner):
        available()
        ensure_cargo_sbom(runner)
        assert runner.commands == ["cargo install cargo-sbom"]

    @pytest.mark.parametrize(
        ("installed", "expected"),
        [
            (("pip3", "pipx"), "pip3 install cargo-zigbuild"),
            (("pipx",), "pipx install cargo-zigbuild"),
            ((), "cargo install cargo-zigbuild"),
        ],
    )
    def test_zigbuild_installer_preference(self, available, runner, installed, expected):
        available(*installed)
        ensure_zigbuild(runner)
        assert runner.commands == [expected]

    def test_cargo_wix_pinned(self, available, runner):
        available()
        ensure_cargo_wix(runner)
        assert runner.commands == [f"cargo install cargo-wix --version {CARGO_WIX_VERSION}"]


class TestEnsureSystemPackages:
    def test_curl_present(self, available, runner):
        available("curl", "sudo")
        ensure_curl(runner)
        ensure_sudo(runner, "apt")
        assert runner.calls == []

    def test_curl_from_apt(self, available, runner):
        available()
        runner.effects["apt-get install"] = lambda args, cwd: available("curl")
        ensure_curl(runner)
        assert runner.commands == ["apt-get update -qq", "apt-get install -y -qq curl"]

    def test_curl_falls_back_to_dnf(self, available, runner):
        available()
        runner.failures["apt-get"] = "apt-get: not found"
        ensure_curl(runner)
        assert runner.commands[-1] == "dnf install -y -q curl"

    @pytest.mark.parametrize(
        ("manager", "expected"),
        [
            ("apt", ["apt-get update -qq", "apt-get install -y -qq sudo"]),
            ("dnf", ["dnf install -y -q sudo"]),
        ],
    )
    def test_sudo_install(self, available, runner, manager: str, expected: list[str]):
        available()
        ensure_sudo(runner, manager)
        assert runner.commands == expected

    def test_install_failures_are_not_fatal(self, available, runner, caplog):
        available()
        runner.failures["dnf"] = "no repos"
        ensure_sudo(runner, "dnf")
        assert "no repos" in caplog.text


class TestEnsureCosign:
    def test_on_path(self, available, runner):
        available("cosign")
        assert ensure_cosign(runner) == "cosign"
        assert runner.calls == []

    def test_linux_install_with_sudo(self, available, runner):
        available("sudo")
        path = ensure_cosign(runner, system="Linux", machine="x86_64")
        assert path == "/usr/local/bin/cosign"
        assert runner.commands[-1] == "sudo mv /tmp/cosign /usr/local/bin/cosign"
        assert runner.commands[0].endswith("cosign-linux-amd64 -o /tmp/cosign")

    def test_linux_install_without_sudo(self, available, runner):
        available()
        ensure_cosign(runner, system="Linux", machine="x86_64")
        assert runner.commands[-1] == "mv /tmp/cosign /usr/local/bin/cosign"

    def test_windows_install_into_home(self, available, runner, tmp_dir: Path):
        available()
        path = ensure_cosign(runner, system="Windows", machine="AMD64", home=tmp_dir)
        assert path == (tmp_dir / ".local" / "bin" / "cosign.exe").as_posix()
        assert (tmp_dir / ".local" / "bin").is_dir()
        assert runner.calls[0]["args"][-1] == path


class TestBuildPreparation:
    def test_lockfile_generated_when_missing(self, runner, tmp_dir: Path):
        ensure_lockfile(runner, tmp_dir)
        assert runner.commands == ["cargo generate-lockfile"]
        assert runner.calls[0]["cwd"] == tmp_dir

    def test_lockfile_present(self, runner, tmp_dir: Path):
        (tmp_dir / "Cargo.lock").write_text("")
        ensure_lockfile(runner, tmp_dir)
        assert runner.calls == []

    def test_pre_build_hook(self, runner):
        run_pre_build_hook(runner, "echo hi && make assets")
        assert runner.calls[0]["args"] == ["-c", "echo hi && make assets"]

    def test_no_pre_build_hook(self, runner):
        run_pre_build_hook(runner, "")
        assert runner.calls == []

    def test_pre_build_hook_failure(self, runner):
        runner.failures["bash"] = "make: *** No rule"
        with pytest.raises(ReleaseError, match="pre-build hook failed: make"):
            run_pre_build_hook(runner, "make assets")


class TestLinuxCrossDeps:
    def test_native_gnu_only_adds_target(self, available, runner):
        available("apt-get")
        env = install_linux_cross_deps(runner, "x86_64-unknown-linux-gnu", machine="x86_64")
        assert env == {}
        assert runner.commands == ["rustup target add x86_64-unknown-linux-gnu"]

    def test_musl_installs_musl_tools(self, available, runner):
        available("apt-get")
        install_linux_cross_deps(runner, "x86_64-unknown-linux-musl", machine="x86_64")
        assert "sudo apt-get install -y -qq musl-tools" in runner.commands

    def test_aarch64_cross_linker(self, available, runner):
        available("apt-get")
        env = install_linux_cross_deps(runner, "aarch64-unknown-linux-gnu", machine="x86_64")
        assert env == {"CARGO_TARGET_AARCH64_UNKNOWN_LINUX_GNU_LINKER": "aarch64-linux-gnu-gcc"}
        assert "sudo apt-get install -y -qq gcc-aarch64-linux-gnu" in runner.commands

    def test_aarch64_on_aarch64_host_is_native(self, available, runner):
        available("apt-get")
        env = install_linux_cross_deps(runner, "aarch64-unknown-linux-gnu", machine="aarch64")
        assert env == {}

    def test_armv7_with_dnf(self, available, runner):
        available("dnf")
        env = install_linux_cross_deps(runner, "armv7-unknown-linux-gnueabihf", machine="x86_64")
        assert env["CARGO_TARGET_ARMV7_UNKNOWN_LINUX_GNUEABIHF_LINKER"] == "arm-linux-gnueabihf-gcc"
        assert runner.commands[0] == "sudo dnf install -y pkg-config gcc-arm-linux-gnueabihf"
        assert runner.commands[-1] == "rustup target add armv7-unknown-linux-gnueabihf"
