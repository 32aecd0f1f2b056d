"""Shared test fixtures for binrelease."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from binrelease.config import ReleaseSettings
from binrelease.core.errors import CommandError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.process import format_command

CARGO_TOML = """\
[package]
name = "myapp"
version = "1.2.3"
edition = "2021"
"""

CHANGELOG = """\
# Changelog

## [Unreleased]

## v1.2.3

### Added
- Shiny new flag

## v1.2.2

### Fixed
- Old bug
"""


class FakeRunner:
    """Recording ``CommandRunner`` that never spawns a process.

    Behaviour is keyed on command-line prefixes (``"cargo metadata"``,
    ``"nfpm package"``): ``stdout`` canned output, ``failures`` stderr to
    raise ``CommandError`` with, ``effects`` callbacks that receive the
    argument list and cwd (used to create the files a tool would write).
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.stdout: dict[str, bytes] = {}
        self.failures: dict[str, str] = {}
        self.effects: dict[str, Callable[[list[str], Path | str | None], None]] = {}

    def run(
        self,
        program: str,
        args: Sequence[str],
        *,
        capture: bool = True,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        command = format_command(program, args)
        self.calls.append(
            {
                "command": command,
                "program": program,
                "args": list(args),
                "capture": capture,
                "cwd": cwd,
                "env": dict(env) if env else None,
            }
        )
        for prefix, stderr in self.failures.items():
            if command.startswith(prefix):
                raise CommandError(command, stderr)
        for prefix, effect in self.effects.items():
            if command.startswith(prefix):
                effect(list(args), cwd)
        stdout = next(
            (out for prefix, out in self.stdout.items() if command.startswith(prefix)),
            b"",
        )
        return subprocess.CompletedProcess([program, *args], 0, stdout, b"")

    @property
    def commands(self) -> list[str]:
        return [c["command"] for c in self.calls]

    def find(self, prefix: str) -> dict[str, Any]:
        """Return the first recorded call whose command starts with *prefix*."""
        for call in self.calls:
            if call["command"].startswith(prefix):
                return call
        raise AssertionError(f"no call starting with {prefix!r} in {self.commands}")


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def outputs(tmp_dir: Path) -> ActionOutputs:
    """ActionOutputs writing to a temp ``GITHUB_OUTPUT`` file."""
    return ActionOutputs(tmp_dir / "github_output")


@pytest.fixture
def make_settings(clean_env: pytest.MonkeyPatch) -> Callable[..., ReleaseSettings]:
    """Factory fixture: ReleaseSettings isolated from the real environment."""

    def _factory(**overrides: Any) -> ReleaseSettings:
        return ReleaseSettings(_env_file=None, **overrides)

    return _factory


@pytest.fixture
def crate_dir(tmp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal crate root as the working directory."""
    (tmp_dir / "Cargo.toml").write_text(CARGO_TOML)
    (tmp_dir / "Cargo.lock").write_text("# lock\n")
    (tmp_dir / "README.md").write_text("# myapp\n")
    (tmp_dir / "LICENSE").write_text("MIT\n")
    monkeypatch.chdir(tmp_dir)
    return tmp_dir


@pytest.fixture
def prebuilt_binary(crate_dir: Path) -> Path:
    """A fake compiled binary outside ``target/``."""
    path = crate_dir / "dist" / "myapp"
    path.parent.mkdir()
    path.write_bytes(b"\x7fELF fake binary\n")
    return path


@pytest.fixture
def tools_present(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend every external tool is already on PATH."""
    monkeypatch.setattr("binrelease.core.tools.command_exists", lambda name: True)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove pipeline variables that would leak into settings."""
    for name in list(ReleaseSettings.model_fields):
        monkeypatch.delenv(name.upper(), raising=False)
    monkeypatch.delenv("GITHUB_REF_NAME", raising=False)
    for key in [k for k in os.environ if k.startswith("INPUT_")]:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def changelog_text() -> str:
    return CHANGELOG
