"""Tests for DMG staging scripts and hdiutil invocation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from binrelease.core.errors import CommandError
from binrelease.packaging.dmg import create_dmg, install_script, write_scripts


def test_install_script_names_binary():
    script = install_script("myapp")
    assert script.startswith("#!/bin/bash\n# Install myapp to /usr/local/bin\n")
    assert 'BINARY="myapp"' in script


def test_write_scripts_executable(tmp_dir: Path):
    install, uninstall = write_scripts(tmp_dir, "myapp")
    assert install.name == "install.sh"
    assert uninstall.name == "uninstall.sh"
    assert os.access(install, os.X_OK)
    assert "sudo rm -f" in uninstall.read_text()


class TestCreateDmg:
    def test_create_then_convert(self, runner, tmp_dir: Path):
        out = tmp_dir / "myapp-1.2.3-aarch64-apple-darwin.dmg"
        temp = tmp_dir / "myapp-1.2.3-aarch64-apple-darwin.dmg.temp.dmg"
        runner.effects["hdiutil create"] = lambda args, cwd: temp.write_text("img")

        assert create_dmg(runner, tmp_dir / "stage", "myapp-1.2.3", out) == out
        assert runner.commands[0] == "sync"
        create = runner.find("hdiutil create")["args"]
        assert create[create.index("-volname") + 1] == "myapp-1.2.3"
        assert create[create.index("-format") + 1] == "UDRW"
        assert runner.find("hdiutil convert")["args"][-3:] == ["UDZO", "-o", str(out)]
        assert not temp.exists()

    def test_create_retried(self, runner, tmp_dir: Path):
        attempts = []

        def busy(args, cwd):
            attempts.append(1)
            if len(attempts) < 3:
                raise CommandError("hdiutil create", "Resource busy")

        runner.effects["hdiutil create"] = busy
        sleeps: list[float] = []
        create_dmg(runner, tmp_dir, "vol", tmp_dir / "out.dmg", sleep=sleeps.append)
        assert len(attempts) == 3
        assert sleeps == [2.0, 2.0]

    def test_gives_up_after_three_attempts(self, runner, tmp_dir: Path):
        runner.failures["hdiutil create"] = "Resource busy"
        with pytest.raises(CommandError):
            create_dmg(runner, tmp_dir, "vol", tmp_dir / "out.dmg", sleep=lambda _: None)
        assert runner.commands.count(runner.find("hdiutil create")["command"]) == 3

    def test_temp_removed_when_convert_fails(self, runner, tmp_dir: Path):
        out = tmp_dir / "out.dmg"
        temp = tmp_dir / "out.dmg.temp.dmg"
        runner.effects["hdiutil create"] = lambda args, cwd: temp.write_text("img")
        runner.failures["hdiutil convert"] = "bad image"
        with pytest.raises(CommandError):
            create_dmg(runner, tmp_dir, "vol", out)
        assert not temp.exists()
