"""macOS disk image staging and creation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from binrelease.core.process import CommandRunner, run_with_retry

logger = logging.getLogger(__name__)

# hdiutil create intermittently fails with "Resource busy" on CI runners.
HDIUTIL_ATTEMPTS = 3
HDIUTIL_RETRY_DELAY = 2.0


def install_script(binary_name: str) -> str:
    return f"""#!/bin/bash
# Install {binary_name} to /usr/local/bin
set -e

INSTALL_DIR="/usr/local/bin"
BINARY="{binary_name}"
SCRIPT_DIR="$(cd "$(dirname "$0")" && pwd)"

if [ ! -f "$SCRIPT_DIR/$BINARY" ]; then
    echo "Error: $BINARY not found in $SCRIPT_DIR"
    exit 1
fi

echo "Installing $BINARY to $INSTALL_DIR..."
sudo mkdir -p "$INSTALL_DIR"
sudo cp "$SCRIPT_DIR/$BINARY" "$INSTALL_DIR/$BINARY"
sudo chmod +x "$INSTALL_DIR/$BINARY"
echo "Done. Run '$BINARY --help' to get started.\""""


def uninstall_script(binary_name: str) -> str:
    return f"""#!/bin/bash
# Uninstall {binary_name} from /usr/local/bin
set -e

INSTALL_DIR="/usr/local/bin"
BINARY="{binary_name}"

if [ -f "$INSTALL_DIR/$BINARY" ]; then
    echo "Removing $BINARY from $INSTALL_DIR..."
    sudo rm -f "$INSTALL_DIR/$BINARY"
    echo "Done. $BINARY has been uninstalled."
else
    echo "$BINARY is not installed in $INSTALL_DIR"
fi"""


def write_scripts(directory: Path | str, binary_name: str) -> tuple[Path, Path]:
    """Write executable ``install.sh`` and ``uninstall.sh`` into *directory*."""
    directory = Path(directory)
    paths = []
    for name, text in (
        ("install.sh", install_script(binary_name)),
        ("uninstall.sh", uninstall_script(binary_name)),
    ):
        path = directory / name
        path.write_text(text, encoding="utf-8")
        path.chmod(0o755)
        paths.append(path)
    return paths[0], paths[1]


def create_dmg(
    runner: CommandRunner,
    src_dir: Path | str,
    volume_name: str,
    output_path: Path | str,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Path:
    """Build a compressed (UDZO) disk image from *src_dir*.

    A read-write image is created first and then converted.  Only the
    create step is retried; the temporary image is removed either way.
    """
    output_path = Path(output_path)
    temp_dmg = output_path.with_name(output_path.name + ".temp.dmg")

    runner.run("sync", [])
    run_with_retry(
        runner,
        "hdiutil",
        [
            "create",
            "-srcfolder",
            str(src_dir),
            "-volname",
            volume_name,
            "-fs",
            "HFS+",
            "-format",
            "UDRW",
            "-ov",
            str(temp_dmg),
        ],
        attempts=HDIUTIL_ATTEMPTS,
        delay=HDIUTIL_RETRY_DELAY,
        sleep=sleep,
    )
    try:
        runner.run(
            "hdiutil",
            ["convert", str(temp_dmg), "-format", "UDZO", "-o", str(output_path)],
        )
    finally:
        temp_dmg.unlink(missing_ok=True)
    return output_path
