"""External command execution.

All shelling out goes through a ``CommandRunner`` so that release flows can
be exercised without cargo, nfpm, cosign or hdiutil installed.  The default
``SubprocessRunner`` wraps :mod:`subprocess`; tests substitute a recording
fake.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from binrelease.core.errors import CommandError

logger = logging.getLogger(__name__)


def format_command(program: str, args: Sequence[str]) -> str:
    return " ".join([program, *args])


def command_exists(name: str) -> bool:
    """Return ``True`` if *name* resolves to an executable on ``PATH``."""
    return shutil.which(name) is not None


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for command execution backends."""

    def run(
        self,
        program: str,
        args: Sequence[str],
        *,
        capture: bool = True,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run *program* with *args* and return the completed process.

        Parameters
        ----------
        program:
            Executable name or path.
        args:
            Arguments, not including the program itself.
        capture:
            Capture stdout/stderr.  When ``False`` the child inherits the
            parent's streams so tool progress is visible in the job log.
        cwd:
            Working directory for the child.
        env:
            Variables added on top of the current environment.

        Raises
        ------
        CommandError
            If the program cannot be started or exits non-zero.
        """
        ...


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class SubprocessRunner:
    """Runs commands with :func:`subprocess.run`."""

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
        logger.debug("Running: %s", command)

        child_env = {**os.environ, **env} if env else None
        try:
            result = subprocess.run(
                [program, *args],
                capture_output=capture,
                cwd=cwd,
                env=child_env,
                check=False,
            )
        except OSError as exc:
            raise CommandError(command, str(exc)) from exc

        if result.returncode != 0:
            if capture:
                stderr = result.stderr.decode("utf-8", errors="replace")
            else:
                stderr = f"exit code: {result.returncode}"
            raise CommandError(command, stderr)
        return result


def run_with_retry(
    runner: CommandRunner,
    program: str,
    args: Sequence[str],
    *,
    attempts: int = 3,
    delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> subprocess.CompletedProcess[bytes]:
    """Run an idempotent command, retrying on failure.

    At most *attempts* runs are made with a fixed *delay* between them.
    The last ``CommandError`` is re-raised once the attempts are used up.
    """
    for attempt in range(1, attempts + 1):
        try:
            return runner.run(program, args)
        except CommandError:
            if attempt >= attempts:
                raise
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.0fs...",
                format_command(program, args[:1]),
                attempt,
                attempts,
                delay,
            )
            sleep(delay)
    raise ValueError("attempts must be at least 1")
