"""Plumbing shared by every command: settings, logging, error reporting."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NamedTuple

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from binrelease.config import ReleaseSettings, load_settings
from binrelease.core.errors import ConfigurationError, ReleaseError
from binrelease.core.outputs import ActionOutputs
from binrelease.core.process import CommandRunner, SubprocessRunner

err_console = Console(stderr=True)


class Step(NamedTuple):
    """Everything a command needs to run one pipeline step."""

    settings: ReleaseSettings
    runner: CommandRunner
    outputs: ActionOutputs


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr at *level* (e.g. ``DEBUG``)."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def open_step() -> Step:
    """Load settings from the environment and wire up runner and outputs.

    Raises
    ------
    ConfigurationError
        If an environment value cannot be parsed (e.g. ``ARCHIVE=maybe``).
    """
    try:
        settings = load_settings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc
    configure_logging(settings.log_level)
    return Step(settings, SubprocessRunner(), ActionOutputs(settings.github_output))


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn release and I/O failures into ``ERROR:`` on stderr and exit code 1."""
    try:
        yield
    except (ReleaseError, OSError) as exc:
        err_console.print(f"[red]ERROR:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def require(value: str, message: str) -> str:
    if not value:
        raise ConfigurationError(message)
    return value
