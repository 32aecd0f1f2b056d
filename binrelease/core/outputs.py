"""Step outputs for the calling pipeline.

GitHub Actions collects step outputs from the file named by ``GITHUB_OUTPUT``.
Single-line values are written as ``key=value``; multi-line values use the
heredoc form with a fixed delimiter.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

MULTILINE_DELIMITER = "EOF_BINRELEASE"

RULE_WIDTH = 76


class ActionOutputs:
    """Append-only writer for step outputs.

    With no *path* configured the file is not touched, but every value is
    still recorded in ``values`` so callers can inspect what was emitted.

    Parameters
    ----------
    path:
        Output file, normally ``$GITHUB_OUTPUT``.  ``None`` or ``""``
        disables file writes.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path: Path | None = Path(path) if path else None
        self.values: dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        """Emit a single-line output."""
        self.values[key] = value
        self._append(f"{key}={value}\n")

    def set_multiline(self, key: str, value: str) -> None:
        """Emit a multi-line output using the heredoc form."""
        self.values[key] = value
        self._append(
            f"{key}<<{MULTILINE_DELIMITER}\n{value}\n{MULTILINE_DELIMITER}\n"
        )

    def _append(self, text: str) -> None:
        if self.path is None:
            return
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(text)


def print_rule(console: Console | None = None) -> None:
    """Print the green separator shown above each result listing."""
    (console or Console()).print("-" * RULE_WIDTH + ">", style="green", highlight=False)
