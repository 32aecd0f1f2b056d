"""Read the crate name and version from a Cargo manifest."""

from __future__ import annotations

import tomllib
from pathlib import Path

from binrelease.core.errors import ConfigurationError
from binrelease.models.artifacts import CargoInfo


def parse_cargo_info(content: str) -> CargoInfo:
    """Extract name and version from manifest text.

    The version comes from ``[package]`` or, for workspace-inherited
    versions, from ``[workspace.package]``.  Missing values are ``""``.
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"TOML parse error: {exc}") from exc

    package = data.get("package") or {}
    workspace_package = (data.get("workspace") or {}).get("package") or {}

    name = package.get("name")
    version = package.get("version")
    if not isinstance(version, str):
        version = workspace_package.get("version")

    return CargoInfo(
        name=name if isinstance(name, str) else "",
        version=version if isinstance(version, str) else "",
    )


def read_cargo_info(manifest_path: Path | str = "Cargo.toml") -> CargoInfo:
    try:
        content = Path(manifest_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"could not read {manifest_path}: {exc}") from exc
    return parse_cargo_info(content)
