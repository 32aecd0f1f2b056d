"""Homebrew formula rendering."""

from __future__ import annotations

from pathlib import Path

from binrelease.models.manifests import FormulaConfig


def to_class_name(name: str) -> str:
    """Convert a binary name to a Ruby class name (``my-tool`` -> ``MyTool``)."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("-"))


def _platform_block(
    os_block: str,
    arm64: tuple[str, str],
    x64: tuple[str, str],
) -> str:
    """Render an ``on_macos``/``on_linux`` block for the arches provided.

    Each arch is a ``(url, sha256)`` pair and only counts when both are set.
    """
    has_arm64 = all(arm64)
    has_x64 = all(x64)
    if not (has_arm64 or has_x64):
        return ""

    def source(indent: str, pair: tuple[str, str]) -> str:
        url, sha256 = pair
        return f'{indent}url "{url}"\n{indent}sha256 "{sha256}"\n'

    block = f"  {os_block} do\n"
    if has_arm64 and has_x64:
        block += "    if Hardware::CPU.arm?\n"
        block += source("      ", arm64)
        block += "    else\n"
        block += source("      ", x64)
        block += "    end\n"
    elif has_arm64:
        block += "    on_arm do\n" + source("      ", arm64) + "    end\n"
    else:
        block += "    on_intel do\n" + source("      ", x64) + "    end\n"
    return block + "  end\n\n"


def generate_formula(config: FormulaConfig) -> str:
    """Render the formula text for a prebuilt-binary Homebrew package."""
    formula = f"class {config.formula_class} < Formula\n"
    formula += f'  desc "{config.description}"\n'
    if config.homepage:
        formula += f'  homepage "{config.homepage}"\n'
    formula += f'  version "{config.version}"\n'
    if config.license:
        formula += f'  license "{config.license}"\n'
    formula += "\n"

    formula += _platform_block(
        "on_macos",
        (config.macos_arm64_url, config.macos_arm64_sha256),
        (config.macos_x64_url, config.macos_x64_sha256),
    )
    formula += _platform_block(
        "on_linux",
        (config.linux_arm64_url, config.linux_arm64_sha256),
        (config.linux_x64_url, config.linux_x64_sha256),
    )

    formula += "  def install\n"
    formula += f'    bin.install "{config.binary_name}"\n'
    formula += "  end\n\n"
    formula += "  test do\n"
    formula += f'    system "#{{bin}}/{config.binary_name}", "--version"\n'
    formula += "  end\n"
    formula += "end\n"
    return formula


def write_formula(config: FormulaConfig, output_dir: Path | str) -> Path:
    """Write ``<binary_name>.rb`` into *output_dir* and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    formula_file = output_dir / f"{config.binary_name}.rb"
    formula_file.write_text(generate_formula(config), encoding="utf-8")
    return formula_file
