"""nfpm configuration rendering for .deb, .rpm and .apk packages.

The YAML is assembled as text in a fixed field order so that the generated
``nfpm.yaml`` is stable and easy to diff in job logs.
"""

from __future__ import annotations

from pathlib import Path

from binrelease.config import parse_comma_list
from binrelease.models.manifests import PackageMetadata, default_description
from binrelease.models.platform import PackageFormat

DEPENDENCY_KEYS = ("depends", "recommends", "suggests", "conflicts", "replaces", "provides")

DEFAULT_RELEASE = {
    PackageFormat.DEB: "",
    PackageFormat.RPM: "1",
    PackageFormat.APK: "0",
}


def _absolute(path: Path) -> str:
    return str(path.resolve()) if path.exists() else str(path)


def format_dependency_list(key: str, raw: str | list[str]) -> str:
    """Render a YAML list of quoted items, or ``""`` when there are none."""
    items = parse_comma_list(raw) if isinstance(raw, str) else [i for i in raw if i]
    if not items:
        return ""
    return f"{key}:\n" + "".join(f'  - "{item}"\n' for item in items)


def nfpm_base_config(
    name: str, version: str, arch: str, metadata: PackageMetadata
) -> str:
    description = metadata.description or default_description(name)
    config = (
        f'name: "{name}"\n'
        f'arch: "{arch}"\n'
        "platform: linux\n"
        f'version: "{version}"\n'
        f'maintainer: "{metadata.maintainer}"\n'
        f'description: "{description}"\n'
    )
    if metadata.homepage:
        config += f'homepage: "{metadata.homepage}"\n'
    if metadata.license:
        config += f'license: "{metadata.license}"\n'
    if metadata.vendor:
        config += f'vendor: "{metadata.vendor}"\n'
    return config


def _content_entry(src: str, dst: str, mode: str | None = None) -> str:
    entry = f'  - src: "{src}"\n    dst: "{dst}"\n'
    if mode:
        entry += f"    file_info:\n      mode: {mode}\n"
    return entry


def nfpm_contents_section(
    name: str,
    binary_path: str,
    metadata: PackageMetadata,
    root: Path | str = ".",
) -> str:
    """Render ``contents:`` with the binary, docs and extra ``src:dst`` pairs.

    ``LICENSE*`` files and ``README.md`` found in *root* are installed under
    ``/usr/share/doc/<name>/``.  Extra pairs that are not exactly
    ``src:dst`` are skipped.
    """
    root = Path(root)
    config = "\ncontents:\n" + _content_entry(binary_path, f"/usr/bin/{name}", "0755")

    doc_dir = f"/usr/share/doc/{name}"
    for license_file in sorted(root.glob("LICENSE*")):
        config += _content_entry(
            _absolute(license_file), f"{doc_dir}/{license_file.name}", "0644"
        )
    readme = root / "README.md"
    if readme.exists():
        config += _content_entry(_absolute(readme), f"{doc_dir}/README.md", "0644")

    for pair in metadata.contents:
        parts = pair.split(":")
        if len(parts) != 2:
            continue
        src, dst = parts
        src_path = Path(src) if Path(src).is_absolute() else root / src
        config += _content_entry(
            _absolute(src_path) if src_path.exists() else src, dst
        )

    return config


def nfpm_dependencies_section(metadata: PackageMetadata) -> str:
    return "".join(
        format_dependency_list(key, getattr(metadata, key)) for key in DEPENDENCY_KEYS
    )


def package_release(package_format: PackageFormat, metadata: PackageMetadata) -> str:
    return metadata.release or DEFAULT_RELEASE[package_format]


def render_nfpm_config(
    package_format: PackageFormat | str,
    *,
    name: str,
    version: str,
    arch: str,
    binary_path: str,
    metadata: PackageMetadata,
    root: Path | str = ".",
) -> str:
    """Render a complete ``nfpm.yaml`` for one package format.

    Parameters
    ----------
    package_format:
        ``deb`` adds section/priority; ``rpm`` adds the release number and
        an ``rpm:`` block with group, summary and gzip compression; ``apk``
        adds nothing format-specific.
    binary_path:
        Absolute path of the binary to install as ``/usr/bin/<name>``.
    """
    package_format = PackageFormat(package_format)
    config = nfpm_base_config(name, version, arch, metadata)

    if package_format is PackageFormat.DEB:
        config += f'section: "{metadata.section}"\n'
        config += f'priority: "{metadata.priority}"\n'
    elif package_format is PackageFormat.RPM:
        config += f'release: "{package_release(package_format, metadata)}"\n'

    config += nfpm_contents_section(name, binary_path, metadata, root)

    if package_format is PackageFormat.RPM:
        summary = metadata.summary or metadata.description or default_description(name)
        config += (
            f'\nrpm:\n  group: "{metadata.group}"\n'
            f'  summary: "{summary}"\n  compression: gzip\n'
        )

    config += nfpm_dependencies_section(metadata)
    return config


def package_artifact_name(
    package_format: PackageFormat | str,
    name: str,
    version: str,
    arch: str,
    release: str = "",
) -> str:
    """File name nfpm is asked to write for the package."""
    package_format = PackageFormat(package_format)
    release = release or DEFAULT_RELEASE[package_format]
    if package_format is PackageFormat.DEB:
        return f"{name}_{version}_{arch}.deb"
    if package_format is PackageFormat.RPM:
        return f"{name}-{version}-{release}.{arch}.rpm"
    return f"{name}-{version}-r{release}.apk"
