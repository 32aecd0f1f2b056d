"""binrelease: release automation for Rust binaries in CI.

Turns a compiled binary into checksummed, signed, multi-format artifacts
(tarballs, zips, .deb/.rpm/.apk, .dmg, .msi) and generates Homebrew, AUR
and Winget manifests for them.  The ``core`` package holds the checksum
engine and platform classifier; everything else orchestrates external
tools around them.
"""

__version__ = "0.1.0"

from binrelease.cli.app import app as cli

__all__ = ["cli", "__version__"]
