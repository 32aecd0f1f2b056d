"""binrelease CLI: Typer-based command-line interface.

Provides the ``binrelease`` command with one subcommand per pipeline step:
changelog and version checks, builds and installers, signing, SBOMs,
package-manager manifests, and release-note assembly.

All terminal output uses Rich; machine-readable results go to the file
named by ``GITHUB_OUTPUT``.
"""
