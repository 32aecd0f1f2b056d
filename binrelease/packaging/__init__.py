"""Renderers for package formats and package-manager manifests."""
