"""Release orchestration: builds, installers, signing, SBOMs and release notes."""
