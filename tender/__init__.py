"""tender - scheduled autonomous OpenCode runs as GitHub Actions workflows."""

__version__ = "0.4.0"
