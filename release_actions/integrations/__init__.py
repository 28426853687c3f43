"""Integrations with git and the GitHub Actions runner."""
