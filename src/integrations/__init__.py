"""Integrations with git and the GitHub Gist API."""

from integrations.gist import GistClient

__all__ = [
    "GistClient",
]
