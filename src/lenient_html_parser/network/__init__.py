"""Network collaborator for retrieving HTML documents."""

from .client import BrowserClient, fetch

__all__ = [
    "BrowserClient",
    "fetch",
]
