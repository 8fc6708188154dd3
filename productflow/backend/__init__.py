"""Data access for the hosted catalog database.

- postgrest: BackendClient, talks to the project's REST endpoint
- memory: MemoryBackend, in-process tables for dry runs and tests
"""

from ..config.models import BackendSettings
from .base import CatalogBackend, BackendError, In, ILike
from .client import BackendClient
from .memory import MemoryBackend


def get_backend(settings: BackendSettings, dry_run: bool = False) -> CatalogBackend:
    """Get the backend for a run: in memory for dry runs, HTTP otherwise."""
    if dry_run:
        return MemoryBackend()
    return BackendClient(settings)


__all__ = [
    "CatalogBackend",
    "BackendError",
    "In",
    "ILike",
    "BackendClient",
    "MemoryBackend",
    "get_backend",
]
