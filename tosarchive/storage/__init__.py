"""Result persistence package."""

from tosarchive.storage.results import ResultStore

__all__ = ["ResultStore"]
