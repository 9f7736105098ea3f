"""Storage backends for generated resource sets."""

from .filesystem import FileStore, LocalFileStore

__all__ = ["FileStore", "LocalFileStore"]
