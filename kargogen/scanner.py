"""Service discovery over a directory of per-service folders."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .logging import get_logger
from .naming import is_dns_label
from .stores import FileStore, LocalFileStore


class DiscoveryError(RuntimeError):
    """Raised when a required input or output directory is missing."""


class ServiceScanner:
    """Lists the service directories a run should process."""

    def __init__(self, store: FileStore | None = None) -> None:
        self.store = store or LocalFileStore()
        self.logger = get_logger("scanner")

    def scan(self, root: Path, service_filter: str | None = None) -> List[str]:
        """Return sorted service names under ``root``, optionally narrowed to one."""
        if not self.store.is_dir(root):
            raise DiscoveryError(f"Directory not found: {root}")

        names = [name for name in self.store.list_dirs(root) if not name.startswith(".")]
        names.sort()
        if service_filter:
            names = [name for name in names if name == service_filter]
            if not names:
                self.logger.warning("No service named '%s' found under %s", service_filter, root)

        for name in names:
            if not is_dns_label(name):
                self.logger.warning(
                    "Service directory '%s' is not a valid DNS label; generated names may be rejected",
                    name,
                )
        return names


__all__ = ["DiscoveryError", "ServiceScanner"]
