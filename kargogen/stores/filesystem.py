"""File access used by the generator and deployer."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Protocol


class FileStore(Protocol):
    """Minimal filesystem surface needed to generate and read resource sets."""

    def exists(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...

    def list_dirs(self, path: Path) -> List[str]:
        ...

    def read_text(self, path: Path) -> str:
        ...

    def write_text(self, path: Path, content: str) -> None:
        ...

    def make_dirs(self, path: Path) -> None:
        ...

    def remove_tree(self, path: Path) -> None:
        ...


class LocalFileStore:
    """FileStore backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def list_dirs(self, path: Path) -> List[str]:
        return sorted(entry.name for entry in path.iterdir() if entry.is_dir())

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        # newline="" keeps output byte-identical across platforms.
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)


__all__ = ["FileStore", "LocalFileStore"]
