from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.memory_store import MemoryFileStore
from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a reusable services/templates workspace rooted at the pytest tmp_path."""
    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def memory_store() -> MemoryFileStore:
    """Provide an empty in-memory FileStore."""
    return MemoryFileStore()
