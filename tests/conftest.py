"""Shared pytest fixtures for piecemeal tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    MakeSite: TypeAlias = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_site(tmp_path: Path) -> MakeSite:
    """Factory fixture: write ``{relative_path: content}`` under a site root.

    Returns the site root. Parent directories are created as needed.
    """

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "site"
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(exist_ok=True)
        return root

    return _make
