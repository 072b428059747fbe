from __future__ import annotations

from pathlib import Path

import pytest

from tests.infrastructure import Item, Order, write


@pytest.fixture
def order() -> Order:
    return Order(
        customer="Ada",
        paid=True,
        items=[
            Item(name="tea", price=3, tags=["hot", "green"]),
            Item(name="cake", price=5),
        ],
    )


@pytest.fixture
def make_file(tmp_path: Path):
    """Factory writing dedented files into a temporary directory."""
    def _make(name: str, text: str) -> Path:
        return write(tmp_path / name, text)
    return _make
