import pytest

from btree import BTree


@pytest.fixture(autouse=True)
def validate_after_write(monkeypatch):
    """Audit every tree invariant after each insert/delete."""
    monkeypatch.setattr(BTree, "_ENABLE_VALIDATE_AFTER_WRITE", True)


@pytest.fixture
def tree():
    return BTree(3)
