"""Pytest fixtures for DazzleHistory tests."""

import pytest

from history_fixtures import build_sample_tree

from dazzlehistory import HistoryTree


@pytest.fixture
def empty_tree():
    """A fresh, empty history tree."""
    return HistoryTree()


@pytest.fixture
def sample_tree():
    """The A/E/F/B/D/C sample history, current at F."""
    return build_sample_tree()
