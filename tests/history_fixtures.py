"""Shared tree builders for the DazzleHistory test suite."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlehistory import HistoryConfig, HistoryTree


def build_sample_tree(config=None) -> HistoryTree:
    """Build the sample history used across the suite.

    Structure (children in list order, most recent first):
    A
    ├── E
    │   └── F      <- current
    └── B
        ├── D
        └── C

    Pre-order: A, E, F, B, D, C
    """
    tree = HistoryTree(config or HistoryConfig())
    tree.add_child("A")
    tree.add_child("B")
    tree.add_child("C")
    tree.back()
    tree.add_child("D")
    tree.back(2)
    tree.add_child("E")
    tree.add_child("F")
    return tree


def build_path(payloads, config=None) -> HistoryTree:
    """Build a single-branch history visiting ``payloads`` in order."""
    tree = HistoryTree(config or HistoryConfig())
    for payload in payloads:
        tree.add_child(payload)
    return tree


def child_data(tree: HistoryTree, data) -> list:
    """Payloads of the children of the first node holding ``data``."""
    node = tree.find_data(data)
    return [child.data for child in tree.adapter.get_children(node)]
