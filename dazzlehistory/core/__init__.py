"""Core building blocks for DazzleHistory.

This module contains the node container, the arena that owns nodes, the
adapter that rewires links, and the traversal engine.
"""

from .node import HistoryNode
from .store import NodeStore
from .adapter import HistoryAdapter
from .traverser import (
    CONTINUE,
    Stop,
    DepthFirstPreOrderTraverser,
    map_tree,
    walk,
    find_first,
)

__all__ = [
    "HistoryNode",
    "NodeStore",
    "HistoryAdapter",
    "CONTINUE",
    "Stop",
    "DepthFirstPreOrderTraverser",
    "map_tree",
    "walk",
    "find_first",
]
