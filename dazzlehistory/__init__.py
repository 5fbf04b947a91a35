"""DazzleHistory - Branching navigation history.

DazzleHistory keeps every location a user has visited in a tree with one
movable "current" position. Going back and then somewhere new keeps the old
branch instead of discarding it, and the most recently visited branch is
always the default way forward.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlehistory import HistoryTree

    tree = HistoryTree()
    tree.add_child("home")
    tree.add_child("docs")
    tree.back().add_child("blog")     # "docs" stays reachable
    tree.back().go_to_child("docs")
━━━━━━━━━━━━━━━━━━━━━━━━━━

Payloads are opaque. Equality is a caller-supplied test (``==`` by
default) used to merge repeat visits instead of duplicating them.
"""

import logging

__version__ = "0.1.0"

from .config import (
    HistoryConfig,
    MapConfig,
    OutputMode,
    default_test,
)
from .errors import (
    HistoryError,
    CannotDeleteRootError,
    StaleNodeError,
    InvariantViolationError,
    ConfigurationError,
)
from .core import (
    HistoryNode,
    NodeStore,
    HistoryAdapter,
    CONTINUE,
    Stop,
    DepthFirstPreOrderTraverser,
    map_tree,
    walk,
    find_first,
)
from .tree import HistoryTree
from .navigation import back, forward, go_to_child, go_to_node
from .mutation import add_child, delete_child, delete_node, clear, replace_root
from .query import (
    all_nodes,
    parent_nodes,
    forward_children_nodes,
    children_nodes,
    find_data,
    depth,
    size,
    current_data,
    all_data,
    parent_data,
    forward_children_data,
    children_data,
    tree_outline,
    get_tree_stats,
)
from .validation import check_invariants, find_invariant_violations

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Config
    "HistoryConfig",
    "MapConfig",
    "OutputMode",
    "default_test",
    # Errors
    "HistoryError",
    "CannotDeleteRootError",
    "StaleNodeError",
    "InvariantViolationError",
    "ConfigurationError",
    # Core
    "HistoryNode",
    "NodeStore",
    "HistoryAdapter",
    "CONTINUE",
    "Stop",
    "DepthFirstPreOrderTraverser",
    "map_tree",
    "walk",
    "find_first",
    "HistoryTree",
    # Navigation
    "back",
    "forward",
    "go_to_child",
    "go_to_node",
    # Mutation
    "add_child",
    "delete_child",
    "delete_node",
    "clear",
    "replace_root",
    # Queries
    "all_nodes",
    "parent_nodes",
    "forward_children_nodes",
    "children_nodes",
    "find_data",
    "depth",
    "size",
    "current_data",
    "all_data",
    "parent_data",
    "forward_children_data",
    "children_data",
    "tree_outline",
    "get_tree_stats",
    # Validation
    "check_invariants",
    "find_invariant_violations",
]
