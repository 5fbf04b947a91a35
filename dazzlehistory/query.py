"""Query operations for DazzleHistory.

Read-only views of a history tree built on the traversal engine, plus
``find_data`` which can optionally record a visit when nothing matches.
Every ``*_nodes`` query has a ``*_data`` twin that projects payloads.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .config import EqualityTest
from .core.node import HistoryNode
from .core.traverser import DepthFirstPreOrderTraverser, find_first, map_tree
from .mutation import add_child

if TYPE_CHECKING:
    from .tree import HistoryTree

logger = logging.getLogger(__name__)


def _identity(node: HistoryNode) -> HistoryNode:
    return node


def _payload(node: HistoryNode) -> Any:
    return node.data


def all_nodes(tree: 'HistoryTree') -> List[HistoryNode]:
    """Every node in pre-order, root first."""
    return map_tree(tree, _identity, flatten=True)


def parent_nodes(tree: 'HistoryTree') -> List[HistoryNode]:
    """Ancestors of current, nearest first, ending with the root."""
    if tree.current is None:
        return []
    return tree.adapter.get_ancestors(tree.current)


def forward_children_nodes(tree: 'HistoryTree') -> List[HistoryNode]:
    """The chain of first children below current, nearest first."""
    chain = []
    if tree.current is None:
        return chain
    child = tree.adapter.first_child(tree.current)
    while child is not None:
        chain.append(child)
        child = tree.adapter.first_child(child)
    return chain


def children_nodes(tree: 'HistoryTree') -> List[HistoryNode]:
    """All descendants of current in pre-order, current excluded."""
    if tree.current is None:
        return []
    return map_tree(tree.current, _identity, tree.adapter,
                    flatten=True, include_root=False)


def find_data(tree: 'HistoryTree', data: Any,
              test: Optional[EqualityTest] = None,
              ensure: bool = False) -> Optional[HistoryNode]:
    """First node in pre-order, root included, whose payload matches ``data``.

    With ``ensure`` a miss falls back to ``add_child(tree, data, test)``.
    Note that the new node is added below the *current* node, not wherever
    it would logically belong, and that current moves into it.

    Args:
        tree: The history tree
        data: Payload to look for
        test: Function(data, node_data) -> bool; tree default when None
        ensure: Add ``data`` below current when nothing matches

    Returns:
        The matching (or added) node, or None
    """
    test = tree.resolve_test(test)
    node = find_first(tree, lambda candidate: test(data, candidate.data))
    if node is None and ensure:
        logger.debug("find_data: no node matches %r, adding below current", data)
        node = add_child(tree, data, test)
    return node


def depth(tree: 'HistoryTree') -> int:
    """Number of ancestors of current; 0 for the root and for an empty tree."""
    return len(parent_nodes(tree))


def size(tree: 'HistoryTree') -> int:
    """Number of nodes in the tree."""
    return len(all_nodes(tree))


# Payload projections

def current_data(tree: 'HistoryTree') -> Any:
    """Payload of current, or None on an empty tree."""
    return tree.current.data if tree.current is not None else None


def all_data(tree: 'HistoryTree') -> List[Any]:
    return map_tree(tree, _payload, flatten=True)


def parent_data(tree: 'HistoryTree') -> List[Any]:
    return [node.data for node in parent_nodes(tree)]


def forward_children_data(tree: 'HistoryTree') -> List[Any]:
    return [node.data for node in forward_children_nodes(tree)]


def children_data(tree: 'HistoryTree') -> List[Any]:
    if tree.current is None:
        return []
    return map_tree(tree.current, _payload, tree.adapter,
                    flatten=True, include_root=False)


def tree_outline(tree: 'HistoryTree', max_depth: Optional[int] = None) -> List[Any]:
    """Nested payload structure ``[data, *children]`` mirroring the tree.

    ``max_depth`` cuts the outline off that many levels below the root,
    for history views that only show the first few branches.

    Example:
        >>> tree_outline(tree)
        ['A', ['B', ['D'], ['C']]]
        >>> tree_outline(tree, max_depth=1)
        ['A', ['B']]
    """
    return map_tree(tree, _payload, max_depth=max_depth)


def get_tree_stats(tree: 'HistoryTree') -> Dict[str, Any]:
    """Get statistics about a history tree.

    Returns:
        Dictionary with tree statistics

    Example:
        >>> stats = get_tree_stats(tree)
        >>> print(f"Total nodes: {stats['total_nodes']}")
        >>> print(f"Branch points: {stats['branch_points']}")
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'branch_points': 0,
        'max_depth': 0,
        'depths': {},
        'current_depth': depth(tree),
    }

    if tree.root is not None:
        traverser = DepthFirstPreOrderTraverser(tree.adapter)
        for node, node_depth in traverser.traverse(tree.root):
            stats['total_nodes'] += 1

            if node.is_leaf():
                stats['leaf_nodes'] += 1
            elif len(node.child_keys) > 1:
                stats['branch_points'] += 1

            stats['max_depth'] = max(stats['max_depth'], node_depth)
            stats['depths'][node_depth] = stats['depths'].get(node_depth, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    stats['average_branching'] = (
        (stats['total_nodes'] - 1) / stats['internal_nodes']
        if stats['internal_nodes'] > 0 else 0
    )

    return stats
