"""Node arena for DazzleHistory.

Nodes are stored in a table keyed by integer handles. Parent and child links
hold handles, never node references, so the tree has no reference cycles and
a removed node can be recognised by its handle no longer being present.
"""

from typing import Any, Dict, Iterator, Optional

from ..errors import StaleNodeError
from .node import HistoryNode


class NodeStore:
    """Growable table of HistoryNode instances indexed by handle.

    Handles are allocated from a monotonically increasing counter and are
    never reused, even after a node is released or the store is cleared.
    """

    def __init__(self):
        self._nodes: Dict[int, HistoryNode] = {}
        self._last_key = 0

    def create(self, data: Any, parent_key: Optional[int] = None) -> HistoryNode:
        """Allocate a new node.

        The node is registered in the table but not linked into any
        parent's child list; that is the adapter's job.

        Args:
            data: Payload for the node
            parent_key: Handle of the parent, None for a root

        Returns:
            The new HistoryNode
        """
        self._last_key += 1
        node = HistoryNode(self._last_key, data, parent_key)
        self._nodes[node.key] = node
        return node

    def get(self, key: Optional[int]) -> HistoryNode:
        """Look up a node by handle.

        Raises:
            StaleNodeError: If the handle is not in the table
        """
        try:
            return self._nodes[key]
        except KeyError:
            raise StaleNodeError(key) from None

    def find(self, key: Optional[int]) -> Optional[HistoryNode]:
        """Look up a node by handle, returning None when absent."""
        return self._nodes.get(key)

    def owns(self, node: HistoryNode) -> bool:
        """Check that ``node`` is the live node registered under its key."""
        return self._nodes.get(node.key) is node

    def release(self, node: HistoryNode) -> None:
        """Remove a single node from the table and detach it.

        Children are not touched; callers relink or release them first.
        """
        if self._nodes.pop(node.key, None) is not None:
            node.detach()

    def release_subtree(self, node: HistoryNode) -> int:
        """Remove a node and all of its descendants from the table.

        Returns:
            Number of nodes released
        """
        released = 0
        stack = [node]
        while stack:
            current = stack.pop()
            for key in current.child_keys:
                child = self._nodes.get(key)
                if child is not None:
                    stack.append(child)
            if self._nodes.pop(current.key, None) is not None:
                released += 1
            current.detach()
        return released

    def clear(self) -> None:
        """Release every node."""
        for node in self._nodes.values():
            node.detach()
        self._nodes.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[HistoryNode]:
        return iter(list(self._nodes.values()))
