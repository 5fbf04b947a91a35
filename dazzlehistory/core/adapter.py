"""HistoryAdapter for DazzleHistory.

The adapter provides the navigation logic for history trees, decoupling the
node representation (a plain data container with handles) from the
structural operations that read and rewrite parent/child links.

Every link update goes through this class so that the two directions of a
link (a child's ``parent_key`` and the parent's ``child_keys``) are always
changed together.
"""

from typing import Callable, Iterator, List, Optional

from .node import HistoryNode
from .store import NodeStore


class HistoryAdapter:
    """Navigates and rewires the nodes held in a NodeStore."""

    def __init__(self, store: NodeStore):
        """Initialize adapter with a node store.

        Args:
            store: The arena holding the tree's nodes
        """
        self.store = store

    # Navigation

    def get_children(self, node: HistoryNode) -> Iterator[HistoryNode]:
        """Get an iterator of child nodes, most recently visited first.

        Args:
            node: The parent node

        Returns:
            Iterator yielding child HistoryNode instances
        """
        for key in list(node.child_keys):
            yield self.store.get(key)

    def get_parent(self, node: HistoryNode) -> Optional[HistoryNode]:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent HistoryNode or None if node is root
        """
        if node.parent_key is None:
            return None
        return self.store.get(node.parent_key)

    def first_child(self, node: HistoryNode) -> Optional[HistoryNode]:
        """Get the default forward target of a node, or None if childless."""
        if not node.child_keys:
            return None
        return self.store.get(node.child_keys[0])

    def find_child(self, node: HistoryNode,
                   predicate: Callable[[HistoryNode], bool]) -> Optional[HistoryNode]:
        """Get the first child of ``node`` satisfying ``predicate``.

        Only immediate children are examined, in list order.
        """
        for child in self.get_children(node):
            if predicate(child):
                return child
        return None

    def get_ancestors(self, node: HistoryNode) -> List[HistoryNode]:
        """Ancestors of ``node``, nearest first, ending with the root."""
        ancestors = []
        parent = self.get_parent(node)
        while parent is not None:
            ancestors.append(parent)
            parent = self.get_parent(parent)
        return ancestors

    def is_ancestor(self, ancestor: HistoryNode, node: Optional[HistoryNode]) -> bool:
        """Check whether ``ancestor`` lies strictly above ``node``."""
        if node is None:
            return False
        parent = self.get_parent(node)
        while parent is not None:
            if parent is ancestor:
                return True
            parent = self.get_parent(parent)
        return False

    # Tree modification

    def add_child(self, parent: HistoryNode, child: HistoryNode,
                  index: Optional[int] = 0) -> None:
        """Link ``child`` under ``parent``.

        Args:
            parent: The parent node
            child: A node that currently has no parent
            index: Position in the child list (0 = front, None = end)

        Raises:
            ValueError: If the child is still linked elsewhere
        """
        if child.parent_key is not None:
            raise ValueError(f"Node {child.key} already has parent {child.parent_key}")
        if child is parent or self.is_ancestor(child, parent):
            raise ValueError(f"Linking node {child.key} under {parent.key} would create a cycle")
        if index is None:
            parent.child_keys.append(child.key)
        else:
            parent.child_keys.insert(index, child.key)
        child.parent_key = parent.key

    def remove_child(self, parent: HistoryNode, child: HistoryNode) -> int:
        """Unlink ``child`` from ``parent``.

        Args:
            parent: The parent node
            child: The child node to remove

        Returns:
            The position the child occupied in the parent's list
        """
        index = parent.child_keys.index(child.key)
        del parent.child_keys[index]
        child.parent_key = None
        return index

    def move_to_front(self, parent: HistoryNode, child: HistoryNode) -> None:
        """Make ``child`` the first (most recently visited) child of ``parent``."""
        if parent.child_keys and parent.child_keys[0] == child.key:
            return
        parent.child_keys.remove(child.key)
        parent.child_keys.insert(0, child.key)

    def splice_children(self, parent: HistoryNode, node: HistoryNode) -> List[HistoryNode]:
        """Replace ``node`` in its parent's child list by its own children.

        The spliced children keep their order and their subtrees; their
        parent handle is rewritten to ``parent``. ``node`` ends up with no
        links at all.

        Returns:
            The spliced children
        """
        index = self.remove_child(parent, node)
        children = list(self.get_children(node))
        for child in children:
            child.parent_key = parent.key
        parent.child_keys[index:index] = [child.key for child in children]
        node.child_keys = []
        return children
