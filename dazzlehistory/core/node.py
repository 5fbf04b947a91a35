"""HistoryNode for DazzleHistory.

The HistoryNode is intentionally kept simple - it's primarily a data container.
Its structural links are integer handles into the tree's NodeStore rather
than object references; navigation logic lives in the HistoryAdapter.
"""

from typing import Any, List, Optional


class HistoryNode:
    """A vertex of a history tree.

    Holds the host's payload plus the handles that place it in the tree:
    ``parent_key`` (None for the root or a detached node) and the ordered
    ``child_keys``. The first child is the most recently visited one and is
    where ``forward`` goes by default.

    Nodes are created by the NodeStore only. Once removed from the tree a
    node is detached: ``attached`` is False and its links are cleared, but
    ``key`` and ``data`` remain readable.
    """

    __slots__ = ('key', 'data', 'parent_key', 'child_keys', 'attached')

    def __init__(self, key: int, data: Any, parent_key: Optional[int] = None):
        self.key = key
        self.data = data
        self.parent_key = parent_key
        self.child_keys: List[int] = []
        self.attached = True

    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return not self.child_keys

    def detach(self) -> None:
        """Clear structural links once the node leaves the tree."""
        self.parent_key = None
        self.child_keys = []
        self.attached = False

    def __repr__(self) -> str:
        state = "" if self.attached else ", detached"
        return f"{self.__class__.__name__}(key={self.key!r}, data={self.data!r}{state})"
