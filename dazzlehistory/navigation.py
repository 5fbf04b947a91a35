"""Navigation operations for DazzleHistory.

These functions move a tree's current position and keep sibling lists in
most-recently-used order, so the branch a user came from is always the
default way forward again. They return the (possibly updated) current node.

The functions do no locking of their own; HistoryTree's methods of the same
name wrap them in the tree's lock.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from .config import EqualityTest
from .core.node import HistoryNode
from .errors import StaleNodeError

if TYPE_CHECKING:
    from .tree import HistoryTree

logger = logging.getLogger(__name__)


def _check_count(count: int) -> None:
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise ValueError(f"count must be a positive integer, got {count!r}")


def back(tree: 'HistoryTree', count: int = 1) -> Optional[HistoryNode]:
    """Move current towards the root.

    Each step makes the node just left the first child of its parent.
    Stops early at the root; a no-op on an empty tree.

    Args:
        tree: The history tree
        count: Maximum number of steps

    Returns:
        The current node after moving
    """
    _check_count(count)
    adapter = tree.adapter
    node = tree.current
    steps = 0

    while node is not None and steps < count:
        parent = adapter.get_parent(node)
        if parent is None:
            break
        adapter.move_to_front(parent, node)
        node = parent
        steps += 1

    if steps:
        tree.current = node
        logger.debug("back: moved %d step(s) to node=%s", steps, node.key)
    return tree.current


def forward(tree: 'HistoryTree', count: int = 1) -> Optional[HistoryNode]:
    """Move current along first children.

    Stops early at a childless node; a no-op on an empty tree.

    Args:
        tree: The history tree
        count: Maximum number of steps

    Returns:
        The current node after moving
    """
    _check_count(count)
    adapter = tree.adapter
    node = tree.current
    steps = 0

    while node is not None and steps < count:
        child = adapter.first_child(node)
        if child is None:
            break
        node = child
        steps += 1

    if steps:
        tree.current = node
        logger.debug("forward: moved %d step(s) to node=%s", steps, node.key)
    return tree.current


def go_to_child(tree: 'HistoryTree', data: Any,
                test: Optional[EqualityTest] = None) -> Optional[HistoryNode]:
    """Enter the child of current whose payload matches ``data``.

    The matching child is moved to the front of its siblings before current
    moves into it, exactly as if it had been the default forward target.

    Args:
        tree: The history tree
        data: Payload to look for
        test: Function(data, child_data) -> bool; tree default when None

    Returns:
        The entered child, or None when no child matches (current unchanged)
    """
    test = tree.resolve_test(test)
    current = tree.current
    if current is None:
        return None

    adapter = tree.adapter
    child = adapter.find_child(current, lambda node: test(data, node.data))
    if child is None:
        logger.debug("go_to_child: no child of node=%s matches %r", current.key, data)
        return None

    adapter.move_to_front(current, child)
    tree.current = child
    logger.debug("go_to_child: entered node=%s", child.key)
    return child


def go_to_node(tree: 'HistoryTree', node: HistoryNode) -> HistoryNode:
    """Jump to any node of the tree.

    Every node on the path from the root is moved to the front of its
    siblings, so the path becomes the default forward chain: after the jump,
    backing up and going forward again retraces it.

    Args:
        tree: The history tree
        node: An attached node of this tree

    Returns:
        The new current node

    Raises:
        StaleNodeError: If ``node`` is not attached to this tree
    """
    if not tree.store.owns(node):
        raise StaleNodeError(node.key)

    adapter = tree.adapter
    child = node
    parent = adapter.get_parent(child)
    while parent is not None:
        adapter.move_to_front(parent, child)
        child = parent
        parent = adapter.get_parent(child)

    tree.current = node
    logger.debug("go_to_node: jumped to node=%s", node.key)
    return node
