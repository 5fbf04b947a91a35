"""Mutation operations for DazzleHistory.

add_child records a visit, delete_child and delete_node restructure the
tree. Each function leaves the tree structurally valid before returning:
links stay bidirectional, the current position stays reachable, and equal
payloads under one parent are merged rather than duplicated.

Equality tests are called as ``test(new_data, existing_data)`` on the add
and merge paths and as ``test(target, node_data)`` on the search and delete
paths. The order matters for tests that are not symmetric.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from .config import EqualityTest
from .core.node import HistoryNode
from .core.traverser import find_first
from .errors import CannotDeleteRootError

if TYPE_CHECKING:
    from .tree import HistoryTree

logger = logging.getLogger(__name__)


def add_child(tree: 'HistoryTree', data: Any,
              test: Optional[EqualityTest] = None) -> HistoryNode:
    """Record a visit to ``data`` from the current position.

    - Empty tree: ``data`` becomes the root and the current node.
    - ``data`` equals the current payload: the payload is refreshed in place.
    - ``data`` equals a child's payload: that child is reused (its payload
      overwritten, its identity and subtree kept), moved to the front and
      entered.
    - Otherwise a fresh child is created at the front and entered.

    Args:
        tree: The history tree
        data: Payload of the visited location
        test: Function(new_data, existing_data) -> bool; tree default when None

    Returns:
        The resulting current node
    """
    test = tree.resolve_test(test)
    current = tree.current

    if current is None:
        node = tree.store.create(data)
        tree.root = node
        tree.current = node
        logger.debug("add_child: created root node=%s", node.key)
        return node

    if test(data, current.data):
        current.data = data
        logger.debug("add_child: refreshed current node=%s", current.key)
        return current

    adapter = tree.adapter
    node = adapter.find_child(current, lambda child: test(data, child.data))
    if node is not None:
        node.data = data
        adapter.move_to_front(current, node)
        logger.debug("add_child: merged into existing node=%s", node.key)
    else:
        node = tree.store.create(data)
        adapter.add_child(current, node, index=0)
        logger.debug("add_child: created node=%s under node=%s", node.key, current.key)

    tree.current = node
    return node


def delete_child(tree: 'HistoryTree', data: Any,
                 test: Optional[EqualityTest] = None) -> Optional[HistoryNode]:
    """Remove the first child of current whose payload matches ``data``.

    Only immediate children are examined. The removed child's subtree is
    discarded. The current position does not move.

    Args:
        tree: The history tree
        data: Payload to look for
        test: Function(data, child_data) -> bool; tree default when None

    Returns:
        The removed (now detached) node, or None if no child matched
    """
    test = tree.resolve_test(test)
    current = tree.current
    if current is None:
        return None

    adapter = tree.adapter
    node = adapter.find_child(current, lambda child: test(data, child.data))
    if node is None:
        logger.debug("delete_child: no child of node=%s matches %r", current.key, data)
        return None

    adapter.remove_child(current, node)
    released = tree.store.release_subtree(node)
    logger.debug("delete_child: removed node=%s (%d node(s) released)", node.key, released)
    return node


def delete_node(tree: 'HistoryTree', data: Any,
                test: Optional[EqualityTest] = None,
                rebind_children: Optional[bool] = None) -> Optional[HistoryNode]:
    """Remove the first node in pre-order whose payload matches ``data``.

    The whole tree is scanned, root included, and the scan stops at the
    first match. With ``rebind_children`` the removed node's children take
    its place in the parent's child list, keeping their own subtrees;
    otherwise the whole subtree is discarded.

    A rebound child can end up next to a sibling with an equal payload.
    Such duplicates are folded together only when
    ``HistoryConfig.merge_rebound_siblings`` is on; otherwise both stay
    and ``HistoryTree.validate()`` reports them.

    If the current node is removed, or sits inside a discarded subtree,
    current moves to the removed node's former parent.

    Args:
        tree: The history tree
        data: Payload to look for
        test: Function(data, node_data) -> bool; tree default when None
        rebind_children: Splice children into the parent; tree default
            (``HistoryConfig.rebind_children``) when None

    Returns:
        The removed (now detached) node, or None if nothing matched

    Raises:
        CannotDeleteRootError: If the first match is the root
    """
    test = tree.resolve_test(test)
    if rebind_children is None:
        rebind_children = tree.config.rebind_children

    node = find_first(tree, lambda candidate: test(data, candidate.data))
    if node is None:
        logger.debug("delete_node: no node matches %r", data)
        return None

    adapter = tree.adapter
    parent = adapter.get_parent(node)
    if parent is None:
        logger.warning("delete_node: refusing to delete root node=%s", node.key)
        raise CannotDeleteRootError(node)

    current = tree.current
    if rebind_children:
        current_lost = current is node
        spliced = adapter.splice_children(parent, node)
        tree.store.release(node)
        logger.debug("delete_node: removed node=%s, rebound %d child(ren) to node=%s",
                     node.key, len(spliced), parent.key)
        if current_lost:
            tree.current = parent
        if spliced and tree.config.merge_rebound_siblings:
            _merge_rebound_siblings(tree, parent, spliced)
    else:
        current_lost = current is node or adapter.is_ancestor(node, current)
        adapter.remove_child(parent, node)
        released = tree.store.release_subtree(node)
        logger.debug("delete_node: removed node=%s (%d node(s) released)", node.key, released)
        if current_lost:
            tree.current = parent

    return node


def _merge_rebound_siblings(tree: 'HistoryTree', parent: HistoryNode,
                            spliced: list) -> None:
    """Fold spliced children into equal siblings already under ``parent``."""
    test = tree.config.test
    adapter = tree.adapter
    for node in spliced:
        survivor = adapter.find_child(
            parent,
            lambda sibling: sibling is not node and test(node.data, sibling.data),
        )
        if survivor is None:
            continue
        adapter.remove_child(parent, node)
        _merge_into(tree, survivor, node)


def _merge_into(tree: 'HistoryTree', survivor: HistoryNode, duplicate: HistoryNode) -> None:
    """Move the children of an unlinked ``duplicate`` under ``survivor``.

    Children equal to one of the survivor's children are merged recursively.
    The survivor keeps its own payload and its children keep their order;
    adopted children go after them.
    """
    test = tree.config.test
    adapter = tree.adapter
    for child in list(adapter.get_children(duplicate)):
        adapter.remove_child(duplicate, child)
        twin = adapter.find_child(survivor, lambda existing: test(child.data, existing.data))
        if twin is None:
            adapter.add_child(survivor, child, index=None)
        else:
            _merge_into(tree, twin, child)

    if tree.current is duplicate:
        tree.current = survivor
    tree.store.release(duplicate)
    logger.debug("delete_node: merged node=%s into node=%s", duplicate.key, survivor.key)


def clear(tree: 'HistoryTree') -> None:
    """Release every node; the tree becomes empty."""
    released = len(tree.store)
    tree.store.clear()
    tree.root = None
    tree.current = None
    logger.debug("clear: released %d node(s)", released)


def replace_root(tree: 'HistoryTree', data: Any) -> HistoryNode:
    """Discard the whole history and start again from ``data``."""
    clear(tree)
    return add_child(tree, data)
