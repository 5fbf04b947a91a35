"""Structural invariant checks for history trees.

Used by the test suite and, when ``HistoryConfig.check_invariants`` is on,
after every mutating HistoryTree method.
"""

from typing import TYPE_CHECKING, List, Set

from .errors import InvariantViolationError

if TYPE_CHECKING:
    from .tree import HistoryTree


def find_invariant_violations(tree: 'HistoryTree') -> List[str]:
    """Check a tree's structure.

    Checked:
    - the root has no parent and every other stored node has one
    - each child's parent handle names the node listing it, and each node
      is listed by its parent exactly once
    - every stored node is reachable from the root, without cycles
    - current is None only for an empty tree and is reachable otherwise
    - no parent lists two children with equal payloads under the tree's
      default test

    Returns:
        List of problems (empty if the tree is consistent)
    """
    problems: List[str] = []
    store = tree.store
    root = tree.root
    current = tree.current

    if root is None:
        if len(store):
            problems.append(f"tree has no root but stores {len(store)} node(s)")
        if current is not None:
            problems.append("tree has no root but has a current node")
        return problems

    if not store.owns(root):
        problems.append(f"root node {root.key} is not in the store")
        return problems
    if root.parent_key is not None:
        problems.append(f"root node {root.key} has parent {root.parent_key}")
    if current is None:
        problems.append("non-empty tree has no current node")

    # Reachability and cycle detection from the root
    seen: Set[int] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node.key in seen:
            problems.append(f"node {node.key} is reachable twice (cycle or shared child)")
            continue
        seen.add(node.key)

        if len(set(node.child_keys)) != len(node.child_keys):
            problems.append(f"node {node.key} lists a child more than once")

        for key in node.child_keys:
            child = store.find(key)
            if child is None:
                problems.append(f"node {node.key} lists missing child {key}")
                continue
            if child.parent_key != node.key:
                problems.append(
                    f"child {key} of node {node.key} points to parent {child.parent_key}"
                )
            stack.append(child)

    for node in store:
        if node.key not in seen:
            problems.append(f"node {node.key} is not reachable from the root")
        if node.parent_key is None and node is not root:
            problems.append(f"node {node.key} is a second root")

    if current is not None and (not store.owns(current) or current.key not in seen):
        problems.append(f"current node {current.key} is not reachable from the root")

    test = tree.config.test
    for node in store:
        children = [store.find(key) for key in node.child_keys]
        children = [child for child in children if child is not None]
        for i, child in enumerate(children):
            for other in children[i + 1:]:
                if test(other.data, child.data):
                    problems.append(
                        f"node {node.key} has duplicate children {child.key} and {other.key}"
                    )

    return problems


def check_invariants(tree: 'HistoryTree') -> None:
    """Raise InvariantViolationError if the tree structure is inconsistent."""
    problems = find_invariant_violations(tree)
    if problems:
        raise InvariantViolationError(problems)
