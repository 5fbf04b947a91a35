"""Tree traversal for DazzleHistory.

Every search, listing and deletion scan uses the same order: depth-first
pre-order, a node before its children, children in list order (most
recently visited first). Two primitives are built on the traverser:

- ``map_tree``: shape-preserving map with a pluggable combiner, producing
  either a nested result that mirrors the tree or a flat pre-order list.
- ``walk``: side-effecting visitor that can stop the walk early by returning
  ``Stop(value)``.
"""

from dataclasses import dataclass
from itertools import chain
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from .adapter import HistoryAdapter
from .node import HistoryNode


class _Continue:
    """Visitor outcome meaning "keep walking"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CONTINUE"


CONTINUE = _Continue()


@dataclass(frozen=True)
class Stop:
    """Visitor outcome that aborts the walk and carries its result."""
    value: Any = None


VisitOutcome = Union[_Continue, Stop, None]


class DepthFirstPreOrderTraverser:
    """Depth-first pre-order traversal strategy.

    Visits parent before children. Uses an explicit stack rather than
    recursion so a long linear history (thousands of pages visited in one
    direction) does not hit the interpreter's recursion limit.
    """

    def __init__(self, adapter: HistoryAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: HistoryAdapter for navigating the tree
        """
        self.adapter = adapter

    def traverse(self,
                 root: HistoryNode,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[HistoryNode, int]]:
        """Traverse the tree starting from root.

        Args:
            root: Starting node for traversal
            max_depth: Deepest level to visit, relative to root (None = unlimited)

        Yields:
            Tuples of (node, depth) where depth is relative to root
        """
        stack: List[Tuple[HistoryNode, int]] = [(root, 0)]

        while stack:
            node, depth = stack.pop()
            yield (node, depth)

            if max_depth is not None and depth >= max_depth:
                continue
            # Push children reversed so the first child is popped first
            if not node.is_leaf():
                children = list(self.adapter.get_children(node))
                for child in reversed(children):
                    stack.append((child, depth + 1))


def _resolve_start(start: Any,
                   adapter: Optional[HistoryAdapter]) -> Tuple[Optional[HistoryNode], HistoryAdapter]:
    """Turn a node or a tree into a (start node, adapter) pair.

    A tree means its root; an empty tree yields a None start node.
    """
    if isinstance(start, HistoryNode):
        if adapter is None:
            raise ValueError("An adapter is required when starting from a node")
        return start, adapter
    if not hasattr(start, 'root') or not hasattr(start, 'adapter'):
        raise TypeError(f"Cannot traverse {type(start).__name__!r}: expected a node or a tree")
    return start.root, adapter or start.adapter


def _cons(value: Any, child_results: List[Any]) -> List[Any]:
    return [value, *child_results]


def _cons_flat(value: Any, child_results: List[Any]) -> List[Any]:
    return [value, *chain.from_iterable(child_results)]


def map_tree(start: Any,
             transform: Callable[[HistoryNode], Any],
             adapter: Optional[HistoryAdapter] = None,
             combiner: Optional[Callable[[Any, List[Any]], Any]] = None,
             flatten: bool = False,
             include_root: bool = True,
             max_depth: Optional[int] = None) -> Any:
    """Apply ``transform`` to every node and combine results bottom-up.

    ``transform`` is called in pre-order. Each node's transformed value is
    then passed to ``combiner`` together with the list of its children's
    combined results.

    Args:
        start: A HistoryNode (requires ``adapter``) or a tree (uses its root)
        transform: Function(node) -> value
        adapter: HistoryAdapter, taken from the tree when omitted
        combiner: Function(value, child_results) -> result. Defaults to
            ``[value, *child_results]`` when nested and to the pre-order
            concatenation when flattened.
        flatten: Produce a flat pre-order list instead of a nested one
        include_root: Include the start node; when False the result is the
            list of its children's results (nested) or their concatenation
            (flattened)
        max_depth: Only map nodes at most this many levels below the start;
            deeper nodes are neither transformed nor combined

    Returns:
        The combined result; an empty tree maps to []

    Example:
        >>> map_tree(tree, lambda node: node.data)
        ['A', ['B', ['D'], ['C']]]
        >>> map_tree(tree, lambda node: node.data, flatten=True)
        ['A', 'B', 'D', 'C']
    """
    root, adapter = _resolve_start(start, adapter)
    if root is None:
        return []
    if combiner is None:
        combiner = _cons_flat if flatten else _cons

    traverser = DepthFirstPreOrderTraverser(adapter)
    order: List[HistoryNode] = []
    values = {}
    for node, depth in traverser.traverse(root, max_depth):
        order.append(node)
        if depth > 0 or include_root:
            values[node.key] = transform(node)

    # Reverse pre-order sees every child before its parent
    combined = {}
    for node in reversed(order):
        child_results = [combined.pop(key) for key in node.child_keys if key in combined]
        if node is root and not include_root:
            if flatten:
                return list(chain.from_iterable(child_results))
            return child_results
        combined[node.key] = combiner(values.pop(node.key), child_results)

    return combined[root.key]


def walk(start: Any,
         visitor: Callable[[HistoryNode], VisitOutcome],
         adapter: Optional[HistoryAdapter] = None) -> Optional[Stop]:
    """Visit every node in pre-order, stopping at the first ``Stop``.

    The start node itself is visited. Nodes after the one whose visit
    returned ``Stop`` are never visited, so a search costs only as much as
    the position of its first match.

    Args:
        start: A HistoryNode (requires ``adapter``) or a tree (uses its root)
        visitor: Function(node) returning CONTINUE, None or Stop(value)
        adapter: HistoryAdapter, taken from the tree when omitted

    Returns:
        The Stop outcome, or None if the walk visited every node

    Raises:
        TypeError: If the visitor returns anything else
    """
    root, adapter = _resolve_start(start, adapter)
    if root is None:
        return None

    for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(root):
        outcome = visitor(node)
        if isinstance(outcome, Stop):
            return outcome
        if outcome is not None and outcome is not CONTINUE:
            raise TypeError(
                f"Visitor must return CONTINUE, None or Stop, got {outcome!r}"
            )
    return None


def find_first(start: Any,
               predicate: Callable[[HistoryNode], bool],
               adapter: Optional[HistoryAdapter] = None) -> Optional[HistoryNode]:
    """Return the first node in pre-order for which ``predicate`` is true."""
    outcome = walk(
        start,
        lambda node: Stop(node) if predicate(node) else CONTINUE,
        adapter,
    )
    return outcome.value if outcome is not None else None
