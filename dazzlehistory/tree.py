"""HistoryTree: the branching history container.

A HistoryTree owns the node arena, the root, and the current position. It
is the unit of mutation: every public method runs under the tree's
re-entrant lock, so from a caller's point of view each navigation, mutation
or query is a single atomic step. ``with tree.locked():`` groups several
calls into one.

Example:
    >>> tree = HistoryTree()
    >>> for page in ("A", "B", "C"):
    ...     node = tree.add_child(page)
    >>> tree.back().add_child("D").data
    'D'
    >>> tree.back().forward_children_data()
    ['D']
    >>> tree.outline()
    ['A', ['B', ['D'], ['C']]]
"""

import functools
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from . import mutation, navigation, query
from .config import EqualityTest, HistoryConfig, MapConfig
from .core.adapter import HistoryAdapter
from .core.node import HistoryNode
from .core.store import NodeStore
from .core.traverser import VisitOutcome, Stop, map_tree, walk
from .errors import ConfigurationError, StaleNodeError
from .validation import check_invariants, find_invariant_violations


class _NoLock:
    """Stand-in for an RLock on trees owned by a single thread."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


def _exclusive(mutates: bool = False):
    """Run a method under the tree's lock.

    Methods that mutate are followed by an invariant check when the tree's
    config asks for one.
    """
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            with self._lock:
                result = method(self, *args, **kwargs)
                if mutates and self.config.check_invariants:
                    check_invariants(self)
                return result
        return wrapper
    return decorator


class HistoryTree:
    """A tree of visited payloads with a movable current position.

    Unlike a back/forward stack, visiting a new location after going back
    does not drop the branch that was left: it stays in the tree as a
    sibling, and ``go_to_child`` or ``go_to_node`` can return to it.

    Navigation methods (``back``, ``forward``, ``go_to_node``) return the
    tree itself so calls chain; everything else returns nodes or payloads.
    """

    def __init__(self, config: Optional[HistoryConfig] = None):
        """Create an empty history tree.

        Args:
            config: Tree configuration (defaults to HistoryConfig())

        Raises:
            ConfigurationError: If the config fails validation
        """
        self.config = config or HistoryConfig()
        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.store = NodeStore()
        self.adapter = HistoryAdapter(self.store)
        self._root_key: Optional[int] = None
        self._current_key: Optional[int] = None
        self._lock = threading.RLock() if self.config.thread_safe else _NoLock()

    # Position

    @property
    def root(self) -> Optional[HistoryNode]:
        """The node without a parent, or None for an empty tree."""
        if self._root_key is None:
            return None
        return self.store.get(self._root_key)

    @root.setter
    def root(self, node: Optional[HistoryNode]) -> None:
        self._root_key = self._attached_key(node)

    @property
    def current(self) -> Optional[HistoryNode]:
        """The active node, or None for an empty tree."""
        if self._current_key is None:
            return None
        return self.store.get(self._current_key)

    @current.setter
    def current(self, node: Optional[HistoryNode]) -> None:
        self._current_key = self._attached_key(node)

    def _attached_key(self, node: Optional[HistoryNode]) -> Optional[int]:
        if node is None:
            return None
        if not self.store.owns(node):
            raise StaleNodeError(node.key)
        return node.key

    def is_empty(self) -> bool:
        return self._root_key is None

    def resolve_test(self, test: Optional[EqualityTest]) -> EqualityTest:
        """Return ``test``, or the configured default when it is None."""
        return test if test is not None else self.config.test

    def node(self, key: int) -> HistoryNode:
        """Look up an attached node by handle.

        Raises:
            StaleNodeError: If no attached node has this key
        """
        return self.store.get(key)

    @contextmanager
    def locked(self) -> Iterator['HistoryTree']:
        """Hold the tree's lock across several operations."""
        with self._lock:
            yield self

    # Navigation

    @_exclusive()
    def back(self, count: int = 1) -> 'HistoryTree':
        navigation.back(self, count)
        return self

    @_exclusive()
    def forward(self, count: int = 1) -> 'HistoryTree':
        navigation.forward(self, count)
        return self

    @_exclusive()
    def go_to_child(self, data: Any, test: Optional[EqualityTest] = None) -> Optional[HistoryNode]:
        """Enter the matching child of current; None if there is none."""
        return navigation.go_to_child(self, data, test)

    @_exclusive()
    def go_to_node(self, node: HistoryNode) -> 'HistoryTree':
        navigation.go_to_node(self, node)
        return self

    # Mutation

    @_exclusive(mutates=True)
    def add_child(self, data: Any, test: Optional[EqualityTest] = None) -> HistoryNode:
        """Record a visit to ``data``; see mutation.add_child."""
        return mutation.add_child(self, data, test)

    @_exclusive(mutates=True)
    def delete_child(self, data: Any, test: Optional[EqualityTest] = None) -> Optional[HistoryNode]:
        return mutation.delete_child(self, data, test)

    @_exclusive(mutates=True)
    def delete_node(self, data: Any, test: Optional[EqualityTest] = None,
                    rebind_children: Optional[bool] = None) -> Optional[HistoryNode]:
        """Remove the first matching node anywhere in the tree.

        Raises:
            CannotDeleteRootError: If the first match is the root
        """
        return mutation.delete_node(self, data, test, rebind_children)

    @_exclusive(mutates=True)
    def clear(self) -> None:
        mutation.clear(self)

    @_exclusive(mutates=True)
    def replace_root(self, data: Any) -> HistoryNode:
        return mutation.replace_root(self, data)

    # Queries

    @_exclusive(mutates=True)
    def find_data(self, data: Any, test: Optional[EqualityTest] = None,
                  ensure: bool = False) -> Optional[HistoryNode]:
        """First matching node in pre-order; see query.find_data."""
        return query.find_data(self, data, test, ensure)

    @_exclusive()
    def all_nodes(self) -> List[HistoryNode]:
        return query.all_nodes(self)

    @_exclusive()
    def parent_nodes(self) -> List[HistoryNode]:
        return query.parent_nodes(self)

    @_exclusive()
    def forward_children_nodes(self) -> List[HistoryNode]:
        return query.forward_children_nodes(self)

    @_exclusive()
    def children_nodes(self) -> List[HistoryNode]:
        return query.children_nodes(self)

    @_exclusive()
    def current_data(self) -> Any:
        return query.current_data(self)

    @_exclusive()
    def all_data(self) -> List[Any]:
        return query.all_data(self)

    @_exclusive()
    def parent_data(self) -> List[Any]:
        return query.parent_data(self)

    @_exclusive()
    def forward_children_data(self) -> List[Any]:
        return query.forward_children_data(self)

    @_exclusive()
    def children_data(self) -> List[Any]:
        return query.children_data(self)

    @_exclusive()
    def depth(self) -> int:
        return query.depth(self)

    @_exclusive()
    def size(self) -> int:
        return query.size(self)

    @_exclusive()
    def outline(self, max_depth: Optional[int] = None) -> List[Any]:
        return query.tree_outline(self, max_depth)

    @_exclusive()
    def get_stats(self) -> Dict[str, Any]:
        return query.get_tree_stats(self)

    # Traversal

    @_exclusive()
    def map(self, transform: Callable[[HistoryNode], Any],
            config: Optional[MapConfig] = None) -> Any:
        """Shape-preserving map over the whole tree; see map_tree.

        Args:
            transform: Function(node) -> value
            config: Output layout (defaults to MapConfig(), nested with root)
        """
        config = config or MapConfig()
        return map_tree(self, transform, combiner=config.combiner,
                        flatten=config.flatten, include_root=config.include_root,
                        max_depth=config.max_depth)

    @_exclusive()
    def walk(self, visitor: Callable[[HistoryNode], VisitOutcome]) -> Optional[Stop]:
        """Cancellable pre-order visit of every node; see walk."""
        return walk(self, visitor)

    # Validation

    @_exclusive()
    def validate(self) -> List[str]:
        """List structural problems (empty if the tree is consistent)."""
        return find_invariant_violations(self)

    def __contains__(self, node: object) -> bool:
        with self._lock:
            return isinstance(node, HistoryNode) and self.store.owns(node)

    def __iter__(self) -> Iterator[HistoryNode]:
        return iter(self.all_nodes())

    def __repr__(self) -> str:
        with self._lock:
            current = self.current
            data = current.data if current is not None else None
            size = len(self.store)
        return f"{self.__class__.__name__}(size={size}, current={data!r})"
