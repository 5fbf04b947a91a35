"""Configuration system for DazzleHistory.

This module defines how callers tune a history tree: the default equality
test used to deduplicate payloads, deletion defaults, locking, and how the
shape-preserving map lays out its results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional


EqualityTest = Callable[[Any, Any], bool]
Combiner = Callable[[Any, List[Any]], Any]


def default_test(new_data: Any, existing_data: Any) -> bool:
    """Generic deep-equality test used when no test is supplied.

    Python's == already compares containers element by element, which is
    the deep equality a payload such as a dict or a tuple of URL parts needs.
    """
    return new_data == existing_data


class OutputMode(Enum):
    """How map_tree lays out its results."""
    NESTED = "nested"          # Result mirrors the tree shape
    FLATTENED = "flattened"    # Pre-order list


@dataclass
class MapConfig:
    """Configuration for a shape-preserving map over a (sub)tree."""

    mode: OutputMode = OutputMode.NESTED
    include_root: bool = True                 # Include the start node itself
    combiner: Optional[Combiner] = None       # None = mode default
    max_depth: Optional[int] = None           # Levels below the start, None = all

    @property
    def flatten(self) -> bool:
        return self.mode == OutputMode.FLATTENED

    @classmethod
    def descendants(cls) -> 'MapConfig':
        """Flat pre-order list of everything below the start node."""
        return cls(mode=OutputMode.FLATTENED, include_root=False)

    @classmethod
    def outline(cls) -> 'MapConfig':
        """Nested structure including the start node."""
        return cls(mode=OutputMode.NESTED, include_root=True)

    @classmethod
    def recent(cls, levels: int) -> 'MapConfig':
        """Nested structure cut off ``levels`` below the start node."""
        return cls(mode=OutputMode.NESTED, include_root=True, max_depth=levels)


@dataclass
class HistoryConfig:
    """Complete configuration for a HistoryTree.

    Operations that accept a ``test`` argument fall back to ``test`` here
    when the caller passes None.

    With ``check_invariants`` on, the check runs after a mutation has been
    applied. If it raises InvariantViolationError the tree keeps the
    mutation; the error reports the state, it does not roll it back. A
    per-call ``test`` that disagrees with ``test`` here can trigger this.
    """

    # Payload comparison
    test: EqualityTest = default_test

    # Deletion
    rebind_children: bool = False          # Default for delete_node
    merge_rebound_siblings: bool = False   # Merge spliced children into equal siblings

    # Concurrency
    thread_safe: bool = True               # Guard the tree with an RLock

    # Debugging
    check_invariants: bool = False         # Validate after every mutation

    @classmethod
    def strict(cls, test: EqualityTest = default_test) -> 'HistoryConfig':
        """Create a config that validates the tree after every mutation.

        Rebound siblings are merged, since a rebind that left two equal
        children under one parent would fail validation.

        Args:
            test: Default equality test

        Returns:
            HistoryConfig with invariant checking enabled
        """
        return cls(test=test, merge_rebound_siblings=True, check_invariants=True)

    @classmethod
    def single_threaded(cls, test: EqualityTest = default_test) -> 'HistoryConfig':
        """Create a config for trees owned by a single thread.

        Args:
            test: Default equality test

        Returns:
            HistoryConfig without locking
        """
        return cls(test=test, thread_safe=False)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not callable(self.test):
            errors.append("test must be callable")

        for name in ('rebind_children', 'merge_rebound_siblings',
                     'thread_safe', 'check_invariants'):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a bool")

        return errors
