"""Exception types for DazzleHistory.

Most "nothing matched" outcomes are not errors: searches and deletions
return None and navigation past either end of a branch is a no-op. The
exceptions here cover the cases a caller must be told about explicitly.
"""

from typing import Any, List, Optional


class HistoryError(Exception):
    """Base class for every error raised by DazzleHistory."""
    pass


class CannotDeleteRootError(HistoryError):
    """Raised when delete_node matches the root of the tree.

    The root has no parent whose children could be updated, so the
    deletion is refused whether or not children would be rebound.
    """

    def __init__(self, node: Any):
        self.node = node
        super().__init__(
            f"Cannot delete the root node (key={getattr(node, 'key', None)!r}); "
            f"use clear() or replace_root() to discard the whole history"
        )


class StaleNodeError(HistoryError, KeyError):
    """Raised when a node handle no longer refers to a node in the tree."""

    def __init__(self, key: Optional[int]):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"No attached node with key {self.key!r}"


class InvariantViolationError(HistoryError):
    """Raised by check_invariants when the tree structure is inconsistent."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(
            f"History tree invariants violated: {'; '.join(self.problems)}"
        )


class ConfigurationError(HistoryError, ValueError):
    """Raised when a HistoryConfig fails validation."""
    pass
