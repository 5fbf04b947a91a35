"""Unit tests for add/delete mutations.

Covers fresh adds, merges, in-place refreshes, child and node deletion with
and without rebinding, current-position repair, and sibling merging.
"""

import logging
import unittest
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from history_fixtures import build_path, build_sample_tree, child_data

from dazzlehistory import (
    CannotDeleteRootError,
    HistoryConfig,
    HistoryError,
    HistoryTree,
    add_child,
    delete_child,
    delete_node,
    find_invariant_violations,
)


class TestAddChild(unittest.TestCase):
    """Test recording visits."""

    def test_first_add_creates_root(self):
        tree = HistoryTree()
        node = add_child(tree, "A")

        self.assertIs(tree.root, node)
        self.assertIs(tree.current, node)
        self.assertIsNone(node.parent_key)

    def test_new_payload_goes_first(self):
        """Test that a new branch is inserted before older siblings."""
        tree = build_path(["A", "B"])
        tree.back()
        tree.add_child("C")

        self.assertEqual(child_data(tree, "A"), ["C", "B"])
        self.assertEqual(tree.current_data(), "C")

    def test_merge_keeps_identity_and_subtree(self):
        """Test that a reused child keeps its own history below it."""
        tree = build_path(["A", "B", "B1"])
        b = tree.find_data("B")
        tree.back(2)
        tree.add_child("C")
        tree.back()

        again = tree.add_child("B")

        self.assertIs(again, b)
        self.assertEqual(child_data(tree, "B"), ["B1"])
        self.assertEqual(tree.forward_children_data(), ["B1"])

    def test_merge_overwrites_payload(self):
        """Test that the merged node takes the newer payload."""
        tree = HistoryTree(HistoryConfig(test=lambda new, old: new[0] == old[0]))
        tree.add_child(("/", 1))
        node = tree.add_child(("/a", 1))
        tree.back()
        tree.add_child(("/b", 1))
        tree.back()

        merged = tree.add_child(("/a", 2))

        self.assertIs(merged, node)
        self.assertEqual(node.data, ("/a", 2))

    def test_only_children_are_merged(self):
        """Test that a payload elsewhere in the tree is not reused."""
        tree = build_sample_tree()    # current F
        size_before = tree.size()

        tree.add_child("C")

        self.assertEqual(tree.size(), size_before + 1)
        self.assertEqual(tree.parent_data(), ["F", "E", "A"])

    def test_test_argument_order_on_add(self):
        """Test that add calls test(new, existing), current first."""
        calls = []

        def recording_test(new, existing):
            calls.append((new, existing))
            return False

        tree = build_path(["A", "B"])
        tree.back()
        tree.add_child("X", recording_test)

        self.assertEqual(calls, [("X", "A"), ("X", "B")])

    def test_asymmetric_test_refreshes_current(self):
        """Test that an asymmetric test is applied as test(new, existing)."""
        def extends(new, existing):
            return new.startswith(existing)

        tree = HistoryTree(HistoryConfig(test=extends))
        tree.add_child("/docs")
        tree.add_child("/docs#install")

        self.assertEqual(tree.size(), 1)
        self.assertEqual(tree.current_data(), "/docs#install")

        # The reverse order would match, the documented order does not
        tree.add_child("/do")
        self.assertEqual(tree.size(), 2)


class TestDeleteChild(unittest.TestCase):
    """Test removing a child of the current node."""

    def setUp(self):
        self.tree = build_sample_tree()
        self.tree.go_to_node(self.tree.root)   # A: [E, B]

    def test_removes_child_and_subtree(self):
        b = self.tree.find_data("B")

        removed = delete_child(self.tree, "B")

        self.assertIs(removed, b)
        self.assertFalse(removed.attached)
        self.assertEqual(self.tree.all_data(), ["A", "E", "F"])
        self.assertIs(self.tree.current, self.tree.root)

    def test_does_not_recurse(self):
        """Test that grandchildren are not candidates."""
        self.assertIsNone(delete_child(self.tree, "D"))
        self.assertEqual(self.tree.size(), 6)

    def test_on_empty_tree(self):
        self.assertIsNone(delete_child(HistoryTree(), "A"))

    def test_first_match_only(self):
        """Test that only the first matching child is removed."""
        removed = self.tree.delete_child("anything", lambda target, existing: True)

        self.assertEqual(removed.data, "E")
        self.assertEqual(child_data(self.tree, "A"), ["B"])


class TestDeleteNode(unittest.TestCase):
    """Test removing any node of the tree."""

    def test_no_match(self):
        tree = build_sample_tree()
        self.assertIsNone(delete_node(tree, "missing"))
        self.assertEqual(tree.size(), 6)

    def test_empty_tree(self):
        self.assertIsNone(delete_node(HistoryTree(), "A"))

    def test_first_match_in_pre_order(self):
        """Test that the scan stops at the first pre-order match."""
        tree = build_sample_tree()
        calls = []

        def recording_test(target, existing):
            calls.append(existing)
            return existing in ("F", "D")

        removed = tree.delete_node("leaf", recording_test)

        self.assertEqual(removed.data, "F")
        self.assertEqual(calls, ["A", "E", "F"])

    def test_root_cannot_be_deleted(self):
        tree = build_sample_tree()
        with self.assertRaises(CannotDeleteRootError):
            tree.delete_node("A")
        with self.assertRaises(HistoryError):
            tree.delete_node("A", rebind_children=True)
        self.assertEqual(tree.size(), 6)

    def test_current_inside_discarded_subtree_moves_to_parent(self):
        tree = build_sample_tree()     # current F under E

        tree.delete_node("E")

        self.assertIs(tree.current, tree.root)
        self.assertEqual(tree.all_data(), ["A", "B", "D", "C"])

    def test_current_removed_with_rebind_moves_to_parent(self):
        tree = build_sample_tree()
        tree.back()                    # current E

        tree.delete_node("E", rebind_children=True)

        self.assertIs(tree.current, tree.root)
        self.assertEqual(child_data(tree, "A"), ["F", "B"])

    def test_current_in_rebound_subtree_is_kept(self):
        tree = build_sample_tree()
        f = tree.current

        tree.delete_node("E", rebind_children=True)

        self.assertIs(tree.current, f)
        self.assertEqual(tree.depth(), 1)

    def test_current_outside_removed_subtree_is_kept(self):
        tree = build_sample_tree()
        f = tree.current

        tree.delete_node("B")

        self.assertIs(tree.current, f)

    def test_rebind_default_comes_from_config(self):
        tree = build_sample_tree(HistoryConfig(rebind_children=True))

        tree.delete_node("B")

        self.assertEqual(child_data(tree, "A"), ["E", "D", "C"])
        self.assertEqual(tree.size(), 5)

    def test_explicit_rebind_overrides_config(self):
        tree = build_sample_tree(HistoryConfig(rebind_children=True))

        tree.delete_node("B", rebind_children=False)

        self.assertEqual(tree.size(), 3)


class TestReboundSiblingMerge(unittest.TestCase):
    """Test folding rebound children into equal siblings."""

    def build(self, config):
        # A: [X, B], B: [X], B/X: [Y], current X (under A)
        tree = build_path(["A", "B", "X", "Y"], config)
        tree.back(3)
        tree.add_child("X")
        return tree

    def test_without_merge_duplicates_are_reported(self):
        tree = self.build(HistoryConfig())

        tree.delete_node("B", rebind_children=True)

        self.assertEqual(child_data(tree, "A"), ["X", "X"])
        self.assertEqual(tree.size(), 4)
        problems = find_invariant_violations(tree)
        self.assertEqual(len(problems), 1)
        self.assertIn("duplicate", problems[0])

    def test_rebind_next_to_equal_sibling_keeps_both_by_default(self):
        """Test that a rebind only removes the matched node unless merging is on."""
        tree = build_path(["A", "X"])
        tree.back()
        tree.add_child("C")
        tree.add_child("X")       # A: [C, X], C: [X]

        tree.delete_node("C", rebind_children=True)

        self.assertEqual(tree.outline(), ["A", ["X"], ["X"]])
        self.assertEqual(len(tree.validate()), 1)

    def test_merge_folds_subtree_into_survivor(self):
        tree = self.build(HistoryConfig(merge_rebound_siblings=True))
        survivor = tree.current
        y = tree.find_data("Y")
        tree.go_to_node(y)

        tree.delete_node("B", rebind_children=True)

        self.assertEqual(tree.outline(), ["A", ["X", ["Y"]]])
        self.assertIs(tree.adapter.get_parent(y), survivor)
        self.assertIs(tree.current, y)
        self.assertEqual(find_invariant_violations(tree), [])

    def test_merge_moves_current_off_merged_duplicate(self):
        tree = self.build(HistoryConfig(merge_rebound_siblings=True))
        survivor = tree.current
        tree.go_to_node(tree.find_data("Y"))
        tree.back()                    # current is the X under B

        tree.delete_node("B", rebind_children=True)

        self.assertIs(tree.current, survivor)

    def test_strict_config_merges(self):
        tree = self.build(HistoryConfig.strict())

        tree.delete_node("B", rebind_children=True)

        self.assertEqual(tree.size(), 3)


class TestClearAndReplace(unittest.TestCase):
    """Test emptying and restarting a history."""

    def test_clear(self):
        tree = build_sample_tree()
        old_root = tree.root

        tree.clear()

        self.assertTrue(tree.is_empty())
        self.assertIsNone(tree.current)
        self.assertEqual(tree.size(), 0)
        self.assertFalse(old_root.attached)

    def test_replace_root(self):
        tree = build_sample_tree()

        node = tree.replace_root("home")

        self.assertIs(tree.root, node)
        self.assertIs(tree.current, node)
        self.assertEqual(tree.all_data(), ["home"])


def test_mutations_are_logged(caplog):
    """Test that mutations log at DEBUG and refused deletes at WARNING."""
    tree = HistoryTree()

    with caplog.at_level(logging.DEBUG, logger="dazzlehistory"):
        tree.add_child("A")
        tree.add_child("B")
        with pytest.raises(CannotDeleteRootError):
            tree.delete_node("A")

    messages = [record.getMessage() for record in caplog.records]
    assert any("created root" in message for message in messages)
    assert any(
        record.levelno == logging.WARNING and "refusing to delete root" in record.getMessage()
        for record in caplog.records
    )


if __name__ == '__main__':
    unittest.main()
