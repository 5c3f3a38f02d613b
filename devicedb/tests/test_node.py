#!/usr/bin/env python3
"""
Tests for the B-tree node: slot ordering, closest-key lookup,
key insertion/removal and splitting.

Run: python -m pytest devicedb/tests/test_node.py -v
"""

import os
import sys
import unittest

# Add parent directories to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from devicedb.core.types import IoTDevice
from devicedb.indexing.node import Node, NodeType


def device(device_id, address=None):
    return IoTDevice(device_id, address or f"My address is {device_id}")


def leaf_with(*keys):
    node = Node.new_leaf()
    for key in keys:
        node.add_key(key, (device(key), None))
    return node


class TestNodeBasics(unittest.TestCase):
    """Construction and length"""

    def test_new_leaf(self):
        node = Node.new_leaf()
        self.assertEqual(node.node_type, NodeType.LEAF)
        self.assertTrue(node.is_leaf)
        self.assertIsNone(node.left_child)

    def test_new_regular(self):
        node = Node.new_regular()
        self.assertEqual(node.node_type, NodeType.REGULAR)
        self.assertFalse(node.is_leaf)

    def test_length_counts_children(self):
        """An empty node has length 1 (the left child edge)"""
        self.assertEqual(len(Node.new_leaf()), 1)
        self.assertEqual(len(leaf_with(1, 2, 3)), 4)


class TestFindClosestIndex(unittest.TestCase):

    def setUp(self):
        self.node = leaf_with(10, 20, 30)

    def test_smaller_than_all_goes_left(self):
        self.assertIsNone(self.node.find_closest_index(5))

    def test_exact_match(self):
        self.assertEqual(self.node.find_closest_index(10), 0)
        self.assertEqual(self.node.find_closest_index(30), 2)

    def test_between_keys(self):
        self.assertEqual(self.node.find_closest_index(25), 1)

    def test_larger_than_all(self):
        self.assertEqual(self.node.find_closest_index(99), 2)

    def test_empty_node_goes_left(self):
        self.assertIsNone(Node.new_leaf().find_closest_index(1))

    def test_ties_resolve_to_rightmost(self):
        """Equal keys resolve to the last qualifying slot"""
        node = leaf_with(10, 20)
        node.add_key(20, (device(20, "second"), None))
        self.assertEqual(node.find_closest_index(20), 2)


class TestAddKey(unittest.TestCase):

    def test_keeps_slots_sorted(self):
        node = leaf_with(5, 1, 3, 4, 2)
        self.assertEqual(node.keys(), [1, 2, 3, 4, 5])
        self.assertEqual(node.children, [None] * 5)

    def test_returns_true(self):
        self.assertTrue(Node.new_leaf().add_key(1, (device(1), None)))

    def test_duplicate_goes_after_existing(self):
        node = leaf_with(1, 2, 3)
        node.add_key(2, (device(2, "newer"), None))
        self.assertEqual(node.keys(), [1, 2, 2, 3])
        self.assertEqual(node.devices[1].address, "My address is 2")
        self.assertEqual(node.devices[2].address, "newer")

    def test_child_travels_with_key(self):
        node = Node.new_regular()
        child = leaf_with(7)
        node.add_key(5, (device(5), child))
        self.assertIs(node.children[0], child)


class TestRemoveKey(unittest.TestCase):

    def setUp(self):
        self.left = leaf_with(1)
        self.middle = leaf_with(15)
        self.right = leaf_with(25)

        self.node = Node.new_regular()
        self.node.add_left_child(self.left)
        self.node.add_key(10, (device(10), self.middle))
        self.node.add_key(20, (device(20), self.right))

    def test_remove_left_edge(self):
        key, (removed, tree) = self.node.remove_key(3)
        self.assertEqual(key, 3)
        self.assertIsNone(removed)
        self.assertIs(tree, self.left)
        self.assertIsNone(self.node.left_child)
        self.assertEqual(self.node.keys(), [10, 20])

    def test_remove_slot(self):
        key, (removed, tree) = self.node.remove_key(17)
        self.assertEqual(key, 10)
        self.assertEqual(removed, device(10))
        self.assertIs(tree, self.middle)
        self.assertEqual(self.node.keys(), [20])
        self.assertIs(self.node.left_child, self.left)

    def test_reinsert_restores_position(self):
        key, slot = self.node.remove_key(22)
        self.node.add_key(key, slot)
        self.assertEqual(self.node.keys(), [10, 20])
        self.assertIs(self.node.children[1], self.right)


class TestLookups(unittest.TestCase):

    def setUp(self):
        self.left = leaf_with(1)
        self.right = leaf_with(15)
        self.node = Node.new_regular()
        self.node.add_left_child(self.left)
        self.node.add_key(10, (device(10), self.right))

    def test_get_device(self):
        self.assertEqual(self.node.get_device(10), device(10))
        self.assertIsNone(self.node.get_device(15))

    def test_get_child(self):
        self.assertIs(self.node.get_child(3), self.left)
        self.assertIs(self.node.get_child(10), self.right)
        self.assertIs(self.node.get_child(99), self.right)

    def test_iter_children(self):
        self.assertEqual(self.node.iter_children(), [self.left, self.right])
        self.assertEqual(self.left.iter_children(), [])

    def test_to_dict(self):
        self.assertEqual(self.node.to_dict(), {
            'type': 'regular',
            'keys': [10],
            'children': [
                {'type': 'leaf', 'keys': [1]},
                {'type': 'leaf', 'keys': [15]},
            ],
        })


class TestSplit(unittest.TestCase):

    def test_split_odd_leaf(self):
        node = leaf_with(1, 2, 3)
        promoted, sibling = node.split()

        self.assertEqual(promoted, device(2))
        self.assertEqual(node.keys(), [1])
        self.assertEqual(sibling.keys(), [3])
        self.assertTrue(sibling.is_leaf)
        self.assertIsNone(sibling.left_child)

    def test_split_even_leaf(self):
        node = leaf_with(1, 2, 3, 4)
        promoted, sibling = node.split()

        self.assertEqual(promoted.numerical_id, 3)
        self.assertEqual(node.keys(), [1, 2])
        self.assertEqual(sibling.keys(), [4])

    def test_split_larger_leaf_keeps_order(self):
        node = leaf_with(*range(9))
        promoted, sibling = node.split()

        self.assertEqual(promoted.numerical_id, 4)
        self.assertEqual(node.keys(), [0, 1, 2, 3])
        self.assertEqual(sibling.keys(), [5, 6, 7, 8])

    def test_split_regular_moves_children(self):
        children = [leaf_with(k) for k in (0, 15, 25, 35)]
        node = Node.new_regular()
        node.add_left_child(children[0])
        node.add_key(10, (device(10), children[1]))
        node.add_key(20, (device(20), children[2]))
        node.add_key(30, (device(30), children[3]))

        promoted, sibling = node.split()

        self.assertEqual(promoted.numerical_id, 20)
        self.assertEqual(sibling.node_type, NodeType.REGULAR)

        self.assertIs(node.left_child, children[0])
        self.assertEqual(node.keys(), [10])
        self.assertIs(node.children[0], children[1])

        self.assertIs(sibling.left_child, children[2])
        self.assertEqual(sibling.keys(), [30])
        self.assertIs(sibling.children[0], children[3])


if __name__ == '__main__':
    unittest.main()
