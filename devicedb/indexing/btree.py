"""
B-Tree Index Implementation

A B-tree is a self-balancing tree data structure that keeps device records
sorted by their numerical id and allows lookups and insertions in
O(log n) time.

This implementation supports:
- Configurable order (maximum number of children per node, at least 3)
- Insertion with node splitting and promotion to the parent
- Point lookup and full in-order traversal
- Structural validation (fill bounds, all leaves at the same depth)

Insertion detaches the child edge it descends into, recurses, and
reattaches the returned subtree, so every node has exactly one owner at
any time. A child that overflows is split and its middle record is
promoted into the parent; when the root overflows a new root is created.

Concurrency: single-writer, no locking. Deletion is not supported.
"""

import sys
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..core.log import get_logger
from ..core.types import IoTDevice
from .node import Node, NodeType

MIN_ORDER = 3

logger = get_logger(__name__)

# A promoted (record, sibling) pair travelling up one level after a split.
Promotion = Tuple[IoTDevice, Node]


class DuplicateKeyError(ValueError):
    """Raised by a unique index when a device id is already present"""

    def __init__(self, key: int):
        self.key = key
        super().__init__(f"Duplicate key '{key}' in unique index")


class BTreeIndex:
    """
    B-Tree index of IoT devices keyed by numerical id.

    Usage:
        index = BTreeIndex(order=3)
        index.add(IoTDevice(1, "10.0.0.1", "/floor1"))
        device = index.find(1)
        index.walk(print)
    """

    def __init__(self, order: int, unique: bool = False):
        if order < MIN_ORDER:
            raise ValueError(f"Order must be at least {MIN_ORDER}, got {order}")
        self.order = order
        self.unique = unique
        self.root: Optional[Node] = None
        self.length = 0

    def __len__(self) -> int:
        return self.length

    def __contains__(self, key: int) -> bool:
        return self.find(key) is not None

    def __iter__(self) -> Iterator[IoTDevice]:
        return iter(self.devices())

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def add(self, device: IoTDevice) -> None:
        """Insert a device, splitting nodes as needed"""
        if self.unique and self.find(device.numerical_id) is not None:
            raise DuplicateKeyError(device.numerical_id)

        if self.root is not None:
            node, self.root = self.root, None
        else:
            logger.debug("Creating leaf root (order=%d)", self.order)
            node = Node.new_leaf()

        self.root, _ = self._add(node, device, True)

    def _add(self, node: Node, device: IoTDevice,
             is_root: bool) -> Tuple[Node, Optional[Promotion]]:
        """
        Insert into the subtree rooted at node.

        Returns the (possibly new) subtree root and, if the node overflowed
        and is not the root, the record and sibling to promote.
        """
        key = device.numerical_id

        if node.node_type == NodeType.LEAF:
            if node.add_key(key, (device, None)):
                self.length += 1
        else:
            old_key, (old_device, tree) = node.remove_key(key)
            child, promotion = self._add(tree, device, False)

            if old_device is None:
                node.add_left_child(child)
            else:
                node.add_key(old_key, (old_device, child))

            if promotion is not None:
                promoted, sibling = promotion
                node.add_key(promoted.numerical_id, (promoted, sibling))

        if len(node) > self.order:
            promoted, sibling = node.split()
            logger.debug("Split %s node at key %d", node.node_type.name.lower(),
                         promoted.numerical_id)

            if is_root:
                parent = Node.new_regular()
                parent.add_left_child(node)
                parent.add_key(promoted.numerical_id, (promoted, sibling))
                logger.debug("Root split, tree height is now %d", self._height(parent))
                return parent, None
            return node, (promoted, sibling)

        return node, None

    # ------------------------------------------------------------------
    # Search / traverse
    # ------------------------------------------------------------------

    def find(self, key: int) -> Optional[IoTDevice]:
        """Return the device with the given id, or None"""
        if self.root is None:
            return None
        return self._find(self.root, key)

    def _find(self, node: Node, key: int) -> Optional[IoTDevice]:
        device = node.get_device(key)
        if device is not None:
            return device
        if node.is_leaf:
            return None

        child = node.get_child(key)
        if child is None:
            return None
        return self._find(child, key)

    def walk(self, callback: Callable[[IoTDevice], Any]) -> None:
        """Call callback once per device in ascending id order"""
        if self.root is not None:
            self._walk_in_order(self.root, callback)

    def _walk_in_order(self, node: Node, callback: Callable[[IoTDevice], Any]) -> None:
        if node.left_child is not None:
            self._walk_in_order(node.left_child, callback)

        for device, child in zip(node.devices, node.children):
            if device is not None:
                callback(device)
            if child is not None:
                self._walk_in_order(child, callback)

    def devices(self) -> List[IoTDevice]:
        """All devices in ascending id order"""
        result: List[IoTDevice] = []
        self.walk(result.append)
        return result

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def is_a_valid_btree(self) -> bool:
        """
        Check the fill bounds of every node and that all leaves share a depth.

        An empty tree is not a valid B-tree.
        """
        if self.root is None:
            return False
        rules_ok, min_depth, max_depth = self._validate(self.root, 0)
        return rules_ok and min_depth == max_depth

    def _validate(self, node: Node, level: int) -> Tuple[bool, int, int]:
        if node.is_leaf:
            return len(node) <= self.order, level, level

        # The root only needs two children, every other node half the order
        min_children = self.order // 2 if level > 0 else 2
        rules_ok = min_children <= len(node) <= self.order

        min_depth, max_depth = sys.maxsize, level
        for child in node.children + [node.left_child]:
            if child is None:
                continue
            child_ok, child_min, child_max = self._validate(child, level + 1)
            rules_ok = rules_ok and child_ok
            min_depth = min(min_depth, child_min)
            max_depth = max(max_depth, child_max)
        return rules_ok, min_depth, max_depth

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def height(self) -> int:
        """Number of levels in the tree (0 when empty)"""
        return self._height(self.root)

    @staticmethod
    def _height(node: Optional[Node]) -> int:
        levels = 0
        while node is not None:
            levels += 1
            node = None if node.is_leaf else node.left_child
        return levels

    def stats(self) -> Dict[str, Any]:
        """
        Get index statistics.

        Returns:
            Dict with settings, length, height, node counts and validity
        """
        nodes = leaves = 0
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            nodes += 1
            if node.is_leaf:
                leaves += 1
            else:
                stack.extend(node.iter_children())

        return {
            'order': self.order,
            'unique': self.unique,
            'length': self.length,
            'height': self.height(),
            'nodes': nodes,
            'leaves': leaves,
            'valid': self.is_a_valid_btree(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the index to a JSON-friendly dict (settings plus node tree)"""
        return {
            'order': self.order,
            'length': self.length,
            'root': self.root.to_dict() if self.root is not None else None,
        }

    def dump_structure(self) -> str:
        """
        Return a multi-line string showing the tree level by level.

        Example output:

            BTreeIndex(order=3, length=4)
            Level 0: [1]
            Level 1: [0]   [2 | 3]
        """
        lines = [f"BTreeIndex(order={self.order}, length={self.length})"]
        if self.root is None:
            lines.append("(empty)")
            return "\n".join(lines)

        level_nodes = [self.root]
        level = 0
        while level_nodes:
            rendered = "   ".join(
                "[" + " | ".join(str(k) for k in node.keys()) + "]"
                for node in level_nodes
            )
            lines.append(f"Level {level}: {rendered}")
            level_nodes = [child for node in level_nodes for child in node.iter_children()]
            level += 1

        return "\n".join(lines)
