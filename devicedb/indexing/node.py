"""
B-Tree Node

A node is a sorted array of slots. Each slot pairs a device record with the
child that holds the keys between that record and the next one. A separate
left child holds the keys smaller than the first slot.

Leaf nodes never have children; every child reference in a leaf is None.
"""

from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from ..core.types import IoTDevice


class NodeType(Enum):
    """The two node shapes"""
    LEAF = auto()
    REGULAR = auto()


# A slot payload: (record, child). The record is None only when it stands
# for the left child edge returned by remove_key().
Slot = Tuple[Optional[IoTDevice], Optional['Node']]


class Node:
    """
    A node of the device B-tree.

    devices[i] and children[i] form slot i; children[i] is the subtree
    to the right of devices[i]. len(node) counts child references
    (slots + the left child) and is what gets compared against the order.
    """

    __slots__ = ('node_type', 'devices', 'children', 'left_child')

    def __init__(self, node_type: NodeType):
        self.node_type = node_type
        self.devices: List[Optional[IoTDevice]] = []
        self.children: List[Optional['Node']] = []
        self.left_child: Optional['Node'] = None

    @classmethod
    def new_leaf(cls) -> 'Node':
        return cls(NodeType.LEAF)

    @classmethod
    def new_regular(cls) -> 'Node':
        return cls(NodeType.REGULAR)

    @property
    def is_leaf(self) -> bool:
        return self.node_type == NodeType.LEAF

    def __len__(self) -> int:
        return len(self.children) + 1

    def __repr__(self) -> str:
        return f"Node({self.node_type.name}, keys={self.keys()})"

    def keys(self) -> List[int]:
        """Slot keys in order"""
        return [d.numerical_id for d in self.devices if d is not None]

    def split(self) -> Tuple[IoTDevice, 'Node']:
        """
        Split this node around its middle slot.

        The middle record is returned for promotion, its child becomes the
        sibling's left child, and every slot after it moves to the sibling.
        This node keeps the lower half and its own left child.
        """
        sibling = Node(self.node_type)
        split_at = len(self.devices) // 2

        promoted = self.devices.pop(split_at)
        node = self.children.pop(split_at)

        for _ in range(split_at, len(self.devices)):
            device = self.devices.pop()
            child = self.children.pop()
            sibling.add_key(device.numerical_id, (device, child))

        sibling.add_left_child(node)
        return promoted, sibling

    def add_left_child(self, tree: Optional['Node']) -> None:
        """Set the child holding keys below the first slot"""
        self.left_child = tree

    def add_key(self, key: int, value: Slot) -> bool:
        """Insert a slot after every slot whose key is <= key"""
        index = self.find_closest_index(key)
        pos = 0 if index is None else index + 1
        device, tree = value

        self.devices.insert(pos, device)
        self.children.insert(pos, tree)
        return True

    def remove_key(self, key: int) -> Tuple[int, Slot]:
        """
        Detach the edge a search for key would follow.

        Returns the left child (with no record) when key sorts before every
        slot, otherwise the removed slot itself.
        """
        index = self.find_closest_index(key)
        if index is None:
            tree = self.left_child
            self.left_child = None
            return key, (None, tree)

        device = self.devices.pop(index)
        tree = self.children.pop(index)
        return device.numerical_id, (device, tree)

    def find_closest_index(self, key: int) -> Optional[int]:
        """Index of the last slot with a key <= key, or None for the left child"""
        index = None
        for i, device in enumerate(self.devices):
            if device is None:
                continue
            if device.numerical_id <= key:
                index = i
            else:
                break
        return index

    def get_device(self, key: int) -> Optional[IoTDevice]:
        """First device in this node whose id equals key, or None"""
        for device in self.devices:
            if device is not None and device.numerical_id == key:
                return device
        return None

    def get_child(self, key: int) -> Optional['Node']:
        """
        Child subtree to descend into when looking for key.

        Returns:
            The left child when key is below every slot, otherwise the child
            of the closest slot (None if that reference is absent)
        """
        index = self.find_closest_index(key)
        if index is None:
            return self.left_child
        return self.children[index]

    def iter_children(self) -> List['Node']:
        """Children left to right, skipping absent references"""
        nodes = [self.left_child] + self.children
        return [n for n in nodes if n is not None]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to a nested dict of keys (for display)"""
        data: Dict[str, Any] = {
            'type': self.node_type.name.lower(),
            'keys': self.keys(),
        }
        if not self.is_leaf:
            data['children'] = [child.to_dict() for child in self.iter_children()]
        return data
