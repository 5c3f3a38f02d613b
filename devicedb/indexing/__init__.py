"""Indexing module - B-Tree Index"""

from .node import Node, NodeType
from .btree import BTreeIndex, DuplicateKeyError, MIN_ORDER

__all__ = ['BTreeIndex', 'DuplicateKeyError', 'MIN_ORDER', 'Node', 'NodeType']
