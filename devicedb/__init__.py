"""
DeviceDB - An in-memory B-tree index of IoT devices

Devices are kept sorted by numerical id in a balanced multiway search
tree that splits full nodes and promotes their middle key upward.
"""

__version__ = "1.0.0"

from .core.database import Database
from .core.repl import REPL
from .core.types import IoTDevice
from .indexing.btree import BTreeIndex, DuplicateKeyError

__all__ = ["Database", "REPL", "IoTDevice", "BTreeIndex", "DuplicateKeyError"]
