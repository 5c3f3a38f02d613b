"""
Database - Main entry point for DeviceDB

This is the primary interface for interacting with DeviceDB.
It owns the B-tree index and coordinates the parser and executor.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..indexing.btree import BTreeIndex
from ..parser.parser import parse_command, parse_script
from .config import DatabaseConfig
from .executor import CommandExecutor, CommandResult
from .log import get_logger
from .types import IoTDevice

logger = get_logger(__name__)


class Database:
    """
    DeviceDB Database instance.

    Usage:
        db = Database(order=3)
        db.execute("INSERT (1, '10.0.0.1', '/floor1'), (2, '10.0.0.2')")
        result = db.execute("WALK")
        for row in result.rows:
            print(row)
    """

    def __init__(self, order: Optional[int] = None, unique: Optional[bool] = None,
                 config: Optional[DatabaseConfig] = None):
        """
        Initialize a DeviceDB database.

        Args:
            order: Maximum number of children per B-tree node (overrides config)
            unique: Reject duplicate device ids (overrides config)
            config: Settings to start from; read from the environment if omitted
        """
        if config is None:
            config = DatabaseConfig.from_env()
        if order is not None:
            config = replace(config, order=order)
        if unique is not None:
            config = replace(config, unique=unique)

        self.config = config
        self.index = BTreeIndex(order=config.order, unique=config.unique)
        self.executor = CommandExecutor(self.index)
        logger.info("Opened database (order=%d, unique=%s)", config.order, config.unique)

    def execute(self, command: str) -> CommandResult:
        """
        Execute a single command.

        Raises:
            ParseError: If the command is malformed
            ValueError: If the command cannot be executed
        """
        statement = parse_command(command)
        return self.executor.execute(statement)

    def execute_many(self, commands: str) -> List[CommandResult]:
        """
        Execute multiple commands separated by semicolons.

        Commands are parsed up front, so a malformed script runs nothing.

        Returns:
            One CommandResult per command, in order
        """
        return [self.executor.execute(stmt) for stmt in parse_script(commands)]

    def add(self, device: IoTDevice) -> None:
        """Insert a device record into the index."""
        self.index.add(device)

    def add_many(self, devices: Iterable[IoTDevice]) -> int:
        """
        Insert devices one at a time.

        Args:
            devices: Records to insert, in insertion order

        Returns:
            Number of devices inserted
        """
        added = 0
        for device in devices:
            self.index.add(device)
            added += 1
        return added

    def find(self, device_id: int) -> Optional[IoTDevice]:
        """Look up a device by id. Returns None if it is not present."""
        return self.index.find(device_id)

    def walk(self, callback: Callable[[IoTDevice], Any]) -> None:
        """Call callback on every device in ascending id order."""
        self.index.walk(callback)

    def devices(self) -> List[IoTDevice]:
        """All devices sorted by id"""
        return self.index.devices()

    def count(self) -> int:
        """Number of devices inserted"""
        return len(self.index)

    def is_valid(self) -> bool:
        """Check the B-tree invariants (an empty index is not valid)."""
        return self.index.is_a_valid_btree()

    def stats(self) -> Dict[str, Any]:
        """Get index statistics (order, length, height, node counts)."""
        return self.index.stats()

    def close(self) -> None:
        """Close database (nothing to release for an in-memory index)."""
        logger.debug("Closing database with %d device(s)", len(self.index))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
