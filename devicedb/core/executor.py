"""
Command Executor - Executes parsed commands

Takes statements from the parser and runs them against a B-tree index,
returning tabular results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..indexing.btree import BTreeIndex
from ..parser.parser import (
    Statement, InsertStatement, FindStatement, WalkStatement, CountStatement,
    ValidateStatement, ShowTreeStatement, ShowStatsStatement,
)
from .log import get_logger

logger = get_logger(__name__)

DEVICE_COLUMNS = ['numerical_id', 'address', 'path']


@dataclass
class CommandResult:
    """Result of a command execution"""
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""


class CommandExecutor:
    """Runs statements against an index"""

    def __init__(self, index: BTreeIndex):
        self.index = index

    def execute(self, statement: Statement) -> CommandResult:
        """Execute a parsed statement"""
        handlers = {
            InsertStatement: self._execute_insert,
            FindStatement: self._execute_find,
            WalkStatement: self._execute_walk,
            CountStatement: self._execute_count,
            ValidateStatement: self._execute_validate,
            ShowTreeStatement: self._execute_show_tree,
            ShowStatsStatement: self._execute_show_stats,
        }

        handler = handlers.get(type(statement))
        if handler is None:
            raise ValueError(f"Unsupported statement type: {type(statement).__name__}")
        return handler(statement)

    def _execute_insert(self, stmt: InsertStatement) -> CommandResult:
        inserted = 0
        for device in stmt.devices:
            self.index.add(device)
            inserted += 1
        logger.debug("Inserted %d device(s), index length %d", inserted, len(self.index))
        return CommandResult(affected_rows=inserted, message=f"{inserted} device(s) inserted")

    def _execute_find(self, stmt: FindStatement) -> CommandResult:
        device = self.index.find(stmt.device_id)
        if device is None:
            return CommandResult(columns=list(DEVICE_COLUMNS),
                                 message=f"Device {stmt.device_id} not found")
        return CommandResult(columns=list(DEVICE_COLUMNS), rows=[device.to_dict()])

    def _execute_walk(self, stmt: WalkStatement) -> CommandResult:
        rows: List[Dict[str, Any]] = []
        self.index.walk(lambda device: rows.append(device.to_dict()))
        return CommandResult(columns=list(DEVICE_COLUMNS), rows=rows)

    def _execute_count(self, stmt: CountStatement) -> CommandResult:
        return CommandResult(columns=['count'], rows=[{'count': len(self.index)}])

    def _execute_validate(self, stmt: ValidateStatement) -> CommandResult:
        return CommandResult(columns=['valid'], rows=[{'valid': self.index.is_a_valid_btree()}])

    def _execute_show_tree(self, stmt: ShowTreeStatement) -> CommandResult:
        return CommandResult(message=self.index.dump_structure())

    def _execute_show_stats(self, stmt: ShowStatsStatement) -> CommandResult:
        stats = self.index.stats()
        return CommandResult(columns=list(stats.keys()), rows=[stats])
