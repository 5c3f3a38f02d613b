"""Core module - Database, Types, Config, Executor, REPL"""

from .types import IoTDevice
from .config import DatabaseConfig
from .database import Database
from .executor import CommandExecutor, CommandResult
from .repl import REPL

__all__ = [
    'Database', 'REPL',
    'IoTDevice', 'DatabaseConfig',
    'CommandExecutor', 'CommandResult',
]
