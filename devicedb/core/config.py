"""
Configuration - Settings for a DeviceDB database

Values come from constructor arguments, the environment, or CLI flags
(in increasing order of precedence).
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..indexing.btree import MIN_ORDER
from .log import LOG_LEVEL_ENV

DEFAULT_ORDER = 5

ORDER_ENV = "DEVICEDB_ORDER"
UNIQUE_ENV = "DEVICEDB_UNIQUE"

_TRUE_VALUES = ('1', 'TRUE', 'YES', 'ON')
_FALSE_VALUES = ('0', 'FALSE', 'NO', 'OFF', '')


@dataclass
class DatabaseConfig:
    """Settings for a database and its B-tree index"""
    order: int = DEFAULT_ORDER
    unique: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range"""
        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise ValueError(f"Order must be an integer, got {self.order!r}")
        if self.order < MIN_ORDER:
            raise ValueError(f"Order must be at least {MIN_ORDER}, got {self.order}")
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DatabaseConfig':
        """Load settings from DEVICEDB_* environment variables"""
        env = os.environ if environ is None else environ

        order = DEFAULT_ORDER
        raw_order = env.get(ORDER_ENV)
        if raw_order is not None and raw_order.strip():
            try:
                order = int(raw_order)
            except ValueError:
                raise ValueError(f"{ORDER_ENV} must be an integer, got '{raw_order}'")

        unique = _parse_bool(env.get(UNIQUE_ENV, ''), UNIQUE_ENV)
        log_level = env.get(LOG_LEVEL_ENV, 'WARNING') or 'WARNING'

        return cls(order=order, unique=unique, log_level=log_level.upper())


def _parse_bool(value: str, name: str) -> bool:
    value = value.strip().upper()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got '{value}'")
