"""
Data Types Module - The device record stored by DeviceDB

A device is identified by its numerical id (the index key) and its
address. The path is carried along but is not part of identity.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True, eq=False)
class IoTDevice:
    """An immutable IoT device record"""
    numerical_id: int
    address: str
    path: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IoTDevice):
            return NotImplemented
        return self.numerical_id == other.numerical_id and self.address == other.address

    def __hash__(self) -> int:
        return hash((self.numerical_id, self.address))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dict"""
        return {
            'numerical_id': self.numerical_id,
            'address': self.address,
            'path': self.path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IoTDevice':
        """Build a device from a plain dict, validating the id"""
        if 'numerical_id' not in data:
            raise ValueError("Device is missing 'numerical_id'")
        return cls(
            numerical_id=parse_device_id(data['numerical_id']),
            address=str(data.get('address', '')),
            path=str(data.get('path', '')),
        )


def parse_device_id(value: Any) -> int:
    """Convert a value to a device id (a non-negative integer)"""
    if isinstance(value, bool):
        raise ValueError(f"Cannot use {value!r} as a device id")
    try:
        device_id = int(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert '{value}' to a device id: {e}")
    if isinstance(value, float) and value != device_id:
        raise ValueError(f"Device id must be an integer, got {value}")
    if device_id < 0:
        raise ValueError(f"Device id must be non-negative, got {device_id}")
    return device_id
