"""
Core components for driving_keys.

Includes the Key and Checkpoint value objects, key generation, the key
cursor, and exception handling.
"""

from driving_keys.core.exceptions import (
    DrivingKeysError,
    ConfigurationError,
    ExecutionError,
    MappingError,
    BindingError,
    StateError,
)
from driving_keys.core.key import Key, Checkpoint
from driving_keys.core.generator import KeyGenerator, KeyGeneratorConfig
from driving_keys.core.cursor import KeyCursor

__all__ = [
    "Key",
    "Checkpoint",
    "KeyGenerator",
    "KeyGeneratorConfig",
    "KeyCursor",
    "DrivingKeysError",
    "ConfigurationError",
    "ExecutionError",
    "MappingError",
    "BindingError",
    "StateError",
]
