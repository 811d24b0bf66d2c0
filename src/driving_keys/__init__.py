"""
driving_keys - Restartable, ordered key generation for batch jobs.

Retrieve the ordered keys of a driving query, checkpoint the last processed
key, and on restart retrieve only the keys after that checkpoint. Supports
composite (multi-column) keys through pluggable key mappers.
"""

__version__ = "0.1.0"

# Core components
from driving_keys.core.key import Key, Checkpoint
from driving_keys.core.generator import KeyGenerator
from driving_keys.core.cursor import KeyCursor
from driving_keys.core.exceptions import (
    DrivingKeysError,
    ConfigurationError,
    ExecutionError,
    MappingError,
    BindingError,
    StateError,
)

# Mappers
from driving_keys.mappers.base import AbstractKeyMapper
from driving_keys.mappers.column_map import ColumnMapKeyMapper
from driving_keys.mappers.typed import SingleColumnKeyMapper, TypedKeyMapper

# Executors
from driving_keys.executors.base import AbstractQueryExecutor
from driving_keys.executors.sqlite import SQLiteQueryExecutor

# Lazy imports for SQL Server components to avoid pyodbc dependency
def __getattr__(name):
    if name == "SQLServerQueryExecutor":
        from driving_keys.executors.sql_server import SQLServerQueryExecutor
        return SQLServerQueryExecutor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    # Version
    "__version__",
    # Core
    "Key",
    "Checkpoint",
    "KeyGenerator",
    "KeyCursor",
    "DrivingKeysError",
    "ConfigurationError",
    "ExecutionError",
    "MappingError",
    "BindingError",
    "StateError",
    # Mappers
    "AbstractKeyMapper",
    "ColumnMapKeyMapper",
    "TypedKeyMapper",
    "SingleColumnKeyMapper",
    # Executors
    "AbstractQueryExecutor",
    "SQLiteQueryExecutor",
    "SQLServerQueryExecutor",
]
