"""
Query executor implementations.

Executors run driving queries against a data store and return the rows
mapped to Key values.
"""

from driving_keys.executors.base import AbstractQueryExecutor, RowMapper
from driving_keys.executors.sqlite import SQLiteQueryExecutor

# Lazy import for SQL Server to avoid pyodbc dependency when not needed
def __getattr__(name):
    if name == "SQLServerQueryExecutor":
        from driving_keys.executors.sql_server import SQLServerQueryExecutor
        return SQLServerQueryExecutor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "AbstractQueryExecutor",
    "RowMapper",
    "SQLServerQueryExecutor",
    "SQLiteQueryExecutor",
]
