"""
SQLite query executor.

Runs driving queries against a SQLite database file using the standard
library driver. Useful for local jobs and for testing key generators
without SQL Server dependencies.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import ConfigurationError, ExecutionError
from ..core.key import Key
from ..mappers.base import BoundParameters
from .base import AbstractQueryExecutor, RowMapper

logger = logging.getLogger(__name__)


class SQLiteQueryExecutor(AbstractQueryExecutor):
    """
    Execute driving queries against a SQLite database.

    Both ``?`` (list parameters) and ``:name`` (dict parameters)
    placeholders are supported. Row-value comparisons such as
    ``(region, id) > (:region, :id)`` need SQLite 3.15 or newer.

    Every call opens and closes its own connection, so the database must be
    a file that outlives the connection.

    Example:
        >>> executor = SQLiteQueryExecutor("data/orders.db")
        >>> keys = executor.execute(
        ...     "SELECT id, region FROM orders ORDER BY region, id",
        ...     ColumnMapKeyMapper().map_row,
        ... )
    """

    def __init__(self, database: Union[str, Path]):
        """
        Initialize the SQLite executor.

        Args:
            database: Path to the database file

        Raises:
            ConfigurationError: If database is blank or an in-memory database
        """
        if not str(database).strip():
            raise ConfigurationError("database must not be empty.", option="database")
        if str(database).strip() == ":memory:":
            raise ConfigurationError(
                "An in-memory database is empty on every call; use a database file.",
                option="database",
            )
        self.database = str(database)

    def execute(
        self,
        query: str,
        row_mapper: RowMapper,
        parameters: Optional[BoundParameters] = None,
    ) -> list[Key]:
        """
        Execute the query and map every row.

        Raises:
            ExecutionError: If the connection fails, the query fails, or the
                            statement returns no result set
            MappingError: If the row mapper rejects a row
        """
        try:
            conn = sqlite3.connect(self.database)
        except sqlite3.Error as e:
            raise ExecutionError(query=query, original_error=e) from e

        try:
            try:
                if parameters:
                    cursor = conn.execute(query, parameters)
                else:
                    cursor = conn.execute(query)
            except sqlite3.Error as e:
                raise ExecutionError(query=query, original_error=e) from e

            try:
                if cursor.description is None:
                    raise ExecutionError(
                        query=query,
                        original_error=ValueError(
                            "Query did not return any columns. Ensure the query is a SELECT statement."
                        ),
                    )

                column_names = [col[0] for col in cursor.description]
                logger.debug(f"Query returned columns {column_names}")

                try:
                    return [row_mapper(dict(zip(column_names, row))) for row in cursor]
                except sqlite3.Error as e:
                    raise ExecutionError(query=query, original_error=e) from e
            finally:
                cursor.close()
        finally:
            # Always close the connection
            conn.close()
