"""
SQL Server query executor.

Runs driving queries through pyodbc and maps each row to a Key.
Supports environment variable fallback for connection strings.
"""

import logging
import os
from collections.abc import Mapping
from typing import Optional

import pyodbc

from ..core.exceptions import ConfigurationError, ExecutionError
from ..core.key import Key
from ..mappers.base import BoundParameters
from .base import AbstractQueryExecutor, RowMapper

logger = logging.getLogger(__name__)


class SQLServerQueryExecutor(AbstractQueryExecutor):
    """
    SQL Server query executor.

    Opens one connection per call, executes the query with positional ``?``
    parameters, maps every row and closes the connection before returning.

    Attributes:
        connection_string: ODBC connection string (reads from SQL_SERVER_CONN env var if None)
        timeout: Query timeout in seconds, or None for the driver default

    Example:
        >>> executor = SQLServerQueryExecutor(timeout=30)
        >>> generator = KeyGenerator(
        ...     executor=executor,
        ...     query="SELECT id, region FROM dbo.orders ORDER BY region, id",
        ...     restart_query=(
        ...         "SELECT id, region FROM dbo.orders "
        ...         "WHERE region > ? OR (region = ? AND id > ?) "
        ...         "ORDER BY region, id"
        ...     ),
        ...     mapper=ColumnMapKeyMapper(
        ...         columns=["id", "region"],
        ...         parameter_order=["region", "region", "id"],
        ...     ),
        ... )

    Environment Variables:
        SQL_SERVER_CONN: Default ODBC connection string
            Example: "Driver={ODBC Driver 18 for SQL Server};Server=...;Database=...;UID=...;PWD=..."
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the SQL Server executor.

        Args:
            connection_string: ODBC connection string (optional, defaults to env var)
            timeout: Query timeout in seconds (optional)

        Raises:
            ConfigurationError: If connection_string is None and SQL_SERVER_CONN
                                env var is not set, or timeout is negative
        """
        if connection_string is None:
            connection_string = os.getenv("SQL_SERVER_CONN")
            if connection_string is None:
                raise ConfigurationError(
                    "No connection string provided. Either pass connection_string parameter "
                    "or set SQL_SERVER_CONN environment variable.",
                    option="connection_string",
                )

        if timeout is not None and timeout < 0:
            raise ConfigurationError(
                f"timeout must be zero or a positive number of seconds, got {timeout}",
                option="timeout",
            )

        self.connection_string = connection_string
        self.timeout = timeout

    def execute(
        self,
        query: str,
        row_mapper: RowMapper,
        parameters: Optional[BoundParameters] = None,
    ) -> list[Key]:
        """
        Execute the query and map every row.

        Args:
            query: T-SQL query text with ``?`` placeholders
            row_mapper: Callable turning a row dict into a Key
            parameters: Positional parameter values (optional)

        Returns:
            Keys in result-set order

        Raises:
            ConfigurationError: If named parameters are passed (pyodbc only
                                supports ``?`` placeholders)
            ExecutionError: If the connection fails, the query fails, or the
                            statement returns no result set
            MappingError: If the row mapper rejects a row
        """
        if isinstance(parameters, Mapping):
            raise ConfigurationError(
                "pyodbc only supports positional '?' parameters. "
                "Configure the key mapper with paramstyle='qmark'.",
                option="paramstyle",
            )

        try:
            conn = pyodbc.connect(self.connection_string)
        except pyodbc.Error as e:
            raise ExecutionError(query=query, original_error=e) from e

        try:
            if self.timeout is not None:
                conn.timeout = self.timeout

            cursor = conn.cursor()

            try:
                if parameters:
                    cursor.execute(query, list(parameters))
                else:
                    cursor.execute(query)
            except pyodbc.Error as e:
                raise ExecutionError(query=query, original_error=e) from e

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
            except pyodbc.Error as e:
                raise ExecutionError(query=query, original_error=e) from e
        finally:
            # Always close the connection
            conn.close()
