"""
Custom exceptions for the driving_keys package.

Provides a hierarchy of exceptions with enough context (offending query,
offending column) to diagnose a mismatch between query shape and mapper.
"""

from typing import Any, Mapping, Optional


class DrivingKeysError(Exception):
    """
    Base exception for all driving_keys errors.

    Example:
        >>> try:
        ...     keys = generator.retrieve_keys()
        ... except DrivingKeysError as e:
        ...     print(f"Key generation failed: {e}")
    """

    pass


class ConfigurationError(DrivingKeysError):
    """
    Raised when required configuration is missing or invalid.

    Fatal to the call and never retried: the generator, mapper or executor
    has to be reconfigured.

    Attributes:
        option: Name of the offending configuration option, if known

    Example:
        >>> raise ConfigurationError(
        ...     "The restart query must not be empty in order to restart.",
        ...     option="restart_query",
        ... )
    """

    def __init__(self, message: str, option: Optional[str] = None):
        self.option = option
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ConfigurationError({str(self)!r}, option={self.option!r})"


class ExecutionError(DrivingKeysError):
    """
    Raised when the underlying query execution fails.

    Covers connectivity failures, malformed queries and type mismatches.
    The package performs no retry; retry policy belongs to the caller.

    Attributes:
        query: The query text that failed
        original_error: The underlying driver exception

    Example:
        >>> try:
        ...     cursor.execute(query)
        ... except pyodbc.Error as e:
        ...     raise ExecutionError(query=query, original_error=e) from e
    """

    def __init__(self, query: str, original_error: Exception):
        self.query = query
        self.original_error = original_error

        message = (
            f"Query execution failed: {type(original_error).__name__}: {original_error}. "
            f"Query: {query.strip()}"
        )
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"ExecutionError(query={self.query!r}, "
            f"original_error={self.original_error!r})"
        )


class MappingError(DrivingKeysError):
    """
    Raised when a result row cannot be converted to a Key.

    Attributes:
        column: The missing or unconvertible column, if known
        row: The offending row, if available

    Example:
        >>> raise MappingError(
        ...     "Column 'region' not found in row",
        ...     column="region",
        ...     row={"id": 1},
        ... )
    """

    def __init__(
        self,
        message: str,
        column: Optional[str] = None,
        row: Optional[Mapping[str, Any]] = None,
    ):
        self.column = column
        self.row = row
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"MappingError({str(self)!r}, "
            f"column={self.column!r}, "
            f"row={self.row!r})"
        )


class BindingError(DrivingKeysError):
    """
    Raised when a Checkpoint cannot be converted to restart query parameters.

    Attributes:
        column: The column missing from (or unconvertible in) the checkpoint
    """

    def __init__(self, message: str, column: Optional[str] = None):
        self.column = column
        super().__init__(message)

    def __repr__(self) -> str:
        return f"BindingError({str(self)!r}, column={self.column!r})"


class StateError(DrivingKeysError):
    """Raised when an operation is invoked on an object that cannot serve it."""

    pass
