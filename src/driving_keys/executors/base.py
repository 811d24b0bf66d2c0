"""
Abstract base class for query executors.

Executors run a single driving query against a data store and turn every
row into a Key with the row mapper they are given.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional

from ..core.key import Key
from ..mappers.base import BoundParameters

RowMapper = Callable[[Mapping[str, Any]], Key]


class AbstractQueryExecutor(ABC):
    """
    Base class for all query executors.

    Implementations must fully materialize the result before returning and
    release every connection and cursor they opened, whether the query
    succeeded or not. Errors raised by the row mapper propagate unchanged;
    driver errors are wrapped in ExecutionError.

    Example:
        >>> class ListExecutor(AbstractQueryExecutor):
        ...     def __init__(self, rows):
        ...         self.rows = rows
        ...
        ...     def execute(self, query, row_mapper, parameters=None):
        ...         return [row_mapper(row) for row in self.rows]
    """

    @abstractmethod
    def execute(
        self,
        query: str,
        row_mapper: RowMapper,
        parameters: Optional[BoundParameters] = None,
    ) -> list[Key]:
        """
        Execute a query and map every row to a Key.

        Args:
            query: Query text
            row_mapper: Callable turning a column name to value mapping into a Key
            parameters: Bound values for the query's placeholders (optional)

        Returns:
            Keys in result-set order

        Raises:
            ExecutionError: If connecting or executing fails
            MappingError: If the row mapper rejects a row
        """
        pass
