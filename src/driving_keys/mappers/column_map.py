"""
Default "column map" key mapper.

Every column of the driving query row (or a configured subset) becomes part
of the key, and the checkpoint is exactly the key's column/value pairs.
"""

from typing import Any, Iterable, Mapping, Optional

from ..core.exceptions import BindingError, ConfigurationError, MappingError
from ..core.key import Checkpoint, Key
from .base import AbstractKeyMapper, BoundParameters

PARAMSTYLES = ("qmark", "named")


def _validate_column_list(values: Iterable[str], option: str) -> tuple[str, ...]:
    """Check a configured column list and return it as a tuple."""
    if isinstance(values, str):
        raise ConfigurationError(
            f"{option} must be a list of column names, not a string: {values!r}",
            option=option,
        )

    columns = tuple(values)
    if not columns:
        raise ConfigurationError(f"{option} must not be empty.", option=option)

    for column in columns:
        if not isinstance(column, str) or not column.strip():
            raise ConfigurationError(
                f"{option} must contain non-blank column names, got {column!r}",
                option=option,
            )
    return columns


class ColumnMapKeyMapper(AbstractKeyMapper):
    """
    Generic mapper that works for any column set.

    Without ``columns`` the key is every column of the row, in result-set
    order. With ``columns`` the key is exactly those columns, still in
    result-set order, and a row missing one of them is a MappingError. The
    configured order only decides the default binding order.

    The restart query usually orders its placeholders differently from the
    key columns (tuple comparison on the sort columns), so
    ``parameter_order`` lists the checkpoint columns in placeholder order.
    A column may be listed more than once for expanded comparisons such as
    ``region > ? OR (region = ? AND id > ?)``.

    Attributes:
        columns: Expected key columns, or None to take every row column
        parameter_order: Checkpoint columns in restart placeholder order
        paramstyle: "qmark" for positional ``?`` placeholders (list),
                    "named" for ``:name`` placeholders (dict)

    Example:
        >>> mapper = ColumnMapKeyMapper(
        ...     columns=["id", "region"],
        ...     parameter_order=["region", "id"],
        ... )
        >>> key = mapper.map_row({"id": 2, "region": "EU"})
        >>> checkpoint = mapper.checkpoint_from(key)
        >>> mapper.bind_parameters(checkpoint)
        ['EU', 2]
    """

    def __init__(
        self,
        columns: Optional[Iterable[str]] = None,
        parameter_order: Optional[Iterable[str]] = None,
        paramstyle: str = "qmark",
    ):
        """
        Initialize the column map mapper.

        Args:
            columns: Expected key columns (optional); their order is the default
                     binding order
            parameter_order: Checkpoint columns in the order the restart
                             query's placeholders expect (defaults to columns,
                             or to the checkpoint's own order)
            paramstyle: "qmark" or "named"

        Raises:
            ConfigurationError: If a column list is empty or contains blank or
                                duplicate names, parameter_order names a column
                                outside columns, or paramstyle is unknown
        """
        self.columns: Optional[tuple[str, ...]] = None
        if columns is not None:
            self.columns = _validate_column_list(columns, "columns")
            if len(set(self.columns)) != len(self.columns):
                raise ConfigurationError(
                    f"columns must not contain duplicates: {list(self.columns)}",
                    option="columns",
                )

        self.parameter_order: Optional[tuple[str, ...]] = None
        if parameter_order is not None:
            self.parameter_order = _validate_column_list(parameter_order, "parameter_order")
            if self.columns is not None:
                unknown = [c for c in self.parameter_order if c not in self.columns]
                if unknown:
                    raise ConfigurationError(
                        f"parameter_order references columns that are not key columns: "
                        f"{unknown}. Key columns: {list(self.columns)}",
                        option="parameter_order",
                    )

        if paramstyle not in PARAMSTYLES:
            raise ConfigurationError(
                f"Invalid paramstyle: {paramstyle!r}. Must be one of: {', '.join(PARAMSTYLES)}",
                option="paramstyle",
            )
        self.paramstyle = paramstyle

    def _coerce(self, column: str, value: Any) -> Any:
        """
        Convert a raw column value to its key value.

        The column map mapper keeps values exactly as the driver returned
        them. Subclasses raise TypeError or ValueError on bad input.
        """
        return value

    def map_row(self, row: Mapping[str, Any]) -> Key:
        if not isinstance(row, Mapping):
            raise MappingError(
                f"Rows must be mappings of column name to value, got {type(row).__name__}"
            )

        if self.columns is None:
            if not row:
                raise MappingError("Row has no columns to build a key from.", row=row)
            selected = list(row.keys())
        else:
            for column in self.columns:
                if column not in row:
                    raise MappingError(
                        f"Key column '{column}' not found in row. Available columns: {list(row)}",
                        column=column,
                        row=row,
                    )
            # Key columns keep the result-set order, whatever order they were configured in
            selected = [column for column in row if column in self.columns]

        pairs = []
        for column in selected:
            try:
                value = self._coerce(column, row[column])
            except (TypeError, ValueError) as e:
                raise MappingError(
                    f"Cannot convert value {row[column]!r} of key column '{column}': {e}",
                    column=column,
                    row=row,
                ) from e
            pairs.append((column, value))

        return Key(pairs)

    def checkpoint_from(self, key: Key) -> Checkpoint:
        return Checkpoint(key.as_dict())

    def bind_parameters(self, checkpoint: Checkpoint) -> BoundParameters:
        if not checkpoint:
            raise BindingError("Cannot bind restart parameters from an empty checkpoint.")

        order = self.parameter_order or self.columns or tuple(checkpoint)

        bound = []
        for column in order:
            if column not in checkpoint:
                raise BindingError(
                    f"Checkpoint is missing column '{column}' required by the restart query. "
                    f"Checkpoint columns: {list(checkpoint)}",
                    column=column,
                )
            try:
                value = self._coerce(column, checkpoint[column])
            except (TypeError, ValueError) as e:
                raise BindingError(
                    f"Cannot convert checkpoint value {checkpoint[column]!r} "
                    f"of column '{column}': {e}",
                    column=column,
                ) from e
            bound.append((column, value))

        if self.paramstyle == "named":
            return dict(bound)
        return [value for _, value in bound]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(columns={self.columns!r}, "
            f"parameter_order={self.parameter_order!r}, "
            f"paramstyle={self.paramstyle!r})"
        )
