"""
Key mappers with per-column type coercion.

Checkpoints usually travel through a text store (JSON, a job repository
table) and come back with every value as a string. Coercing on both the row
and the binding side keeps the restart query's comparisons typed.
"""

from numbers import Number
from typing import Any, Callable, Iterable, Mapping, Optional

from ..core.exceptions import ConfigurationError
from .column_map import ColumnMapKeyMapper

Converter = Callable[[Any], Any]


class TypedKeyMapper(ColumnMapKeyMapper):
    """
    Composite natural key mapper with type coercion.

    ``column_types`` fixes the key columns and the converter for each one.
    A converter of None passes the value through unchanged. Converters must
    be lossless: a numeric value that changes under conversion (2.7 under
    ``int``) is rejected, because the key would no longer match its row and
    a restart would return that row again. NULL values are rejected too: a
    NULL key column cannot take part in the restart query's ordering
    predicate.

    Example:
        >>> from datetime import date
        >>> mapper = TypedKeyMapper(
        ...     {"order_date": date.fromisoformat, "order_no": int},
        ...     paramstyle="named",
        ... )
        >>> checkpoint = Checkpoint({"order_date": "2024-03-01", "order_no": "17"})
        >>> mapper.bind_parameters(checkpoint)
        {'order_date': datetime.date(2024, 3, 1), 'order_no': 17}
    """

    def __init__(
        self,
        column_types: Mapping[str, Optional[Converter]],
        parameter_order: Optional[Iterable[str]] = None,
        paramstyle: str = "qmark",
    ):
        """
        Initialize the typed mapper.

        Args:
            column_types: Ordered mapping of key column name to converter
            parameter_order: Checkpoint columns in restart placeholder order
            paramstyle: "qmark" or "named"

        Raises:
            ConfigurationError: If column_types is empty or a converter is not callable
        """
        if not column_types:
            raise ConfigurationError("column_types must not be empty.", option="column_types")

        for column, converter in column_types.items():
            if converter is not None and not callable(converter):
                raise ConfigurationError(
                    f"Converter for column '{column}' is not callable: {converter!r}",
                    option="column_types",
                )

        super().__init__(
            columns=list(column_types),
            parameter_order=parameter_order,
            paramstyle=paramstyle,
        )
        self.column_types = dict(column_types)

    def _coerce(self, column: str, value: Any) -> Any:
        if value is None:
            raise ValueError("NULL value; key columns must be non-NULL")

        converter = self.column_types[column]
        if converter is None:
            return value
        if isinstance(converter, type) and isinstance(value, converter):
            return value

        converted = converter(value)
        if (
            isinstance(value, Number)
            and isinstance(converted, Number)
            and not isinstance(value, bool)
            and converted != value
        ):
            raise ValueError(f"conversion is lossy, {value!r} became {converted!r}")
        return converted

    def __repr__(self) -> str:
        types = {
            column: getattr(converter, "__name__", repr(converter))
            for column, converter in self.column_types.items()
        }
        return (
            f"TypedKeyMapper(column_types={types!r}, "
            f"parameter_order={self.parameter_order!r}, "
            f"paramstyle={self.paramstyle!r})"
        )


class SingleColumnKeyMapper(TypedKeyMapper):
    """
    Mapper for a single surrogate key column.

    Any other columns in the row are ignored, and the restart query takes
    exactly one parameter.

    Example:
        >>> mapper = SingleColumnKeyMapper("customer_id", converter=int)
        >>> mapper.map_row({"customer_id": 42, "name": "ACME"})
        Key(customer_id=42)
    """

    def __init__(
        self,
        column: str,
        converter: Optional[Converter] = None,
        paramstyle: str = "qmark",
    ):
        if not isinstance(column, str) or not column.strip():
            raise ConfigurationError(
                f"column must be a non-blank column name, got {column!r}",
                option="column",
            )
        super().__init__({column: converter}, paramstyle=paramstyle)
        self.column = column

    def __repr__(self) -> str:
        converter = self.column_types[self.column]
        return (
            f"SingleColumnKeyMapper(column={self.column!r}, "
            f"converter={getattr(converter, '__name__', converter)!r})"
        )
