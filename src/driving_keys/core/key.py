"""
Key and Checkpoint value objects.

A Key identifies one item to process by the ordered column values of a
driving query row. A Checkpoint captures the state of a single Key so that
a restarted job can resume immediately after it.
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from .exceptions import MappingError


class Key:
    """
    Immutable, ordered composite key.

    Holds ``(column_name, value)`` pairs in result-set column order. Column
    names are validated at construction: at least one column, every name a
    non-blank string, no duplicates. Equality and hashing are structural over
    the ordered pairs, so ``Key({"id": 1, "region": "EU"})`` and
    ``Key({"region": "EU", "id": 1})`` are different keys.

    Example:
        >>> key = Key({"id": 2, "region": "EU"})
        >>> key["region"]
        'EU'
        >>> key.columns
        ('id', 'region')
        >>> key.values
        (2, 'EU')
        >>> key == Key([("id", 2), ("region", "EU")])
        True
    """

    __slots__ = ("_items",)

    def __init__(self, columns: Union[Mapping[str, Any], Iterable[tuple[str, Any]]]):
        """
        Initialize a Key.

        Args:
            columns: Mapping of column name to value, or an iterable of
                     ``(name, value)`` pairs, in key column order

        Raises:
            MappingError: If there are no columns, a name is blank or not a
                          string, or a name appears twice
        """
        if isinstance(columns, (Key, Mapping)):
            pairs = tuple(columns.items())
        else:
            pairs = tuple(columns)

        if not pairs:
            raise MappingError("A key must have at least one column.")

        seen = set()
        for pair in pairs:
            if len(pair) != 2:
                raise MappingError(f"Key columns must be (name, value) pairs, got {pair!r}")
            name = pair[0]
            if not isinstance(name, str) or not name.strip():
                raise MappingError(
                    f"Key column names must be non-blank strings, got {name!r}",
                    column=name if isinstance(name, str) else None,
                )
            if name in seen:
                raise MappingError(f"Duplicate key column '{name}'", column=name)
            seen.add(name)

        self._items: tuple[tuple[str, Any], ...] = tuple((name, value) for name, value in pairs)

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in key order."""
        return tuple(name for name, _ in self._items)

    @property
    def values(self) -> tuple[Any, ...]:
        """Column values in key order."""
        return tuple(value for _, value in self._items)

    def items(self) -> tuple[tuple[str, Any], ...]:
        """Ordered ``(name, value)`` pairs."""
        return self._items

    def as_dict(self) -> dict[str, Any]:
        """Return a new insertion-ordered dict of the key's columns."""
        return dict(self._items)

    def __getitem__(self, column: str) -> Any:
        for name, value in self._items:
            if name == column:
                return value
        raise KeyError(column)

    def __contains__(self, column: object) -> bool:
        return any(name == column for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in self._items)
        return f"Key({inner})"


class Checkpoint(Mapping):
    """
    Immutable mapping of column name to value for one processed Key.

    An empty Checkpoint is the valid "no progress yet" state. The package
    never persists checkpoints itself; ``to_dict()`` and ``from_dict()``
    give the caller a plain mapping to store however it likes.

    Example:
        >>> checkpoint = Checkpoint({"id": 2, "region": "EU"})
        >>> checkpoint["id"]
        2
        >>> checkpoint["id"] = 3  # Raises TypeError - checkpoints are immutable!
        >>> Checkpoint().is_empty
        True
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data = MappingProxyType(dict(data) if data else {})

    @property
    def is_empty(self) -> bool:
        """True when the checkpoint records no progress."""
        return not self._data

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the checkpoint to a plain dict for persistence.

        Returns:
            Insertion-ordered dict of column name to value
        """
        return dict(self._data)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Checkpoint":
        """
        Rebuild a checkpoint from the output of to_dict().

        Args:
            data: Previously persisted mapping, or None for no progress

        Returns:
            Checkpoint instance (empty when data is None or empty)
        """
        if isinstance(data, cls):
            return data
        return cls(data)

    def __getitem__(self, column: str) -> Any:
        return self._data[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Checkpoint({dict(self._data)!r})"
