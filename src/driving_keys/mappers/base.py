"""
Abstract base class for key mappers.

Key mappers are the only translation layer between raw query rows, Key
values and Checkpoint values. KeyGenerator depends on nothing else.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Union

from ..core.key import Checkpoint, Key

# Positional parameters for "?" placeholders, or a mapping for ":name" placeholders
BoundParameters = Union[Sequence[Any], Mapping[str, Any]]


class AbstractKeyMapper(ABC):
    """
    Base class for all key mappers.

    Subclasses translate a result row into a Key, a Key into a Checkpoint,
    and a Checkpoint into the parameters of the restart query. Mappers hold
    configuration only and are safe to share.

    The contract every implementation must keep: for any key ``k`` produced
    by ``map_row``, running the restart query with
    ``bind_parameters(checkpoint_from(k))`` never yields ``k`` again and
    never skips a key ordered after ``k``.

    Example:
        >>> class UpperCaseMapper(AbstractKeyMapper):
        ...     def map_row(self, row):
        ...         return Key({"code": row["code"].upper()})
        ...
        ...     def checkpoint_from(self, key):
        ...         return Checkpoint(key.as_dict())
        ...
        ...     def bind_parameters(self, checkpoint):
        ...         return [checkpoint["code"]]
    """

    @abstractmethod
    def map_row(self, row: Mapping[str, Any]) -> Key:
        """
        Build a Key from one result row.

        Args:
            row: Column name to value mapping, in result-set column order

        Returns:
            Key for the row

        Raises:
            MappingError: If the row is missing an expected column or a value
                          cannot be converted
        """
        pass

    @abstractmethod
    def checkpoint_from(self, key: Key) -> Checkpoint:
        """
        Extract the Checkpoint that means "resume after this key".

        Args:
            key: A key previously produced by map_row

        Returns:
            Checkpoint with one entry per column the restart query needs
        """
        pass

    @abstractmethod
    def bind_parameters(self, checkpoint: Checkpoint) -> BoundParameters:
        """
        Convert a Checkpoint into restart query parameters.

        Args:
            checkpoint: Non-empty checkpoint from checkpoint_from()

        Returns:
            Parameters in the order (or with the names) the restart query's
            placeholders expect

        Raises:
            BindingError: If the checkpoint is missing a required column
        """
        pass
