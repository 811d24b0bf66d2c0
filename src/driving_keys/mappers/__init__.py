"""
Key mapper implementations.

Mappers translate between driving query rows, Key values and Checkpoint
values, and bind checkpoints to restart query parameters.
"""

from driving_keys.mappers.base import AbstractKeyMapper, BoundParameters
from driving_keys.mappers.column_map import ColumnMapKeyMapper
from driving_keys.mappers.typed import SingleColumnKeyMapper, TypedKeyMapper

__all__ = [
    "AbstractKeyMapper",
    "BoundParameters",
    "ColumnMapKeyMapper",
    "TypedKeyMapper",
    "SingleColumnKeyMapper",
]
