"""
Key generation for restartable driving-query batch jobs.

Coordinates full key retrieval, restart retrieval from a checkpoint, and
checkpoint extraction over one query executor and one key mapper.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError, field_validator

from ..executors.base import AbstractQueryExecutor
from ..mappers.base import AbstractKeyMapper
from ..mappers.column_map import ColumnMapKeyMapper
from .exceptions import ConfigurationError, StateError
from .key import Checkpoint, Key


class KeyGeneratorConfig(BaseModel):
    """
    Validated configuration for a KeyGenerator.

    Attributes:
        executor: Query executor used for every call
        query: Query enumerating all keys in canonical order
        restart_query: Query returning the keys after a checkpoint (optional)
        mapper: Key mapper (defaults to ColumnMapKeyMapper)
    """

    executor: AbstractQueryExecutor
    query: str
    restart_query: Optional[str] = None
    mapper: Optional[AbstractKeyMapper] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("The driving query must not be empty.")
        return v

    @field_validator("restart_query")
    @classmethod
    def restart_query_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("The restart query must not be empty when set.")
        return v


def _configuration_error(error: ValidationError) -> ConfigurationError:
    """Translate the first pydantic validation error into a ConfigurationError."""
    first = error.errors()[0]
    option = str(first["loc"][0]) if first.get("loc") else None
    return ConfigurationError(
        f"Invalid key generator configuration for '{option}': {first['msg']}",
        option=option,
    )


class KeyGenerator:
    """
    Generates the ordered key list for a driving-query batch job.

    Configuration is validated once, at construction. After that the
    generator holds no per-call state: every call runs one query and returns
    a fresh list of keys.

    The driving query defines the canonical order (an explicit ORDER BY on
    the key columns); the generator never re-sorts. The restart query must
    mirror that order and select only the keys strictly after the bound
    checkpoint.

    Example:
        >>> generator = KeyGenerator(
        ...     executor=SQLiteQueryExecutor("orders.db"),
        ...     query="SELECT id, region FROM orders ORDER BY region, id",
        ...     restart_query=(
        ...         "SELECT id, region FROM orders "
        ...         "WHERE (region, id) > (:region, :id) ORDER BY region, id"
        ...     ),
        ...     mapper=ColumnMapKeyMapper(columns=["id", "region"], paramstyle="named"),
        ... )
        >>>
        >>> # First run
        >>> keys = generator.retrieve_keys()
        >>> checkpoint = generator.checkpoint_for(keys[1])
        >>> saved = checkpoint.to_dict()  # persist this after each key
        >>>
        >>> # Restart run
        >>> remaining = generator.restore_keys(saved)
    """

    def __init__(
        self,
        executor: AbstractQueryExecutor,
        query: str,
        restart_query: Optional[str] = None,
        mapper: Optional[AbstractKeyMapper] = None,
        name: str = "default",
    ):
        """
        Initialize and validate the generator.

        Args:
            executor: Query executor
            query: Query returning every key in canonical order
            restart_query: Query returning the keys after a checkpoint; only
                           required if restore_keys() will be called
            mapper: Key mapper (defaults to ColumnMapKeyMapper())
            name: Identifier used in the logger name

        Raises:
            ConfigurationError: If executor or query is missing, or a query is blank
        """
        try:
            config = KeyGeneratorConfig(
                executor=executor,
                query=query,
                restart_query=restart_query,
                mapper=mapper,
            )
        except ValidationError as e:
            raise _configuration_error(e) from e

        self.name = name
        self.executor = config.executor
        self.query = config.query
        self.restart_query = config.restart_query
        self.mapper = config.mapper if config.mapper is not None else ColumnMapKeyMapper()

        self.logger = logging.getLogger(f"driving_keys.generator.{name}")

    @classmethod
    def from_sql_files(
        cls,
        executor: AbstractQueryExecutor,
        sql_file: Union[str, Path],
        restart_sql_file: Optional[Union[str, Path]] = None,
        mapper: Optional[AbstractKeyMapper] = None,
        name: str = "default",
    ) -> "KeyGenerator":
        """
        Build a generator whose queries live in .sql files.

        The files are read immediately so a bad path fails at setup, not on
        the first call.

        Args:
            executor: Query executor
            sql_file: Path to the driving query
            restart_sql_file: Path to the restart query (optional)
            mapper: Key mapper (optional)
            name: Identifier used in the logger name

        Returns:
            Configured KeyGenerator

        Raises:
            ConfigurationError: If a file does not exist or a query is blank
        """
        query = _read_sql_file(sql_file, "query")
        restart_query = None
        if restart_sql_file is not None:
            restart_query = _read_sql_file(restart_sql_file, "restart_query")

        return cls(
            executor=executor,
            query=query,
            restart_query=restart_query,
            mapper=mapper,
            name=name,
        )

    def retrieve_keys(self) -> list[Key]:
        """
        Retrieve every key in canonical order.

        Returns:
            Keys in the order the driving query returned them

        Raises:
            ConfigurationError: If no driving query or key mapper is configured
            ExecutionError: If the query fails
            MappingError: If a row cannot be mapped; no partial result is returned
        """
        if not self.query or not self.query.strip():
            raise ConfigurationError("The driving query must not be empty.", option="query")
        if self.mapper is None:
            raise ConfigurationError("A key mapper must be configured to retrieve keys.", option="mapper")

        self.logger.debug(f"Retrieving keys with query: {self.query.strip()}")
        keys = self.executor.execute(self.query, self.mapper.map_row)
        self.logger.info(f"Key generator '{self.name}' retrieved {len(keys)} keys")
        return keys

    def restore_keys(
        self, checkpoint: Optional[Union[Checkpoint, Mapping[str, Any]]]
    ) -> list[Key]:
        """
        Retrieve the keys that follow a checkpoint.

        An empty or missing checkpoint returns an empty list rather than the
        full key set. Callers starting a fresh run should use retrieve_keys()
        (KeyCursor makes that choice automatically).

        Args:
            checkpoint: Checkpoint from checkpoint_for(), or its persisted dict

        Returns:
            Keys strictly after the checkpointed key, in canonical order

        Raises:
            ConfigurationError: If no restart query or key mapper is configured
            BindingError: If the checkpoint lacks a column the restart query needs
            ExecutionError: If the query fails
            MappingError: If a row cannot be mapped
        """
        if not self.restart_query or not self.restart_query.strip():
            raise ConfigurationError(
                "The restart query must not be empty in order to restart.",
                option="restart_query",
            )
        if self.mapper is None:
            raise ConfigurationError("A key mapper must be configured to restore keys.", option="mapper")

        checkpoint = Checkpoint.from_dict(checkpoint)
        if checkpoint.is_empty:
            self.logger.warning(
                f"Key generator '{self.name}' was asked to restore from an empty checkpoint; "
                f"returning no keys"
            )
            return []

        parameters = self.mapper.bind_parameters(checkpoint)
        self.logger.debug(
            f"Restoring keys with query: {self.restart_query.strip()} parameters={parameters!r}"
        )
        keys = self.executor.execute(self.restart_query, self.mapper.map_row, parameters)
        self.logger.info(
            f"Key generator '{self.name}' restored {len(keys)} keys after {dict(checkpoint)!r}"
        )
        return keys

    def checkpoint_for(self, key: Key) -> Checkpoint:
        """
        Get the checkpoint to persist once a key has been processed.

        Args:
            key: A key returned by retrieve_keys() or restore_keys()

        Returns:
            Checkpoint meaning "resume after this key"

        Raises:
            StateError: If no mapper is configured
        """
        if self.mapper is None:
            raise StateError("A key mapper must be configured to create checkpoints.")
        return self.mapper.checkpoint_from(key)

    def __repr__(self) -> str:
        return (
            f"KeyGenerator(name={self.name!r}, "
            f"executor={type(self.executor).__name__}, "
            f"mapper={self.mapper!r}, "
            f"restartable={self.restart_query is not None})"
        )


def _read_sql_file(path: Union[str, Path], option: str) -> str:
    sql_path = Path(path)
    if not sql_path.is_file():
        raise ConfigurationError(
            f"SQL file not found: {path}. "
            f"Provide an absolute path or a path relative to the current working directory.",
            option=option,
        )
    return sql_path.read_text(encoding="utf-8")
