"""
Tests for SQLServerQueryExecutor.

pyodbc.connect is replaced with a fake connection so no SQL Server is
needed. Validates:
- Connection string fallback to SQL_SERVER_CONN
- Row mapping and positional parameter passing
- ExecutionError wrapping for connection and query failures
- The connection is closed on success and on failure
"""

import pytest

pyodbc = pytest.importorskip("pyodbc")

from driving_keys.core.exceptions import ConfigurationError, ExecutionError, MappingError
from driving_keys.core.key import Key
from driving_keys.executors.sql_server import SQLServerQueryExecutor
from driving_keys.mappers.column_map import ColumnMapKeyMapper

CONN_STR = "Driver={ODBC Driver 18 for SQL Server};Server=test;Database=test"


class FakeCursor:
    def __init__(self, columns, rows, error=None):
        self.description = [(name, None, None, None, None, None, None) for name in columns] if columns else None
        self.rows = rows
        self.error = error
        self.executed = []

    def execute(self, query, *params):
        self.executed.append((query, params))
        if self.error is not None:
            raise self.error
        return self

    def __iter__(self):
        return iter(self.rows)


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.closed = False
        self.timeout = 0

    def cursor(self):
        return self._cursor

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connect(monkeypatch):
    """Install a fake pyodbc.connect and return a factory to configure it."""
    state = {}

    def install(columns=("id", "region"), rows=(), error=None, connect_error=None):
        cursor = FakeCursor(list(columns), list(rows), error)
        connection = FakeConnection(cursor)

        def connect(connection_string):
            state["connection_string"] = connection_string
            if connect_error is not None:
                raise connect_error
            return connection

        monkeypatch.setattr(pyodbc, "connect", connect)
        state["connection"] = connection
        state["cursor"] = cursor
        return state

    return install


def test_connection_string_from_environment(monkeypatch):
    """Test that SQL_SERVER_CONN is used when no connection string is passed."""
    monkeypatch.setenv("SQL_SERVER_CONN", CONN_STR)

    executor = SQLServerQueryExecutor()

    assert executor.connection_string == CONN_STR


def test_missing_connection_string_raises_configuration_error(monkeypatch):
    """Test that a missing connection string fails at construction."""
    monkeypatch.delenv("SQL_SERVER_CONN", raising=False)

    with pytest.raises(ConfigurationError) as exc_info:
        SQLServerQueryExecutor()

    assert exc_info.value.option == "connection_string"


def test_negative_timeout_raises_configuration_error():
    """Test that the timeout must not be negative."""
    with pytest.raises(ConfigurationError):
        SQLServerQueryExecutor(connection_string=CONN_STR, timeout=-1)


def test_execute_maps_rows_in_order(fake_connect):
    """Test that rows are mapped to keys in result-set order."""
    state = fake_connect(rows=[(1, "EU"), (2, "EU"), (1, "US")])
    executor = SQLServerQueryExecutor(connection_string=CONN_STR, timeout=30)

    keys = executor.execute("SELECT id, region FROM dbo.orders", ColumnMapKeyMapper().map_row)

    assert keys == [
        Key({"id": 1, "region": "EU"}),
        Key({"id": 2, "region": "EU"}),
        Key({"id": 1, "region": "US"}),
    ]
    assert state["connection_string"] == CONN_STR
    assert state["connection"].timeout == 30
    assert state["connection"].closed


def test_execute_passes_positional_parameters(fake_connect):
    """Test that bound parameters are passed to cursor.execute."""
    state = fake_connect(rows=[(1, "US")])
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)

    executor.execute(
        "SELECT id, region FROM dbo.orders WHERE region > ? OR (region = ? AND id > ?)",
        ColumnMapKeyMapper().map_row,
        ["EU", "EU", 2],
    )

    (_, params), = state["cursor"].executed
    assert params == (["EU", "EU", 2],)


def test_execute_rejects_named_parameters(fake_connect):
    """Test that dict parameters are refused before connecting."""
    state = fake_connect()
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)

    with pytest.raises(ConfigurationError):
        executor.execute("SELECT 1", ColumnMapKeyMapper().map_row, {"id": 2})

    assert "connection_string" not in state


def test_connection_failure_raises_execution_error(fake_connect):
    """Test that connection errors become ExecutionError."""
    fake_connect(connect_error=pyodbc.Error("08001", "Login timeout expired"))
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)

    with pytest.raises(ExecutionError) as exc_info:
        executor.execute("SELECT id FROM dbo.orders", ColumnMapKeyMapper().map_row)

    assert isinstance(exc_info.value.original_error, pyodbc.Error)


def test_query_failure_raises_execution_error_and_closes(fake_connect):
    """Test that query errors become ExecutionError and the connection is closed."""
    query = "SELECT id FROM dbo.missing"
    state = fake_connect(error=pyodbc.ProgrammingError("42S02", "Invalid object name"))
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)

    with pytest.raises(ExecutionError) as exc_info:
        executor.execute(query, ColumnMapKeyMapper().map_row)

    assert exc_info.value.query == query
    assert state["connection"].closed


def test_no_result_set_raises_execution_error(fake_connect):
    """Test that a statement without columns is rejected."""
    state = fake_connect(columns=())
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)

    with pytest.raises(ExecutionError):
        executor.execute("UPDATE dbo.orders SET item = item", ColumnMapKeyMapper().map_row)

    assert state["connection"].closed


def test_mapping_error_propagates_unchanged(fake_connect):
    """Test that mapper errors are not wrapped and the connection is closed."""
    state = fake_connect(columns=("id",), rows=[(1,)])
    executor = SQLServerQueryExecutor(connection_string=CONN_STR)
    mapper = ColumnMapKeyMapper(columns=["id", "region"])

    with pytest.raises(MappingError):
        executor.execute("SELECT id FROM dbo.orders", mapper.map_row)

    assert state["connection"].closed
