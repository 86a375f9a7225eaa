"""
DuckDB execute collaborator.

This module provides:
1. The `connect()` function opening a DuckDB database through the `duckdb` driver
2. The `Executor` class, a thin wrapper running SQL text and returning dict rows

Failures raised while connecting become `ConnectionFailure`; failures raised
while executing are classified through `to_exception` and re-raised with the
driver exception chained.
"""
import logging
import time
from typing import Any, Self

import duckdb
from duckdialect.cache import SchemaCache
from duckdialect.exceptions import ConnectionFailure, to_exception
from duckdialect.options import DialectOptions
from duckdialect.schema import SchemaDecoder
from duckdialect.strategy import DialectStrategy, get_strategy

__all__ = ['Executor', 'connect']

logger = logging.getLogger(__name__)


class Executor:
    """Wraps a DuckDB connection to run SQL text and track calls and execution time.

    Args:
        connection: DuckDB connection object to wrap
        strategy: Dialect strategy bound to this connection
    """

    def __init__(self, connection: duckdb.DuckDBPyConnection,
                 strategy: DialectStrategy | None = None) -> None:
        self.connection = connection
        self.strategy = strategy or get_strategy('duckdb')
        self.calls = 0
        self.time = 0
        self.closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    def __call__(self, sql: str) -> list[dict[str, Any]]:
        return self.execute(sql)

    def _run(self, sql: str) -> duckdb.DuckDBPyConnection:
        start = time.time()
        try:
            return self.connection.execute(sql)
        except duckdb.Error as err:
            logger.debug(f'Statement failed: {err}')
            raise to_exception(err) from err
        finally:
            self.time += time.time() - start
            self.calls += 1

    def execute(self, sql: str) -> list[dict[str, Any]]:
        """Execute SQL and return result rows as dicts.

        Returns
            List of row dicts, empty for statements without a result set
        """
        cursor = self._run(sql)
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        try:
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except duckdb.Error as err:
            raise to_exception(err) from err

    def run(self, sql: str) -> None:
        """Execute SQL without fetching results.
        """
        self._run(sql)

    def select_column(self, sql: str) -> list[Any]:
        """Execute SQL and return the first column of every row.
        """
        return [next(iter(row.values())) for row in self.execute(sql)]

    def decoder(self, cache: SchemaCache | None = None) -> SchemaDecoder:
        """Schema decoder bound to this connection.
        """
        return SchemaDecoder(self.execute, self.strategy, cache)

    def close(self) -> None:
        """Close the DuckDB connection.
        """
        if self.closed:
            return
        self.connection.close()
        self.closed = True
        logger.debug(f'Connection closed: {self.calls} queries in {self.time:.2f}s '
                     f'(avg: {self.time/max(1,self.calls):.3f}s per query)')


def connect(database: str = ':memory:', config: dict[str, Any] | None = None,
            read_only: bool = False, options: DialectOptions | None = None) -> Executor:
    """Open a DuckDB database.

    Args:
        database: Database file path, or `:memory:` for an in-memory database
        config: DuckDB configuration settings passed to the driver
        read_only: Open the database file read-only
        options: Dialect options for rendering and catalog access

    Returns
        Executor bound to the new connection

    Raises
        ConnectionFailure: The driver could not open the database
    """
    strategy = get_strategy('duckdb', options)
    try:
        connection = duckdb.connect(database=database, read_only=read_only,
                                    config=config or {})
    except duckdb.Error as err:
        raise ConnectionFailure(f'Failed to connect to DuckDB database: {err}',
                                original=err) from err
    logger.debug(f'Connected to DuckDB database {database} ({read_only=})')
    return Executor(connection, strategy)
