"""
DuckDB dialect translation: literals, identifiers, expressions, catalog and errors.

All rendering and catalog operations can be called either as:
- Module functions: duckdialect.encode(value), duckdialect.describe_table(cn, table)
- Strategy / decoder methods: get_strategy('duckdb').encode(value), cn.decoder().describe_table(table)

The module functions are facades over the default DuckDB strategy.
"""
__version__ = '0.1.0'

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from duckdialect.adapters.type_mapping import canonical_to_ddl, native_to_canonical
from duckdialect.cache import SchemaCache
from duckdialect.compiler import compile_expression, date_add, date_sub
from duckdialect.connection import Executor, connect
from duckdialect.exceptions import CheckViolation, ClassifiedDatabaseError
from duckdialect.exceptions import ConnectionFailure, DatabaseError
from duckdialect.exceptions import DbConnectionError, ErrorKind, ForeignKeyViolation
from duckdialect.exceptions import IntegrityError, IntegrityViolationError
from duckdialect.exceptions import MalformedInput, NotNullViolation, QueryError
from duckdialect.exceptions import SchemaNotFound, UniqueViolation, classify
from duckdialect.exceptions import to_exception
from duckdialect.literal import encode, literal, to_value
from duckdialect.options import DialectOptions
from duckdialect.schema import SchemaDecoder
from duckdialect.sql import quote_identifier, render_identifier, render_qualified
from duckdialect.strategy import get_strategy
from duckdialect.types import ColumnDescriptor, IndexDescriptor, TypeTag

Execute = Callable[[str], Iterable[Mapping[str, Any]]]


def compile(expr: Any) -> str:
    """Render an expression (usually a ComplexExpression) to SQL text.
    """
    return compile_expression(expr)


def list_tables(execute: Execute, schema: str | None = None) -> list[str]:
    """List base tables in a schema.
    """
    return SchemaDecoder(execute).list_tables(schema)


def describe_table(execute: Execute, table: str,
                   schema: str | None = None) -> list[ColumnDescriptor]:
    """Describe a table's columns; raises SchemaNotFound for a missing table.
    """
    return SchemaDecoder(execute).describe_table(table, schema)


def describe_indexes(execute: Execute, table: str,
                     schema: str | None = None) -> dict[str, IndexDescriptor]:
    """Describe a table's indexes keyed by name.
    """
    return SchemaDecoder(execute).describe_indexes(table, schema)
