"""
Schema introspection through the engine catalog.

The decoder runs catalog queries through an ``execute(sql) -> rows``
collaborator and assembles canonical descriptors from the results. It owns
no connection and performs no DDL of its own.

Functions in this module handle:
- Table listing and existence probes
- Column descriptors (type tag, nullability, parsed default, size info)
- Primary-key detection, which forces ``nullable=False``
- Index descriptors, parsed from the catalog's column-expression text

Results are memoised only when the caller passes a ``SchemaCache``;
``execute_ddl`` invalidates the affected table's entries.
"""
import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from duckdialect.cache import SchemaCache
from duckdialect.exceptions import MalformedInput, SchemaNotFound
from duckdialect.literal import to_value
from duckdialect.strategy import DialectStrategy, get_strategy
from duckdialect.types import Boolean, ColumnDescriptor, Float, TypeTag
from duckdialect.types import IndexDescriptor, Null, String, Value
from more_itertools import unique_everseen

logger = logging.getLogger(__name__)

__all__ = [
    'SchemaDecoder',
    'parse_default',
    'parse_nullable',
    'parse_index_columns',
]

_TRUE_FLAGS = {'YES', 'TRUE', 'T', '1', 'Y'}
_FALSE_FLAGS = {'NO', 'FALSE', 'F', '0', 'N'}

_BOOLEAN_CAST = re.compile(r"CAST\(\s*'(t|f|true|false)'\s+AS\s+BOOL(?:EAN)?\s*\)", re.IGNORECASE)
_BOOLEAN_BARE = re.compile(r'(true|false)', re.IGNORECASE)
_QUOTED = re.compile(r"'((?:[^']|'')*)'")
_INTEGER = re.compile(r'-?\d+')
_FLOAT = re.compile(r'-?\d+\.\d+')
_INDEX_COLUMNS = re.compile(r'\bON\s+[^(]+\((.*)\)', re.IGNORECASE | re.DOTALL)
_DECIMAL_SIZE = re.compile(r'\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)')
_STRIP_QUOTES = str.maketrans('', '', '"\'')


def _parse_flag(flag: Any) -> bool:
    if isinstance(flag, bool):
        return flag
    if isinstance(flag, int):
        return flag != 0
    text = str(flag).strip().upper()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise MalformedInput(f'Unrecognized boolean flag: {flag!r}')


def parse_nullable(flag: Any) -> bool:
    """Parse the catalog's nullable flag.

    A missing flag means nullable.

    >>> parse_nullable('YES'), parse_nullable('NO'), parse_nullable(None)
    (True, False, True)
    """
    if flag is None:
        return True
    return _parse_flag(flag)


def parse_default(text: str | None) -> Value | str | None:
    """Parse catalog default text into a value, best effort.

    Grammar:
    - ``CAST('t'|'f' AS BOOLEAN)`` and bare ``true``/``false`` -> Boolean
    - ``NULL`` -> Null
    - a single-quoted span -> String (doubled quotes collapsed)
    - optionally signed digits -> Integer / BigInteger
    - optionally signed digits.digits -> Float
    - anything else is returned unmodified as opaque text

    Args:
        text: Default expression as reported by the catalog

    Returns
        Parsed value, opaque text, or None when the column has no default

    >>> parse_default("CAST('t' AS BOOLEAN)")
    Boolean(value=True)
    >>> parse_default("'it''s'")
    String(value="it's")
    >>> parse_default('42')
    Integer(value=42)
    >>> parse_default('now()')
    'now()'
    """
    if text is None:
        return None
    candidate = str(text).strip()

    if match := _BOOLEAN_CAST.fullmatch(candidate):
        return Boolean(match.group(1).lower() in {'t', 'true'})
    if _BOOLEAN_BARE.fullmatch(candidate):
        return Boolean(candidate.lower() == 'true')
    if candidate.upper() == 'NULL':
        return Null()
    if match := _QUOTED.fullmatch(candidate):
        return String(match.group(1).replace("''", "'"))
    if _INTEGER.fullmatch(candidate):
        return to_value(int(candidate))
    if _FLOAT.fullmatch(candidate):
        return Float(float(candidate))
    return text


def _split_columns(text: str) -> list[str]:
    text = text.strip()
    if text.startswith('[') and text.endswith(']'):
        text = text[1:-1]
    parts = (part.translate(_STRIP_QUOTES).strip() for part in text.split(','))
    return [part for part in parts if part]


def parse_index_columns(expressions: str | Sequence[str] | None,
                        sql: str | None = None) -> list[str]:
    """Parse an index's column list.

    Args:
        expressions: Bracketed text such as ``[a, "b"]`` or a list of expressions
        sql: The index's CREATE INDEX statement, used when expressions are missing

    Returns
        Ordered column names

    >>> parse_index_columns('[name, "email"]')
    ['name', 'email']
    >>> parse_index_columns(None, 'CREATE INDEX idx ON users(last, first);')
    ['last', 'first']
    """
    if isinstance(expressions, str):
        columns = _split_columns(expressions)
    elif expressions:
        parts = (str(part).translate(_STRIP_QUOTES).strip() for part in expressions if part is not None)
        columns = [part for part in parts if part]
    else:
        columns = []

    if not columns and sql:
        if match := _INDEX_COLUMNS.search(sql.rstrip().rstrip(';')):
            columns = _split_columns(match.group(1))

    return list(unique_everseen(columns))


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


class SchemaDecoder:
    """Catalog reader producing canonical column and index descriptors.

    Args:
        execute: Callable running a SQL string and returning row mappings
        strategy: Dialect strategy, defaults to DuckDB
        cache: Optional SchemaCache used to memoise descriptors
    """

    def __init__(self, execute: Callable[[str], Iterable[Mapping[str, Any]]],
                 strategy: DialectStrategy | None = None,
                 cache: SchemaCache | None = None) -> None:
        self.execute = execute
        self.strategy = strategy or get_strategy('duckdb')
        self.cache = cache

    def _schema(self, schema: str | None) -> str:
        return schema or self.strategy.options.default_schema

    def _rows(self, sql: str) -> list[dict[str, Any]]:
        logger.debug(f'Catalog query: {sql}')
        return [dict(row) for row in (self.execute(sql) or [])]

    def list_tables(self, schema: str | None = None) -> list[str]:
        """List base tables in a schema, ordered by name.
        """
        schema = self._schema(schema)
        rows = self._rows(self.strategy.list_tables_sql(schema))
        return list(unique_everseen(row['table_name'] for row in rows))

    def table_exists(self, table: str, schema: str | None = None) -> bool:
        schema = self._schema(schema)
        return bool(self._rows(self.strategy.table_exists_sql(table, schema)))

    def _require_table(self, table: str, schema: str) -> None:
        if not self.table_exists(table, schema):
            raise SchemaNotFound(table, schema)

    def primary_key_columns(self, table: str, schema: str | None = None) -> list[str]:
        """Get primary key columns for a table, in key order.
        """
        schema = self._schema(schema)
        rows = self._rows(self.strategy.primary_keys_sql(table, schema))
        return list(unique_everseen(row['column_name'] for row in rows))

    def describe_table(self, table: str, schema: str | None = None) -> list[ColumnDescriptor]:
        """Describe a table's columns in ordinal order.

        Raises
            SchemaNotFound: Table absent from the schema
        """
        schema = self._schema(schema)
        if self.cache is None:
            return self._describe_table(table, schema)
        return self.cache.get_or_load('columns', table, schema,
                                      lambda: self._describe_table(table, schema))

    def _describe_table(self, table: str, schema: str) -> list[ColumnDescriptor]:
        self._require_table(table, schema)
        columns = [self._column_descriptor(row)
                   for row in self._rows(self.strategy.columns_sql(table, schema))]

        primary_keys = set(self.primary_key_columns(table, schema))
        for column in columns:
            if column.name in primary_keys:
                column.primary_key = True
                column.nullable = False

        logger.debug(f'Described {schema}.{table}: {len(columns)} columns, '
                     f'primary key {sorted(primary_keys)}')
        return columns

    def _column_descriptor(self, row: Mapping[str, Any]) -> ColumnDescriptor:
        native_type = str(row.get('data_type') or '')
        canonical_type = self.strategy.native_to_canonical(native_type)
        precision = _optional_int(row.get('numeric_precision'))
        scale = _optional_int(row.get('numeric_scale'))
        if (canonical_type is TypeTag.DECIMAL and precision is None
                and (size := _DECIMAL_SIZE.search(native_type))):
            precision = int(size.group(1))
            scale = int(size.group(2)) if size.group(2) else scale
        return ColumnDescriptor(
            name=row['column_name'],
            canonical_type=canonical_type,
            native_type_text=native_type,
            nullable=parse_nullable(row.get('is_nullable')),
            default=parse_default(row.get('column_default')),
            max_length=_optional_int(row.get('character_maximum_length')),
            precision=precision,
            scale=scale,
        )

    def describe_indexes(self, table: str, schema: str | None = None) -> dict[str, IndexDescriptor]:
        """Describe a table's indexes keyed by index name.

        Raises
            SchemaNotFound: Table absent from the schema
        """
        schema = self._schema(schema)
        if self.cache is None:
            return self._describe_indexes(table, schema)
        return self.cache.get_or_load('indexes', table, schema,
                                      lambda: self._describe_indexes(table, schema))

    def _describe_indexes(self, table: str, schema: str) -> dict[str, IndexDescriptor]:
        self._require_table(table, schema)
        indexes = {}
        for row in self._rows(self.strategy.indexes_sql(table, schema)):
            name = row['index_name']
            indexes[name] = IndexDescriptor(
                name=name,
                columns=parse_index_columns(row.get('expressions'), row.get('sql')),
                unique=_parse_flag(row.get('is_unique') or False),
                primary=_parse_flag(row.get('is_primary') or False),
            )
        return indexes

    def execute_ddl(self, sql: str, table: str, schema: str | None = None) -> None:
        """Run DDL against a table and invalidate its cached descriptors.
        """
        logger.debug(f'Executing DDL for {table}: {sql}')
        try:
            self.execute(sql)
        finally:
            if self.cache is not None:
                self.cache.invalidate(table, schema)
