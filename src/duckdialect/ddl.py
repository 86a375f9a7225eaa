"""
DDL generation from canonical column descriptors.

DuckDB has no AUTOINCREMENT; primary-key columns are emitted as plain
`PRIMARY KEY` columns (sequences are the caller's concern). A composite key
becomes a trailing `PRIMARY KEY (a, b)` table constraint.

Identifiers in DDL are always quoted.
"""
from collections.abc import Sequence

from duckdialect.exceptions import MalformedInput
from duckdialect.strategy import DialectStrategy, get_strategy
from duckdialect.types import ColumnDescriptor, TypeTag, Value

__all__ = ['column_definition_sql', 'create_table_sql', 'drop_table_sql']


def _type_sql(column: ColumnDescriptor, strategy: DialectStrategy) -> str:
    size = None
    if column.canonical_type is TypeTag.STRING:
        size = column.max_length
    elif column.canonical_type is TypeTag.DECIMAL and column.precision is not None:
        size = (column.precision, column.scale) if column.scale is not None else column.precision
    double = (column.native_type_text or '').strip().upper().startswith(('DOUBLE', 'FLOAT8'))
    return strategy.canonical_to_ddl(column.canonical_type, size, double)


def _table_name(table: str, schema: str | None, strategy: DialectStrategy) -> str:
    if schema:
        return f'{strategy.quote_identifier(schema)}.{strategy.quote_identifier(table)}'
    return strategy.quote_identifier(table)


def column_definition_sql(column: ColumnDescriptor, strategy: DialectStrategy | None = None,
                          inline_primary_key: bool = True) -> str:
    """Render one column definition.

    Args:
        column: Column to render
        strategy: Dialect strategy, defaults to DuckDB
        inline_primary_key: Emit `PRIMARY KEY` on the column itself

    Returns
        Column definition such as `"id" INTEGER PRIMARY KEY`
    """
    strategy = strategy or get_strategy('duckdb')
    parts = [strategy.quote_identifier(column.name), _type_sql(column, strategy)]

    if column.primary_key and inline_primary_key:
        parts.append('PRIMARY KEY')
    elif not column.nullable:
        parts.append('NOT NULL')

    if isinstance(column.default, Value):
        parts.append(f'DEFAULT {strategy.encode(column.default)}')
    elif isinstance(column.default, str):
        parts.append(f'DEFAULT {column.default}')

    return ' '.join(parts)


def create_table_sql(table: str, columns: Sequence[ColumnDescriptor],
                     schema: str | None = None, if_not_exists: bool = False,
                     strategy: DialectStrategy | None = None) -> str:
    """Render a CREATE TABLE statement.

    >>> cols = [ColumnDescriptor('id', TypeTag.INTEGER, 'INTEGER', primary_key=True),
    ...         ColumnDescriptor('name', TypeTag.STRING, 'VARCHAR', nullable=False, max_length=50)]
    >>> create_table_sql('users', cols)
    'CREATE TABLE "users" ("id" INTEGER PRIMARY KEY, "name" VARCHAR(50) NOT NULL)'
    """
    if not columns:
        raise MalformedInput(f'Table {table} needs at least one column')
    strategy = strategy or get_strategy('duckdb')

    key_columns = [c.name for c in columns if c.primary_key]
    composite = len(key_columns) > 1
    definitions = [column_definition_sql(c, strategy, inline_primary_key=not composite)
                   for c in columns]
    if composite:
        quoted_keys = ', '.join(strategy.quote_identifier(k) for k in key_columns)
        definitions.append(f'PRIMARY KEY ({quoted_keys})')

    exists = 'IF NOT EXISTS ' if if_not_exists else ''
    return (f'CREATE TABLE {exists}{_table_name(table, schema, strategy)} '
            f"({', '.join(definitions)})")


def drop_table_sql(table: str, schema: str | None = None, if_exists: bool = False,
                   cascade: bool = False, strategy: DialectStrategy | None = None) -> str:
    """Render a DROP TABLE statement.

    >>> drop_table_sql('users', if_exists=True)
    'DROP TABLE IF EXISTS "users"'
    """
    strategy = strategy or get_strategy('duckdb')
    exists = 'IF EXISTS ' if if_exists else ''
    suffix = ' CASCADE' if cascade else ''
    return f'DROP TABLE {exists}{_table_name(table, schema, strategy)}{suffix}'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
