"""
DuckDB-specific strategy implementation.

This module implements the DialectStrategy interface for DuckDB. Notable
dialect traits handled here:
- No native case-insensitive LIKE rendering (UPPER on both sides instead)
- Regex matching through `regexp_matches()` rather than an infix operator
- Interval arithmetic promotes dates to timestamps, hence the explicit cast
- Catalog metadata from `information_schema` and the `duckdb_*()` table functions
"""
from typing import TYPE_CHECKING, Any

from duckdialect.adapters.type_mapping import canonical_to_ddl, native_to_canonical
from duckdialect.compiler import ExpressionCompiler, InfixRenderer
from duckdialect.exceptions import ErrorKind, classify
from duckdialect.literal import encode, to_value
from duckdialect.sql import quote_identifier, render_identifier, render_qualified
from duckdialect.strategy.base import DialectStrategy, register_strategy
from duckdialect.types import String, TypeTag, Value

if TYPE_CHECKING:
    from duckdialect.options import DialectOptions


@register_strategy('duckdb')
class DuckDBStrategy(DialectStrategy):
    """DuckDB-specific rendering and catalog queries.
    """

    def __init__(self, options: 'DialectOptions | None' = None) -> None:
        super().__init__(options)
        self._compiler = ExpressionCompiler(self, default_renderer=InfixRenderer())

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for DuckDB."""
        return 'duckdb'

    @property
    def compiler(self) -> ExpressionCompiler:
        return self._compiler

    def encode(self, value: Value) -> str:
        return encode(value)

    def to_value(self, obj: Any) -> Value:
        return to_value(obj, self.options.time_sentinel)

    def render_identifier(self, name: str) -> str:
        return render_identifier(name, self.options.quote_char,
                                 self.options.reserved_words, self.options.wildcard)

    def render_qualified(self, table: str, column: str) -> str:
        return render_qualified(table, column, self.options.quote_char,
                                self.options.reserved_words, self.options.wildcard)

    def quote_identifier(self, identifier: str) -> str:
        return quote_identifier(identifier, self.options.quote_char)

    def native_to_canonical(self, native_type_text: str) -> TypeTag:
        return native_to_canonical(native_type_text)

    def canonical_to_ddl(self, tag: TypeTag | str, size: Any = None,
                         double: bool = False) -> str:
        return canonical_to_ddl(tag, size, double)

    def classify(self, raw_error: BaseException | str,
                 operation: str | None = None) -> ErrorKind:
        return classify(raw_error, operation)

    def list_tables_sql(self, schema: str) -> str:
        return f"""
select table_name
from information_schema.tables
where table_catalog = current_database()
and table_schema = {encode(String(schema))}
and table_type = 'BASE TABLE'
order by table_name
""".strip()

    def table_exists_sql(self, table: str, schema: str) -> str:
        return f"""
select 1 as present
from information_schema.tables
where table_catalog = current_database()
and table_schema = {encode(String(schema))}
and table_name = {encode(String(table))}
""".strip()

    def columns_sql(self, table: str, schema: str) -> str:
        return f"""
select
    column_name,
    data_type,
    is_nullable,
    column_default,
    character_maximum_length,
    numeric_precision,
    numeric_scale
from information_schema.columns
where table_catalog = current_database()
and table_schema = {encode(String(schema))}
and table_name = {encode(String(table))}
order by ordinal_position
""".strip()

    def primary_keys_sql(self, table: str, schema: str) -> str:
        return f"""
select unnest(constraint_column_names) as column_name
from duckdb_constraints()
where database_name = current_database()
and schema_name = {encode(String(schema))}
and table_name = {encode(String(table))}
and constraint_type = 'PRIMARY KEY'
""".strip()

    def indexes_sql(self, table: str, schema: str) -> str:
        return f"""
select
    index_name,
    is_unique,
    is_primary,
    expressions,
    sql
from duckdb_indexes()
where database_name = current_database()
and schema_name = {encode(String(schema))}
and table_name = {encode(String(table))}
order by index_name
""".strip()
