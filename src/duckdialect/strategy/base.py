"""
Base strategy interface for dialect translation.

Defines the abstract base class that every dialect strategy inherits from. A
strategy binds the rendering components (literal encoding, identifier
quoting, expression compilation, type mapping, error classification) to one
set of dialect options, and supplies the catalog SQL used by the schema
decoder.

Clients render and decode through this interface without knowing which
dialect they are talking to.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from duckdialect.exceptions import ErrorKind
from duckdialect.types import TypeTag, Value

if TYPE_CHECKING:
    from duckdialect.compiler import ExpressionCompiler
    from duckdialect.options import DialectOptions

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['DialectStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('duckdb')
        class DuckDBStrategy(DialectStrategy):
            ...
    """
    def decorator(cls: type['DialectStrategy']) -> type['DialectStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DialectStrategy(ABC):
    """Base class for dialect-specific rendering and catalog access.
    """

    def __init__(self, options: 'DialectOptions | None' = None) -> None:
        if options is None:
            from duckdialect.options import DialectOptions
            options = DialectOptions(drivername=self.dialect_name)
        self.options = options

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier."""

    @property
    @abstractmethod
    def compiler(self) -> 'ExpressionCompiler':
        """Expression compiler bound to this strategy."""

    @classmethod
    def get_required_options(cls) -> list[str]:
        """Return list of required option field names for this dialect.
        """
        return ['quote_char', 'wildcard', 'default_schema']

    @classmethod
    def validate_options(cls, options: 'DialectOptions') -> None:
        """Validate options for this dialect.

        Args:
            options: DialectOptions to validate

        Raises
            ValueError: If any required field is empty or the quote character is invalid
        """
        for field in cls.get_required_options():
            if not getattr(options, field):
                raise ValueError(f'field {field} cannot be None or empty')
        if len(options.quote_char) != 1:
            raise ValueError('quote_char must be a single character')

    # Literal Encoder

    @abstractmethod
    def encode(self, value: Value) -> str:
        """Render a ``Value`` as SQL literal text."""

    @abstractmethod
    def to_value(self, obj: Any) -> Value:
        """Convert a Python object to the ``Value`` union."""

    def literal(self, obj: Any) -> str:
        """Render a Python object as SQL literal text."""
        return self.encode(self.to_value(obj))

    # Identifier Renderer

    @abstractmethod
    def render_identifier(self, name: str) -> str:
        """Render an identifier, quoting only when required."""

    @abstractmethod
    def render_qualified(self, table: str, column: str) -> str:
        """Render a `table.column` reference."""

    @abstractmethod
    def quote_identifier(self, identifier: str) -> str:
        """Quote an identifier unconditionally."""

    # Type-Tag Mapper

    @abstractmethod
    def native_to_canonical(self, native_type_text: str) -> TypeTag:
        """Map a catalog type name to its canonical tag."""

    @abstractmethod
    def canonical_to_ddl(self, tag: TypeTag | str, size: Any = None,
                         double: bool = False) -> str:
        """Render DDL type text for a canonical tag."""

    # Error Classifier

    @abstractmethod
    def classify(self, raw_error: BaseException | str,
                 operation: str | None = None) -> ErrorKind:
        """Map a raw failure onto an ``ErrorKind``."""

    # Catalog SQL

    @abstractmethod
    def list_tables_sql(self, schema: str) -> str:
        """Query returning one `table_name` row per base table in a schema."""

    @abstractmethod
    def table_exists_sql(self, table: str, schema: str) -> str:
        """Query returning a row when the table exists."""

    @abstractmethod
    def columns_sql(self, table: str, schema: str) -> str:
        """Query returning column rows in ordinal order.

        Expected row keys: column_name, data_type, is_nullable,
        column_default, character_maximum_length, numeric_precision,
        numeric_scale
        """

    @abstractmethod
    def primary_keys_sql(self, table: str, schema: str) -> str:
        """Query returning one `column_name` row per primary-key column."""

    @abstractmethod
    def indexes_sql(self, table: str, schema: str) -> str:
        """Query returning index rows.

        Expected row keys: index_name, is_unique, is_primary, expressions, sql
        """
