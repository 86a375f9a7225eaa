"""
Bidirectional mapping between DuckDB type names and canonical type tags.

The decode direction (catalog text to ``TypeTag``) is many-to-one: several
native spellings collapse onto one tag, and every unrecognized name falls
back to ``TypeTag.STRING``. The encode direction (``TypeTag`` to DDL text)
picks one spelling per tag. A round trip therefore preserves meaning, not
text.
"""
import re

from duckdialect.exceptions import MalformedInput
from duckdialect.types import TypeTag

__all__ = ['NATIVE_TYPE_MAP', 'native_to_canonical', 'canonical_to_ddl']

NATIVE_TYPE_MAP: dict[str, TypeTag] = {
    # integer family
    'INTEGER': TypeTag.INTEGER,
    'INT': TypeTag.INTEGER,
    'INT4': TypeTag.INTEGER,
    'SIGNED': TypeTag.INTEGER,
    'SMALLINT': TypeTag.INTEGER,
    'INT2': TypeTag.INTEGER,
    'SHORT': TypeTag.INTEGER,
    'TINYINT': TypeTag.INTEGER,
    'INT1': TypeTag.INTEGER,
    'UINTEGER': TypeTag.INTEGER,
    'USMALLINT': TypeTag.INTEGER,
    'UTINYINT': TypeTag.INTEGER,
    'BIGINT': TypeTag.BIGINT,
    'INT8': TypeTag.BIGINT,
    'LONG': TypeTag.BIGINT,
    'UBIGINT': TypeTag.BIGINT,
    'HUGEINT': TypeTag.BIGINT,
    'UHUGEINT': TypeTag.BIGINT,
    # floating point
    'REAL': TypeTag.FLOAT,
    'FLOAT4': TypeTag.FLOAT,
    'FLOAT': TypeTag.FLOAT,
    'DOUBLE': TypeTag.FLOAT,
    'FLOAT8': TypeTag.FLOAT,
    # boolean
    'BOOLEAN': TypeTag.BOOLEAN,
    'BOOL': TypeTag.BOOLEAN,
    # temporal
    'DATE': TypeTag.DATE,
    'TIMESTAMP': TypeTag.DATETIME,
    'DATETIME': TypeTag.DATETIME,
    'TIMESTAMPTZ': TypeTag.DATETIME,
    'TIMESTAMP WITH TIME ZONE': TypeTag.DATETIME,
    'TIMESTAMP_S': TypeTag.DATETIME,
    'TIMESTAMP_MS': TypeTag.DATETIME,
    'TIMESTAMP_NS': TypeTag.DATETIME,
    'TIME': TypeTag.TIME,
    'TIMETZ': TypeTag.TIME,
    'TIME WITH TIME ZONE': TypeTag.TIME,
    # binary
    'BLOB': TypeTag.BLOB,
    'BYTEA': TypeTag.BLOB,
    'BINARY': TypeTag.BLOB,
    'VARBINARY': TypeTag.BLOB,
    'UUID': TypeTag.UUID,
}

_DECIMAL_PREFIXES = ('DECIMAL', 'NUMERIC')

_WHITESPACE = re.compile(r'\s+')


def _normalize(native_type_text: str) -> str:
    """Upper-case, collapse whitespace and drop any parameter list.

    >>> _normalize('  varchar (255) ')
    'VARCHAR'
    >>> _normalize('timestamp  with time zone')
    'TIMESTAMP WITH TIME ZONE'
    """
    text = _WHITESPACE.sub(' ', native_type_text.strip().upper())
    return text.split('(', 1)[0].strip()


def native_to_canonical(native_type_text: str | None) -> TypeTag:
    """Map a catalog type name to its canonical tag.

    Unrecognized names (VARCHAR, TEXT, JSON, nested types, ...) map to
    ``TypeTag.STRING``; this never fails.

    >>> native_to_canonical('BIGINT')
    <TypeTag.BIGINT: 'bigint'>
    >>> native_to_canonical('decimal(10,2)')
    <TypeTag.DECIMAL: 'decimal'>
    >>> native_to_canonical('UNKNOWNTYPE')
    <TypeTag.STRING: 'string'>
    """
    if not native_type_text:
        return TypeTag.STRING
    name = _normalize(native_type_text)
    if name.startswith(_DECIMAL_PREFIXES):
        return TypeTag.DECIMAL
    return NATIVE_TYPE_MAP.get(name, TypeTag.STRING)


def canonical_to_ddl(tag: TypeTag | str, size: int | tuple[int, int] | None = None,
                     double: bool = False) -> str:
    """Render the DDL type text for a canonical tag.

    Args:
        tag: Canonical type tag or its string value
        size: Length for strings; precision or (precision, scale) for decimals
        double: Use DOUBLE rather than REAL for floats

    Returns
        DuckDB type text

    >>> canonical_to_ddl(TypeTag.STRING, 255)
    'VARCHAR(255)'
    >>> canonical_to_ddl('decimal', (10, 2))
    'DECIMAL(10,2)'
    >>> canonical_to_ddl(TypeTag.FLOAT, double=True)
    'DOUBLE'
    """
    try:
        tag = TypeTag(tag)
    except ValueError as err:
        raise MalformedInput(f'Unknown type tag: {tag!r}') from err

    match tag:
        case TypeTag.INTEGER:
            return 'INTEGER'
        case TypeTag.BIGINT:
            return 'BIGINT'
        case TypeTag.FLOAT:
            return 'DOUBLE' if double else 'REAL'
        case TypeTag.DECIMAL:
            if size is None:
                return 'DECIMAL'
            if isinstance(size, tuple | list):
                precision, scale = size
                return f'DECIMAL({int(precision)},{int(scale)})'
            return f'DECIMAL({int(size)})'
        case TypeTag.STRING:
            return f'VARCHAR({int(size)})' if size else 'VARCHAR'
        case TypeTag.BOOLEAN:
            return 'BOOLEAN'
        case TypeTag.DATE:
            return 'DATE'
        case TypeTag.DATETIME:
            return 'TIMESTAMP'
        case TypeTag.TIME:
            return 'TIME'
        case TypeTag.BLOB:
            return 'BLOB'
        case TypeTag.UUID:
            return 'UUID'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
