"""
Identifier rendering for DuckDB.

Identifiers are emitted bare when that is unambiguous and quoted otherwise:

- `render_identifier()` - bare for plain, non-reserved names, quoted otherwise
- `render_qualified()` - `table.column`, each part rendered independently
- `quote_identifier()` - always quoted (DDL and catalog-facing names)
- `is_reserved_word()` - membership test against the dialect keyword set

The wildcard symbol is never quoted so that `count(*)` and `t.*` render
as written.
"""
import re

from duckdialect.exceptions import MalformedInput

__all__ = [
    'DUCKDB_RESERVED_WORDS',
    'is_reserved_word',
    'render_identifier',
    'render_qualified',
    'quote_identifier',
]

_PLAIN_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*', re.ASCII)

DUCKDB_RESERVED_WORDS = frozenset({
    # clauses
    'all', 'analyse', 'analyze', 'and', 'any', 'array', 'as', 'asc',
    'asymmetric', 'both', 'case', 'cast', 'check', 'collate', 'column',
    'constraint', 'create', 'default', 'deferrable', 'desc', 'describe',
    'distinct', 'do', 'else', 'end', 'except', 'false', 'fetch', 'for',
    'foreign', 'from', 'grant', 'group', 'having', 'in', 'initially',
    'intersect', 'into', 'lateral', 'leading', 'limit', 'offset', 'on',
    'only', 'or', 'order', 'pivot', 'placing', 'primary', 'qualify',
    'references', 'returning', 'select', 'show', 'some', 'summarize',
    'symmetric', 'table', 'then', 'to', 'trailing', 'true', 'union',
    'unique', 'unpivot', 'using', 'variadic', 'when', 'where', 'window',
    'with', 'not', 'null', 'is', 'like', 'ilike', 'between', 'exists',
    # joins
    'join', 'inner', 'left', 'right', 'full', 'outer', 'cross', 'natural',
    'anti', 'semi', 'positional', 'asof',
    # built-in types
    'integer', 'int', 'bigint', 'smallint', 'tinyint', 'hugeint',
    'boolean', 'varchar', 'char', 'text', 'real', 'double', 'float',
    'decimal', 'numeric', 'date', 'time', 'timestamp', 'interval', 'blob',
    'uuid', 'json',
})


def is_reserved_word(word: str, reserved_words=None) -> bool:
    """Check a word against the reserved-word set, case-insensitively.

    >>> is_reserved_word('ORDER')
    True
    >>> is_reserved_word('users')
    False
    """
    words = DUCKDB_RESERVED_WORDS if reserved_words is None else reserved_words
    return word.lower() in words


def quote_identifier(identifier: str, quote_char: str = '"') -> str:
    """Quote an identifier unconditionally, doubling embedded quote characters.

    >>> quote_identifier('my"col')
    '"my""col"'
    """
    if not identifier:
        raise MalformedInput('Identifier must be a non-empty string')
    return quote_char + identifier.replace(quote_char, quote_char * 2) + quote_char


def render_identifier(name: str, quote_char: str = '"', reserved_words=None,
                      wildcard: str = '*') -> str:
    """Render an identifier, quoting only when required.

    Args:
        name: Table or column name
        quote_char: Dialect quote character
        reserved_words: Keyword set, defaults to DUCKDB_RESERVED_WORDS
        wildcard: Symbol emitted literally (never quoted)

    Returns
        Bare name, wildcard, or quoted identifier

    >>> render_identifier('users')
    'users'
    >>> render_identifier('order')
    '"order"'
    >>> render_identifier('first name')
    '"first name"'
    >>> render_identifier('*')
    '*'
    """
    if not isinstance(name, str) or not name:
        raise MalformedInput(f'Invalid identifier: {name!r}')
    if name == wildcard:
        return name
    if _PLAIN_IDENTIFIER.fullmatch(name) and not is_reserved_word(name, reserved_words):
        return name
    return quote_identifier(name, quote_char)


def render_qualified(table: str, column: str, quote_char: str = '"',
                     reserved_words=None, wildcard: str = '*') -> str:
    """Render `table.column` with each part rendered independently.

    >>> render_qualified('users', 'id')
    'users.id'
    >>> render_qualified('users', '*')
    'users.*'
    >>> render_qualified('select', 'my col')
    '"select"."my col"'
    """
    return '.'.join((
        render_identifier(table, quote_char, reserved_words, wildcard),
        render_identifier(column, quote_char, reserved_words, wildcard),
    ))


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
