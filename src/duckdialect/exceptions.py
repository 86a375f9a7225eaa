"""
Database-specific exception classes and error classification.

Three families of errors originate here:

- ``MalformedInput`` - a value or expression that cannot be rendered
- ``SchemaNotFound`` - catalog lookups against a table that does not exist
- ``ClassifiedDatabaseError`` - a raw driver failure mapped onto an
  ``ErrorKind`` by ``classify``

Classification is an ordered rule list, first match wins. Error-code rules
run before text-pattern rules, and both follow the same priority: not-null,
unique, foreign-key, check, then the generic constraint catch-all.
"""
import re
from enum import Enum

import duckdb

__all__ = [
    'ErrorKind',
    'DatabaseError',
    'MalformedInput',
    'SchemaNotFound',
    'ClassifiedDatabaseError',
    'ConnectionFailure',
    'QueryError',
    'IntegrityViolationError',
    'NotNullViolation',
    'UniqueViolation',
    'ForeignKeyViolation',
    'CheckViolation',
    'DbConnectionError',
    'IntegrityError',
    'classify',
    'to_exception',
]


class ErrorKind(Enum):
    """Semantic failure categories."""
    NOT_NULL_VIOLATION = 'not_null_violation'
    UNIQUE_VIOLATION = 'unique_violation'
    FOREIGN_KEY_VIOLATION = 'foreign_key_violation'
    CHECK_VIOLATION = 'check_violation'
    CONSTRAINT_VIOLATION = 'constraint_violation'
    CONNECTION_ERROR = 'connection_error'
    DATABASE_ERROR = 'database_error'


class DatabaseError(Exception):
    """Base class for all duckdialect errors.
    """


class MalformedInput(DatabaseError, ValueError):
    """Value or expression that cannot be rendered to SQL.
    """


class SchemaNotFound(DatabaseError, LookupError):
    """Table absent from the requested namespace.
    """

    def __init__(self, table: str, schema: str | None = None):
        self.table = table
        self.schema = schema
        where = f'{schema}.{table}' if schema else table
        super().__init__(f'Table {where} does not exist')


class ClassifiedDatabaseError(DatabaseError):
    """Raw driver failure with its semantic kind attached.
    """

    kind = ErrorKind.DATABASE_ERROR

    def __init__(self, message: str, original: BaseException | None = None,
                 kind: ErrorKind | None = None):
        super().__init__(message)
        self.original = original
        if kind is not None:
            self.kind = kind


class ConnectionFailure(ClassifiedDatabaseError):
    """Error establishing or maintaining database connection.
    """
    kind = ErrorKind.CONNECTION_ERROR


class QueryError(ClassifiedDatabaseError):
    """Error in query syntax or execution.
    """
    kind = ErrorKind.DATABASE_ERROR


class IntegrityViolationError(ClassifiedDatabaseError):
    """Database constraint violation error.
    """
    kind = ErrorKind.CONSTRAINT_VIOLATION


class NotNullViolation(IntegrityViolationError):
    kind = ErrorKind.NOT_NULL_VIOLATION


class UniqueViolation(IntegrityViolationError):
    kind = ErrorKind.UNIQUE_VIOLATION


class ForeignKeyViolation(IntegrityViolationError):
    kind = ErrorKind.FOREIGN_KEY_VIOLATION


class CheckViolation(IntegrityViolationError):
    kind = ErrorKind.CHECK_VIOLATION


DbConnectionError = (
    duckdb.ConnectionException,
    duckdb.IOException,
    ConnectionFailure,
    )

IntegrityError = (
    duckdb.ConstraintException,
    duckdb.IntegrityError,
    IntegrityViolationError,
    )

# Priority order matters: the first matching rule wins.
# (kind, SQLSTATE codes, sqlite extended codes, message pattern)
CLASSIFICATION_RULES = [
    (ErrorKind.NOT_NULL_VIOLATION, {'23502'}, {1299},
     r'not[ _-]?null'),
    (ErrorKind.UNIQUE_VIOLATION, {'23505'}, {2067, 1555},
     r'unique|duplicate key|primary key constraint'),
    (ErrorKind.FOREIGN_KEY_VIOLATION, {'23503'}, {787},
     r'foreign key'),
    (ErrorKind.CHECK_VIOLATION, {'23514'}, {275},
     r'check constraint'),
    (ErrorKind.CONSTRAINT_VIOLATION, {'23000'}, {19},
     r'constraint|integrity'),
]

# DuckDB appends the failing statement after a "LINE n:" marker
_STATEMENT_CONTEXT = re.compile(r'\n\s*LINE \d+:')

_TEXT_RULES = [(kind, re.compile(pattern, re.IGNORECASE))
               for kind, _, _, pattern in CLASSIFICATION_RULES]

_KIND_EXCEPTIONS: dict[ErrorKind, type[ClassifiedDatabaseError]] = {
    ErrorKind.NOT_NULL_VIOLATION: NotNullViolation,
    ErrorKind.UNIQUE_VIOLATION: UniqueViolation,
    ErrorKind.FOREIGN_KEY_VIOLATION: ForeignKeyViolation,
    ErrorKind.CHECK_VIOLATION: CheckViolation,
    ErrorKind.CONSTRAINT_VIOLATION: IntegrityViolationError,
    ErrorKind.CONNECTION_ERROR: ConnectionFailure,
    ErrorKind.DATABASE_ERROR: QueryError,
}


def _error_code(raw_error: BaseException | str) -> str | int | None:
    """Return the SQLSTATE or numeric error code carried by a failure, if any.
    """
    if isinstance(raw_error, str):
        return None
    for attr in ('sqlstate', 'pgcode'):
        code = getattr(raw_error, attr, None)
        if code:
            return str(code)
    code = getattr(raw_error, 'sqlite_errorcode', None)
    if isinstance(code, int):
        return code
    return None


def classify(raw_error: BaseException | str, operation: str | None = None) -> ErrorKind:
    """Map a raw failure onto an ``ErrorKind``.

    Failures produced while connecting are always ``CONNECTION_ERROR``,
    whatever their message says.

    >>> classify('NOT NULL constraint failed: users.name')
    <ErrorKind.NOT_NULL_VIOLATION: 'not_null_violation'>
    >>> classify('UNIQUE constraint failed: users.email')
    <ErrorKind.UNIQUE_VIOLATION: 'unique_violation'>
    >>> classify('Binder Error: column not found\\nLINE 1: SELECT x WHERE a IS NOT NULL')
    <ErrorKind.DATABASE_ERROR: 'database_error'>
    >>> classify('gibberish')
    <ErrorKind.DATABASE_ERROR: 'database_error'>
    >>> classify('no such file', operation='connect')
    <ErrorKind.CONNECTION_ERROR: 'connection_error'>
    """
    if operation == 'connect' or isinstance(raw_error, ConnectionFailure):
        return ErrorKind.CONNECTION_ERROR

    if isinstance(raw_error, ClassifiedDatabaseError):
        return raw_error.kind

    code = _error_code(raw_error)
    if code is not None:
        for kind, sqlstates, sqlite_codes, _ in CLASSIFICATION_RULES:
            if code in sqlstates or code in sqlite_codes:
                return kind

    message = _STATEMENT_CONTEXT.split(str(raw_error), maxsplit=1)[0]
    for kind, pattern in _TEXT_RULES:
        if pattern.search(message):
            return kind

    if isinstance(raw_error, IntegrityError):
        return ErrorKind.CONSTRAINT_VIOLATION

    return ErrorKind.DATABASE_ERROR


def to_exception(raw_error: BaseException | str,
                 operation: str | None = None) -> ClassifiedDatabaseError:
    """Build (but do not raise) the classified exception for a raw failure.
    """
    if isinstance(raw_error, ClassifiedDatabaseError):
        return raw_error
    kind = classify(raw_error, operation)
    original = None if isinstance(raw_error, str) else raw_error
    return _KIND_EXCEPTIONS[kind](str(raw_error), original=original, kind=kind)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
