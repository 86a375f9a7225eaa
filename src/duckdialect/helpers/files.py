"""
File readers and COPY export for DuckDB.

- `read_files()` - `read_parquet`/`read_csv`/`read_json` call over a list of paths
- `copy_to()` - `COPY (<query>) TO '<file>' (FORMAT ..., ...)` statement
"""
import os
from collections.abc import Iterable
from typing import Any

from duckdialect.exceptions import MalformedInput
from duckdialect.literal import encode
from duckdialect.types import FunctionCall, RawLiteral, String

__all__ = ['READ_FUNCTIONS', 'read_files', 'copy_to']

READ_FUNCTIONS = {
    'parquet': 'read_parquet',
    'csv': 'read_csv',
    'json': 'read_json',
}


def _extension(path: str) -> str:
    return os.path.splitext(path)[1]


def read_files(paths: str | os.PathLike | Iterable[str | os.PathLike],
               using: str | None = None) -> FunctionCall:
    """Build the read function call for one or more files.

    The format comes from the shared file extension unless ``using`` forces
    one. Glob patterns are passed through to DuckDB.

    Args:
        paths: Single path or iterable of paths
        using: Format override (parquet, csv or json)

    Returns
        FunctionCall such as `read_parquet(['/a.parquet','/b.parquet'])`

    >>> from duckdialect.compiler import compile_expression
    >>> compile_expression(read_files(['/data/2023.csv', '/data/2024.csv']))
    "read_csv(['/data/2023.csv','/data/2024.csv'])"
    """
    if isinstance(paths, str | os.PathLike):
        paths = [paths]
    paths = [os.fspath(p) for p in paths]
    if not paths:
        raise MalformedInput('No paths provided')

    extensions = list(dict.fromkeys(_extension(p) for p in paths))
    if len(extensions) > 1:
        raise MalformedInput(f'Multiple different file extensions provided: {", ".join(extensions)}')

    fmt = (using or extensions[0].removeprefix('.')).lower()
    function = READ_FUNCTIONS.get(fmt)
    if function is None:
        raise MalformedInput(f'Unsupported :using type: {fmt}')

    path_list = '[' + ','.join(encode(String(p)) for p in paths) + ']'
    return FunctionCall(function, (RawLiteral(path_list),))


def _format_option(key: str, value: Any) -> str | None:
    key = key.upper()
    if value is True:
        return key
    if value is False or value is None:
        return None
    return f'{key} {str(value).upper()}'


def copy_to(source: str | RawLiteral, destination: str | os.PathLike, **options) -> str:
    """Build a COPY statement exporting a query's result to a file.

    The source is trusted SQL (a query, or a table name) and is embedded as
    written. The format is taken from the destination extension unless a
    ``format`` option is given. Option ``True`` emits the bare key, ``False``
    omits it, any other value is upper-cased.

    >>> copy_to('SELECT * FROM users', '/tmp/users.csv', header=True)
    "COPY (SELECT * FROM users) TO '/tmp/users.csv' (FORMAT CSV, HEADER)"
    """
    if isinstance(source, RawLiteral):
        source = source.text
    destination = os.fspath(destination)

    opts = {'format': _extension(destination).removeprefix('.')} | options
    if not opts['format']:
        raise MalformedInput(f'Cannot infer COPY format from {destination!r}')

    rendered = [opt for k, v in opts.items() if (opt := _format_option(k, v)) is not None]
    suffix = f" ({', '.join(rendered)})" if rendered else ''
    return f'COPY ({source}) TO {encode(String(destination))}{suffix}'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
