"""
Integration tests for COPY export and file readers.
"""
import pytest
from duckdialect import compile
from duckdialect.helpers import copy_to, read_files

pytestmark = pytest.mark.duckdb


@pytest.mark.parametrize(('suffix', 'options'), [
    ('parquet', {}),
    ('csv', {'header': True}),
    ('json', {}),
])
def test_copy_then_read(duckdb_conn, tmp_path, suffix, options):
    """Test exported files read back with the matching reader"""
    path = tmp_path / f'test_table.{suffix}'
    duckdb_conn.run(copy_to('SELECT id, name FROM test_table ORDER BY id', path, **options))
    assert path.exists()

    source = compile(read_files(path))
    rows = duckdb_conn.execute(f'SELECT id, name FROM {source} ORDER BY id')
    assert [row['name'] for row in rows] == ['Alice', 'Bob', 'Charlie']


def test_read_many_files(duckdb_conn, tmp_path):
    """Test several files of one format are read as a single relation"""
    paths = []
    for ident in (1, 2):
        path = tmp_path / f'part_{ident}.parquet'
        duckdb_conn.run(copy_to(f'SELECT * FROM test_table WHERE id = {ident}', path))
        paths.append(path)

    source = compile(read_files(paths))
    assert duckdb_conn.select_column(f'SELECT count(*) FROM {source}') == [2]


def test_read_glob(duckdb_conn, tmp_path):
    """Test glob patterns reach the reader unchanged"""
    for ident in (1, 2, 3):
        duckdb_conn.run(copy_to(f'SELECT * FROM test_table WHERE id = {ident}',
                                tmp_path / f'part_{ident}.csv', header=True))

    source = compile(read_files(str(tmp_path / '*.csv')))
    assert duckdb_conn.select_column(f'SELECT sum(value) FROM {source}') == [60]


if __name__ == '__main__':
    __import__('pytest').main([__file__])
