"""
Tests for file reader calls and COPY statements.
"""
import pathlib

import pytest
from duckdialect.compiler import compile_expression
from duckdialect.exceptions import MalformedInput
from duckdialect.helpers import copy_to, read_files
from duckdialect.types import FunctionCall, RawLiteral


class TestReadFiles:

    def test_single_path(self):
        expr = read_files('/data/users.parquet')
        assert isinstance(expr, FunctionCall)
        assert compile_expression(expr) == "read_parquet(['/data/users.parquet'])"

    def test_many_paths_share_extension(self):
        expr = read_files(['/a.json', pathlib.Path('/b.json')])
        assert compile_expression(expr) == "read_json(['/a.json','/b.json'])"

    def test_glob_passed_through(self):
        assert compile_expression(read_files('/data/*.csv')) == "read_csv(['/data/*.csv'])"

    def test_using_overrides_extension(self):
        expr = read_files(['/data/part-0', '/data/part-1'], using='parquet')
        assert compile_expression(expr) == "read_parquet(['/data/part-0','/data/part-1'])"

    def test_path_quotes_escaped(self):
        assert compile_expression(read_files("/data/o'brien.csv")) == \
            "read_csv(['/data/o''brien.csv'])"

    def test_no_paths(self):
        with pytest.raises(MalformedInput, match='No paths provided'):
            read_files([])

    def test_mixed_extensions(self):
        with pytest.raises(MalformedInput, match='Multiple different file extensions'):
            read_files(['/a.csv', '/b.json'])

    def test_unsupported_format(self):
        with pytest.raises(MalformedInput, match='Unsupported :using type: xlsx'):
            read_files('/a.xlsx')
        with pytest.raises(MalformedInput):
            read_files('/a.csv', using='avro')


class TestCopyTo:

    def test_format_from_extension(self):
        assert copy_to('SELECT 1', '/tmp/out.parquet') == \
            "COPY (SELECT 1) TO '/tmp/out.parquet' (FORMAT PARQUET)"

    def test_options(self):
        sql = copy_to('SELECT * FROM users', '/tmp/users.csv', header=True, delimiter="'|'")
        assert sql == "COPY (SELECT * FROM users) TO '/tmp/users.csv' (FORMAT CSV, HEADER, DELIMITER '|')"

    def test_false_options_omitted(self):
        sql = copy_to('SELECT 1', '/tmp/out.csv', header=False, compression=None)
        assert sql == "COPY (SELECT 1) TO '/tmp/out.csv' (FORMAT CSV)"

    def test_format_override(self):
        sql = copy_to(RawLiteral('SELECT 1'), pathlib.Path('/tmp/out.txt'), format='csv')
        assert sql == "COPY (SELECT 1) TO '/tmp/out.txt' (FORMAT CSV)"

    def test_format_required(self):
        with pytest.raises(MalformedInput):
            copy_to('SELECT 1', '/tmp/out')


if __name__ == '__main__':
    __import__('pytest').main([__file__])
