"""
Unit tests for the dialect strategy registry and the DuckDB strategy.
"""
import datetime

import pytest
from duckdialect.compiler import ExpressionCompiler
from duckdialect.exceptions import ErrorKind
from duckdialect.options import DialectOptions
from duckdialect.strategy import DialectStrategy, DuckDBStrategy, _get_strategy
from duckdialect.strategy import get_available_dialects, get_strategy
from duckdialect.strategy import get_strategy_class, is_supported_dialect
from duckdialect.types import Integer, TypeTag


def test_registry():
    """Test the DuckDB strategy is registered under its dialect name"""
    assert 'duckdb' in get_available_dialects()
    assert is_supported_dialect('duckdb')
    assert not is_supported_dialect('oracle')
    assert get_strategy_class('duckdb') is DuckDBStrategy

    with pytest.raises(ValueError, match='Unsupported dialect'):
        get_strategy('oracle')
    with pytest.raises(ValueError):
        get_strategy_class('oracle')


def test_default_strategy_is_shared():
    """Test strategies with default options are cached"""
    strategy = get_strategy()
    assert strategy is get_strategy('duckdb')
    assert isinstance(strategy, DialectStrategy)
    assert _get_strategy.cache_info().hits >= 1


def test_strategy_with_options_is_fresh():
    """Test passing options builds a new instance"""
    options = DialectOptions()
    assert get_strategy('duckdb', options) is not get_strategy('duckdb')
    assert get_strategy('duckdb', options).options is options


def test_strategy_surface():
    """Test the strategy delegates each concern"""
    strategy = get_strategy()

    assert strategy.dialect_name == 'duckdb'
    assert isinstance(strategy.compiler, ExpressionCompiler)
    assert strategy.encode(Integer(5)) == '5'
    assert strategy.to_value(datetime.date(2024, 1, 2)).value == datetime.date(2024, 1, 2)
    assert strategy.literal("it's") == "'it''s'"
    assert strategy.render_identifier('order') == '"order"'
    assert strategy.render_qualified('users', 'id') == 'users.id'
    assert strategy.quote_identifier('users') == '"users"'
    assert strategy.native_to_canonical('INT8') == TypeTag.BIGINT
    assert strategy.canonical_to_ddl(TypeTag.FLOAT, double=True) == 'DOUBLE'
    assert strategy.classify('UNIQUE constraint failed') == ErrorKind.UNIQUE_VIOLATION


def test_catalog_queries_embed_literals():
    """Test names reach catalog SQL only as escaped string literals"""
    strategy = get_strategy()
    for sql in (strategy.table_exists_sql("a'b", 'main'),
                strategy.columns_sql("a'b", 'main'),
                strategy.primary_keys_sql("a'b", 'main'),
                strategy.indexes_sql("a'b", 'main')):
        assert "'a''b'" in sql
        assert "'main'" in sql
    assert "'main'" in strategy.list_tables_sql('main')


def test_catalog_query_sources():
    """Test each catalog query reads the expected catalog relation"""
    strategy = get_strategy()
    assert 'information_schema.tables' in strategy.list_tables_sql('main')
    assert 'information_schema.columns' in strategy.columns_sql('t', 'main')
    assert 'ordinal_position' in strategy.columns_sql('t', 'main')
    assert 'duckdb_constraints()' in strategy.primary_keys_sql('t', 'main')
    assert "'PRIMARY KEY'" in strategy.primary_keys_sql('t', 'main')
    assert 'duckdb_indexes()' in strategy.indexes_sql('t', 'main')


def test_catalog_queries_scoped_to_current_database():
    """Test catalog queries ignore other attached databases"""
    strategy = get_strategy()
    for sql in (strategy.list_tables_sql('main'),
                strategy.table_exists_sql('t', 'main'),
                strategy.columns_sql('t', 'main')):
        assert 'table_catalog = current_database()' in sql
    for sql in (strategy.primary_keys_sql('t', 'main'),
                strategy.indexes_sql('t', 'main')):
        assert 'database_name = current_database()' in sql


def test_required_options():
    """Test the options every DuckDB strategy needs"""
    assert DuckDBStrategy.get_required_options() == ['quote_char', 'wildcard', 'default_schema']


if __name__ == '__main__':
    __import__('pytest').main([__file__])
