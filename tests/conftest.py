import pathlib
import site

import pytest
from duckdialect.strategy import _get_strategy

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def clear_strategy_cache():
    """Drop shared strategy instances before and after each test to ensure test isolation."""
    _get_strategy.cache_clear()
    yield
    _get_strategy.cache_clear()


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
    'tests.fixtures.duckdb_fixtures',
]
