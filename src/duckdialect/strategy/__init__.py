"""
Dialect strategy factory.
"""
from functools import lru_cache
from typing import TYPE_CHECKING

from duckdialect.strategy.base import _STRATEGY_REGISTRY
from duckdialect.strategy.base import DialectStrategy as DialectStrategy
from duckdialect.strategy.base import register_strategy as register_strategy
from duckdialect.strategy.duckdb import DuckDBStrategy as DuckDBStrategy

if TYPE_CHECKING:
    from duckdialect.options import DialectOptions


def _validate_dialect(dialect: str) -> None:
    """Raise ValueError if dialect is not registered."""
    if dialect not in _STRATEGY_REGISTRY:
        available = list(_STRATEGY_REGISTRY.keys())
        raise ValueError(f'Unsupported dialect: {dialect}. Available: {available}')


@lru_cache(maxsize=8)
def _get_strategy(dialect: str) -> DialectStrategy:
    """Get cached strategy instance for a dialect with default options."""
    _validate_dialect(dialect)
    return _STRATEGY_REGISTRY[dialect]()


def get_strategy(dialect: str = 'duckdb',
                 options: 'DialectOptions | None' = None) -> DialectStrategy:
    """Get strategy instance for a dialect name.

    Strategies built from default options are shared; passing ``options``
    returns a fresh instance bound to them.
    """
    if options is None:
        return _get_strategy(dialect)
    _validate_dialect(dialect)
    return _STRATEGY_REGISTRY[dialect](options)


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_STRATEGY_REGISTRY.keys())


def is_supported_dialect(dialect: str) -> bool:
    """Check if a dialect is supported."""
    return dialect in _STRATEGY_REGISTRY


def get_strategy_class(dialect: str) -> type['DialectStrategy']:
    """Get the strategy class for a dialect without instantiating."""
    _validate_dialect(dialect)
    return _STRATEGY_REGISTRY[dialect]
