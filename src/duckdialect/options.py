import datetime
from dataclasses import dataclass

from duckdialect.sql import DUCKDB_RESERVED_WORDS
from duckdialect.strategy import get_available_dialects, get_strategy_class
from duckdialect.strategy import is_supported_dialect
from duckdialect.types import TypeTag

from libb import ConfigOptions

__all__ = ['DialectOptions']


@dataclass
class DialectOptions(ConfigOptions):
    """Options

    supported driver names: `duckdb`

    Rendering options:
    - quote_char: Identifier quote character (default: `"`)
    - reserved_words: Keywords that force identifier quoting
    - wildcard: Symbol emitted unquoted, as in `count(*)` (default: `*`)
    - time_sentinel: Date marking a datetime as a time of day (default: 2000-01-01)
    - interval_cast: Cast target for interval arithmetic (default: datetime)

    Catalog options:
    - default_schema: Namespace used when none is given (default: `main`)
    """
    drivername: str = 'duckdb'
    quote_char: str = '"'
    reserved_words: frozenset = DUCKDB_RESERVED_WORDS
    wildcard: str = '*'
    time_sentinel: datetime.date = datetime.date(2000, 1, 1)
    default_schema: str = 'main'
    interval_cast: TypeTag | str = TypeTag.DATETIME

    def __post_init__(self):
        if not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ValueError(f'drivername must be one of: {available}')
        self.reserved_words = frozenset(w.lower() for w in self.reserved_words)
        strategy_cls = get_strategy_class(self.drivername)
        strategy_cls.validate_options(self)
