"""
Literal encoding for DuckDB.

Renders one ``Value`` into SQL literal text. Dispatch is keyed by the exact
``Value`` subclass, so a variant without an encoder is rejected rather than
falling through to a generic rendering.

Python objects are converted to the ``Value`` union by ``to_value`` first.
A plain ``str`` always becomes ``String`` (quoted and escaped); the only way
to emit SQL verbatim is an explicit ``RawLiteral``.
"""
import datetime
import decimal
import math
import uuid
from typing import Any

import numpy as np
import pandas as pd
from duckdialect.exceptions import MalformedInput
from duckdialect.types import BigInteger, Blob, Boolean, Date, Decimal, Float
from duckdialect.types import Integer, Null, RawLiteral, String, Time
from duckdialect.types import Timestamp, Value

__all__ = ['encode', 'to_value', 'literal', 'TIME_SENTINEL']

TIME_SENTINEL = datetime.date(2000, 1, 1)

_INT32_MIN = -2**31
_INT32_MAX = 2**31 - 1


def _encode_null(value: Null) -> str:
    return 'NULL'


def _encode_boolean(value: Boolean) -> str:
    return 'TRUE' if value.value else 'FALSE'


def _encode_integer(value: Integer | BigInteger) -> str:
    return str(int(value.value))


def _encode_float(value: Float) -> str:
    number = float(value.value)
    if not math.isfinite(number):
        raise MalformedInput(f'Cannot render non-finite float: {number!r}')
    return repr(number)


def _encode_decimal(value: Decimal) -> str:
    number = value.value
    if not isinstance(number, decimal.Decimal):
        number = decimal.Decimal(str(number))
    if not number.is_finite():
        raise MalformedInput(f'Cannot render non-finite decimal: {number}')
    if value.scale is not None:
        number = number.quantize(decimal.Decimal(1).scaleb(-value.scale),
                                 rounding=decimal.ROUND_HALF_EVEN)
    return format(number, 'f')


def _encode_string(value: String) -> str:
    if not isinstance(value.value, str):
        raise MalformedInput(f'String value must be str, got {type(value.value).__name__}')
    return "'" + value.value.replace("'", "''") + "'"


def _encode_blob(value: Blob) -> str:
    return "'" + bytes(value.value).hex() + "'"


def _encode_date(value: Date) -> str:
    d = value.value
    return f"'{d.year:04d}-{d.month:02d}-{d.day:02d}'"


def _encode_timestamp(value: Timestamp) -> str:
    ts = value.value
    return (f"'{ts.year:04d}-{ts.month:02d}-{ts.day:02d} "
            f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}'")


def _encode_time(value: Time) -> str:
    t = value.value
    return f"'{t.hour:02d}:{t.minute:02d}:{t.second:02d}'"


def _encode_raw(value: RawLiteral) -> str:
    return value.text


_ENCODERS = {
    Null: _encode_null,
    Boolean: _encode_boolean,
    Integer: _encode_integer,
    BigInteger: _encode_integer,
    Float: _encode_float,
    Decimal: _encode_decimal,
    String: _encode_string,
    Blob: _encode_blob,
    Date: _encode_date,
    Timestamp: _encode_timestamp,
    Time: _encode_time,
    RawLiteral: _encode_raw,
}


def encode(value: Value) -> str:
    """Render a single value as SQL literal text.

    Args:
        value: Member of the ``Value`` union

    Returns
        SQL literal text

    Raises
        MalformedInput: For an unrecognized variant or a non-finite number

    >>> encode(String("John's Name"))
    "'John''s Name'"
    >>> encode(RawLiteral('CURRENT_DATE'))
    'CURRENT_DATE'
    >>> encode(Boolean(False))
    'FALSE'
    """
    encoder = _ENCODERS.get(type(value))
    if encoder is None:
        raise MalformedInput(f'Cannot encode {type(value).__name__} as a SQL literal')
    return encoder(value)


def _integer_value(number: int) -> Integer | BigInteger:
    if _INT32_MIN <= number <= _INT32_MAX:
        return Integer(number)
    return BigInteger(number)


def _datetime_value(dt: datetime.datetime, time_sentinel: datetime.date) -> Timestamp | Time:
    if dt.date() == time_sentinel:
        return Time(dt)
    return Timestamp(dt)


def to_value(obj: Any, time_sentinel: datetime.date = TIME_SENTINEL) -> Value:
    """Convert a Python, NumPy or pandas scalar to the ``Value`` union.

    Missing markers (None, NaN, NaT, pd.NA) become ``Null``. A datetime
    whose date equals ``time_sentinel`` is treated as a time of day.

    >>> to_value(None)
    Null()
    >>> to_value(2**40)
    BigInteger(value=1099511627776)
    >>> to_value('1; DROP TABLE users')
    String(value='1; DROP TABLE users')
    """
    if isinstance(obj, Value):
        return obj

    if obj is None:
        return Null()

    if pd.api.types.is_scalar(obj) and not isinstance(obj, str | bytes) and pd.isna(obj):
        return Null()

    if isinstance(obj, bool | np.bool_):
        return Boolean(bool(obj))

    if isinstance(obj, int | np.integer):
        return _integer_value(int(obj))

    if isinstance(obj, float | np.floating):
        return Float(float(obj))

    if isinstance(obj, decimal.Decimal):
        return Decimal(obj)

    if isinstance(obj, str):
        return String(obj)

    if isinstance(obj, uuid.UUID):
        return String(str(obj))

    if isinstance(obj, bytes | bytearray | memoryview):
        return Blob(bytes(obj))

    if isinstance(obj, np.datetime64):
        obj = pd.Timestamp(obj)

    if isinstance(obj, pd.Timestamp):
        obj = obj.to_pydatetime()

    if isinstance(obj, datetime.datetime):
        return _datetime_value(obj, time_sentinel)

    if isinstance(obj, datetime.date):
        return Date(obj)

    if isinstance(obj, datetime.time):
        return Time(obj)

    raise MalformedInput(f'No SQL literal for {type(obj).__name__}: {obj!r}')


def literal(obj: Any, time_sentinel: datetime.date = TIME_SENTINEL) -> str:
    """Render a Python object as SQL literal text.

    >>> literal(85.5)
    '85.5'
    >>> literal(datetime.date(2023, 5, 15))
    "'2023-05-15'"
    """
    return encode(to_value(obj, time_sentinel))


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
