"""
Test values fixtures for dialect tests.

This module provides fixture functions that generate test data for encoder and
database tests, ensuring consistent test values across different test modules.
"""
import datetime
import decimal
import math

import pytest


@pytest.fixture(scope='module', autouse=True)
def value_dict():
    """Return a dictionary of test values for all major types"""
    return {
        # Integers
        'int_value': 42,
        'big_int': 9223372036854775807,  # Max int64
        'small_int': -32768,  # Min int16

        # Boolean
        'bool_true': True,
        'bool_false': False,

        # Floating point
        'float_value': math.pi,
        'decimal_value': decimal.Decimal('123456.789123'),
        'money_value': decimal.Decimal('9876.54'),

        # String types
        'char_value': 'X',
        'varchar_value': 'Variable length string',
        'quoted_value': "John's Name",

        # Date and time
        'date_value': datetime.date(2023, 5, 15),
        'time_value': datetime.time(14, 30, 45),
        'datetime_value': datetime.datetime(2023, 5, 15, 14, 30, 45),

        # Binary data
        'binary_value': b'\x01\x02\x03\x04\x05',

        # NULL values
        'null_value': None,
    }


@pytest.fixture
def expected_literals():
    """SQL literal text expected for each entry of value_dict"""
    return {
        'int_value': '42',
        'big_int': '9223372036854775807',
        'small_int': '-32768',
        'bool_true': 'TRUE',
        'bool_false': 'FALSE',
        'float_value': repr(math.pi),
        'decimal_value': '123456.789123',
        'money_value': '9876.54',
        'char_value': "'X'",
        'varchar_value': "'Variable length string'",
        'quoted_value': "'John''s Name'",
        'date_value': "'2023-05-15'",
        'time_value': "'14:30:45'",
        'datetime_value': "'2023-05-15 14:30:45'",
        'binary_value': "'0102030405'",
        'null_value': 'NULL',
    }
