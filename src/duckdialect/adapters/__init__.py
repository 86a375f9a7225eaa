"""
Type adapters package.

- type_mapping: DuckDB type names to canonical tags and back (no value conversion)

Value conversion (Python objects to SQL literals) lives in
``duckdialect.literal``.
"""

from duckdialect.adapters.type_mapping import *
