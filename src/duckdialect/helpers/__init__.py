"""
DuckDB-specific SQL helpers.
"""
from duckdialect.helpers.files import copy_to, read_files

__all__ = ['copy_to', 'read_files']
