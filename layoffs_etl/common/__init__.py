"""
Common definitions shared across the pipeline stages.

Kept small and dependency-free: column names for a layoff record and the
value coercion helpers used by both the CSV reader and the standardizer.
"""

from .records import (
    BUSINESS_KEY_COLUMNS,
    CLEAN_COLUMNS,
    SOURCE_COLUMNS,
    is_blank,
    parse_int,
    parse_numeric,
)

__all__ = [
    "BUSINESS_KEY_COLUMNS",
    "CLEAN_COLUMNS",
    "SOURCE_COLUMNS",
    "is_blank",
    "parse_int",
    "parse_numeric",
]
