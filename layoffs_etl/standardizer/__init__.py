"""
Standardizer

Trims and canonicalizes text columns, parses dates, backfills missing
industries, drops records without any layoff figure and derives the
estimated workforce size.
"""

from .rules import DateParseError, StandardizationError
from .standardize import StandardizeResult, standardize

__all__ = [
    "DateParseError",
    "StandardizationError",
    "StandardizeResult",
    "standardize",
]
