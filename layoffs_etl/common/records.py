"""
Layoff Record Columns and Value Helpers

A layoff record is a plain dictionary keyed by the column names defined here.
Raw records come straight from the source table (or CSV export) and carry
mostly text; cleaned records carry typed values and the derived
``total_population`` column.
"""

import logging
import math
from typing import Any, Optional

logger = logging.getLogger(__name__)


# Columns of the raw source table, in table order
SOURCE_COLUMNS = (
    'company',
    'location',
    'industry',
    'total_laid_off',
    'percentage_laid_off',
    'date',
    'stage',
    'country',
    'funds_raised_millions',
)

# Two records are duplicates when all of these are equal (nulls included)
BUSINESS_KEY_COLUMNS = SOURCE_COLUMNS

# Columns of the cleaned output
CLEAN_COLUMNS = SOURCE_COLUMNS + ('total_population',)

# Text read as SQL NULL in numeric and date columns
NULL_LITERALS = {'null', 'none', 'nan'}


def is_blank(value: Any) -> bool:
    """Return True for None, empty strings and whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_numeric(value: Any, field_name: str) -> Optional[float]:
    """
    Parse a numeric value safely.

    Blank values, NULL literals and text that is not a number all come back
    as None. Only unparsable non-blank text is logged, since missing numbers
    are expected in this dataset.

    Args:
        value: Value to parse
        field_name: Name of field (for logging)

    Returns:
        Float value or None if invalid/missing
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        text = value.strip()
        if not text or text.lower() in NULL_LITERALS:
            return None
        try:
            number = float(text.rstrip('%'))
        except ValueError:
            logger.warning(
                f"Failed to parse {field_name} as number",
                extra={'value': value}
            )
            return None
        return number if math.isfinite(number) else None

    # Decimal and other numeric types coming back from the database
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid {field_name} type",
            extra={'value': value, 'type': type(value).__name__}
        )
        return None


def parse_int(value: Any, field_name: str) -> Optional[int]:
    """
    Parse an integer count (headcount, funds raised).

    Accepts integral text such as ``"100"`` or ``"100.0"``. Fractional values
    are rounded half-up rather than truncated.
    """
    number = parse_numeric(value, field_name)
    if number is None:
        return None
    return round_half_up(number)


def round_half_up(number: float) -> int:
    """Round to the nearest integer, halves away from zero (SQL INT cast)."""
    if number >= 0:
        return int(math.floor(number + 0.5))
    return -int(math.floor(-number + 0.5))
