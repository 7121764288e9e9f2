"""
CSV Source for Layoff Records

Reads a raw CSV export of the layoffs table so the pipeline can run without
a database. Values are loaded as they appear in the export: text columns stay
text (the date included) and the integer columns are parsed.

The export writes SQL NULL as the literal ``NULL``. In text columns only
that exact literal becomes None, so values such as the city "Nan" survive.
Numeric and date columns also accept the looser spellings in NULL_LITERALS.
"""

import logging
from pathlib import Path
from typing import Any, Union

import pandas as pd

from layoffs_etl.common import SOURCE_COLUMNS, parse_int
from layoffs_etl.common.records import NULL_LITERALS

from .db_operations import SetupError

logger = logging.getLogger(__name__)

EXPORT_NULL = 'NULL'
INTEGER_COLUMNS = {'total_laid_off', 'funds_raised_millions'}
TYPED_COLUMNS = INTEGER_COLUMNS | {'percentage_laid_off', 'date'}


def _raw_value(column: str, value: Any) -> Any:
    if not isinstance(value, str):
        # short rows leave trailing cells empty
        return None
    if column in TYPED_COLUMNS:
        if value.strip().lower() in NULL_LITERALS:
            return None
        if column in INTEGER_COLUMNS:
            return parse_int(value, column)
        return value

    if value == EXPORT_NULL:
        return None
    return value


def read_layoffs_csv(path: Union[str, Path]) -> list[dict[str, Any]]:
    """
    Read raw layoff records from a CSV file.

    Args:
        path: CSV file with a header row containing every source column
            (extra columns are ignored)

    Returns:
        Raw records in file order

    Raises:
        SetupError: If the file is missing, unreadable or lacks required columns
    """
    path = Path(path)
    if not path.exists():
        raise SetupError(f"CSV source not found: {path}")

    try:
        # Every cell as text; NULL handling is per column below
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise SetupError(f"Failed to read CSV source {path}: {e}") from e

    frame.columns = [str(name).strip() for name in frame.columns]
    missing = [column for column in SOURCE_COLUMNS if column not in frame.columns]
    if missing:
        raise SetupError(f"CSV source {path} is missing columns: {missing}")

    records = [
        {column: _raw_value(column, row[column]) for column in SOURCE_COLUMNS}
        for row in frame[list(SOURCE_COLUMNS)].to_dict('records')
    ]

    logger.info("Read CSV source", extra={'path': str(path), 'count': len(records)})
    return records
