"""
Standardization Rules

Each rule rewrites one concern of the deduplicated layoff records. Rules are
idempotent: running a rule on its own output changes nothing. Rules that only
rewrite values work in place and return how many records they changed; rules
that can drop records return a new list alongside the count.

Matching follows the source database's case-insensitive collation, so
"CryptoCurrency", "crypto" and "CRYPTO" all match the prefix "crypto".
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Optional

from layoffs_etl.common import is_blank, parse_int, parse_numeric
from layoffs_etl.common.records import NULL_LITERALS, round_half_up
from layoffs_etl.pipeline.config_loader import LocationRule

logger = logging.getLogger(__name__)

# Latin-1 accented letters, the ones the location lookup table exists for
DIACRITIC_PATTERN = re.compile('[À-ÖØ-öø-ÿ]')


class StandardizationError(Exception):
    """Raised when a record cannot be standardized."""
    pass


class DateParseError(StandardizationError):
    """Raised when a date value does not match the expected format."""

    def __init__(self, value: Any, date_format: str, company: Optional[str] = None):
        self.value = value
        self.date_format = date_format
        self.company = company
        super().__init__(
            f"Date {value!r} does not match format {date_format!r}"
            + (f" (company: {company})" if company else "")
        )


def _starts_with(value: Any, prefix: str) -> bool:
    return isinstance(value, str) and value.lower().startswith(prefix.lower())


def _ends_with(value: Any, suffix: str) -> bool:
    return isinstance(value, str) and value.lower().endswith(suffix.lower())


def trim_company(records: list[dict[str, Any]]) -> int:
    """Strip leading/trailing whitespace from company names."""
    changed = 0
    for record in records:
        company = record.get('company')
        if isinstance(company, str) and company != company.strip():
            record['company'] = company.strip()
            changed += 1
    return changed


def canonicalize_industry(
    records: list[dict[str, Any]],
    prefix: str = 'crypto',
    canonical: str = 'Crypto'
) -> int:
    """
    Rewrite every industry starting with ``prefix`` to ``canonical``.

    Examples:
        "Crypto Currency", "CryptoCurrency" and "cryptocurrency" all become
        "Crypto".
    """
    changed = 0
    for record in records:
        industry = record.get('industry')
        if _starts_with(industry, prefix) and industry != canonical:
            record['industry'] = canonical
            changed += 1
    return changed


def match_location(location: Any, rules: list[LocationRule]) -> Optional[str]:
    """
    Look up the canonical city name for a malformed location.

    Rules are evaluated top to bottom and the first match wins.

    Returns:
        Replacement name, or None when no rule matches
    """
    for rule in rules:
        if rule.kind == 'prefix' and _starts_with(location, rule.pattern):
            return rule.replacement
        if rule.kind == 'suffix' and _ends_with(location, rule.pattern):
            return rule.replacement
    return None


def canonicalize_location(records: list[dict[str, Any]], rules: list[LocationRule]) -> int:
    """
    Rewrite known malformed locations using the lookup table.

    The table is a closed, hand-maintained list. Locations no rule matches are
    left untouched even when they carry diacritics.
    """
    changed = 0
    for record in records:
        location = record.get('location')
        replacement = match_location(location, rules)
        if replacement is not None and location != replacement:
            logger.debug(
                "Canonicalized location",
                extra={'original': location, 'replacement': replacement}
            )
            record['location'] = replacement
            changed += 1
    return changed


def find_diacritic_locations(records: list[dict[str, Any]]) -> list[str]:
    """Return distinct locations that still contain accented letters, sorted."""
    return sorted({
        record['location']
        for record in records
        if isinstance(record.get('location'), str) and DIACRITIC_PATTERN.search(record['location'])
    })


def canonicalize_country(
    records: list[dict[str, Any]],
    prefix: str = 'United States',
    canonical: str = 'United States'
) -> int:
    """Collapse country variants such as "United States." into one value."""
    changed = 0
    for record in records:
        country = record.get('country')
        if _starts_with(country, prefix) and country != canonical:
            record['country'] = canonical
            changed += 1
    return changed


def parse_date_value(value: Any, date_format: str = '%m/%d/%Y') -> Optional[date]:
    """
    Parse one date value.

    Supports:
    - text in ``date_format`` (default MM/DD/YYYY, e.g. "3/6/2023")
    - date and datetime objects (passed through as date)
    - None, blank text and NULL literals (returns None)

    Raises:
        ValueError: If the value is text that does not match the format
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text or text.lower() in NULL_LITERALS:
        return None

    return datetime.strptime(text, date_format).date()


def parse_dates(
    records: list[dict[str, Any]],
    date_format: str = '%m/%d/%Y',
    on_invalid: str = 'abort'
) -> tuple[list[dict[str, Any]], int]:
    """
    Convert every record's ``date`` into a ``datetime.date``.

    Args:
        records: Layoff records
        date_format: strptime format of the source text
        on_invalid: What to do with text that does not parse:
            'abort' raises DateParseError, 'null' clears the field,
            'skip' drops the record

    Returns:
        Tuple of (records, number of invalid values encountered)

    Raises:
        DateParseError: On the first invalid value when on_invalid is 'abort'.
            Records are only rewritten after every value has been checked,
            so an aborted pass leaves them untouched.
    """
    parsed: list[Optional[date]] = []
    invalid_rows: set[int] = set()

    for index, record in enumerate(records):
        try:
            parsed.append(parse_date_value(record.get('date'), date_format))
        except ValueError:
            if on_invalid == 'abort':
                raise DateParseError(record.get('date'), date_format, record.get('company'))

            logger.warning(
                "Invalid date value",
                extra={
                    'value': record.get('date'),
                    'company': record.get('company'),
                    'policy': on_invalid,
                }
            )
            parsed.append(None)
            invalid_rows.add(index)

    kept = []
    for index, (record, value) in enumerate(zip(records, parsed)):
        if index in invalid_rows and on_invalid == 'skip':
            continue
        record['date'] = value
        kept.append(record)

    return kept, len(invalid_rows)


def coerce_numbers(records: list[dict[str, Any]]) -> int:
    """
    Convert the numeric columns to numbers.

    ``percentage_laid_off`` becomes a float, the headcount and funding
    columns become ints. Blank or non-numeric text becomes None.

    Returns:
        Number of non-blank values that could not be parsed
    """
    unparsable = 0
    for record in records:
        for column, parser in (
            ('percentage_laid_off', parse_numeric),
            ('total_laid_off', parse_int),
            ('funds_raised_millions', parse_int),
        ):
            raw = record.get(column)
            value = parser(raw, column)
            if value is None and not is_blank(raw) and str(raw).strip().lower() not in NULL_LITERALS:
                unparsable += 1
            record[column] = value
    return unparsable


def backfill_industry(records: list[dict[str, Any]]) -> int:
    """
    Fill missing industries from other records of the same company and location.

    Blank industries are treated as missing and normalized to None first.
    A single grouped pass maps each (company, location) to the first known
    industry in that group, then applies the mapping. Records whose group has
    no known industry stay None.

    Returns:
        Number of records that received an industry
    """
    known: dict[tuple, str] = {}
    for record in records:
        if is_blank(record.get('industry')):
            record['industry'] = None
            continue
        known.setdefault((record.get('company'), record.get('location')), record['industry'])

    filled = 0
    for record in records:
        if record['industry'] is not None:
            continue
        industry = known.get((record.get('company'), record.get('location')))
        if industry is not None:
            record['industry'] = industry
            filled += 1

    return filled


def drop_rows_without_signal(records: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], int]:
    """
    Drop records where both total_laid_off and percentage_laid_off are null.

    Returns:
        Tuple of (remaining records, number dropped)
    """
    kept = [
        record for record in records
        if record.get('total_laid_off') is not None or record.get('percentage_laid_off') is not None
    ]
    return kept, len(records) - len(kept)


def estimate_total_population(total_laid_off: Any, percentage_laid_off: Any) -> Optional[int]:
    """
    Estimate the workforce size as total_laid_off / percentage_laid_off * 100.

    Returns None instead of raising when the percentage is missing, blank,
    non-numeric or zero, or when the headcount is missing.

    Examples:
        >>> estimate_total_population(50, 25)
        200
        >>> estimate_total_population(50, '0') is None
        True
    """
    total = parse_numeric(total_laid_off, 'total_laid_off')
    percentage = parse_numeric(percentage_laid_off, 'percentage_laid_off')
    if total is None or not percentage:
        return None
    return round_half_up(total / percentage * 100)


def compute_total_population(records: list[dict[str, Any]]) -> int:
    """Populate the derived total_population column; returns how many were set."""
    populated = 0
    for record in records:
        record['total_population'] = estimate_total_population(
            record.get('total_laid_off'),
            record.get('percentage_laid_off'),
        )
        if record['total_population'] is not None:
            populated += 1
    return populated
