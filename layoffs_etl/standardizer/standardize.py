"""
Layoff Record Standardization

Applies the standardization rules to deduplicated records in a fixed order.
Industry backfill runs after industry canonicalization so every group
propagates its final label, and the signal filter runs after numbers are
coerced so blank text counts as missing.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from layoffs_etl.pipeline.config_loader import StandardizeConfig

from .rules import (
    backfill_industry,
    canonicalize_country,
    canonicalize_industry,
    canonicalize_location,
    coerce_numbers,
    compute_total_population,
    drop_rows_without_signal,
    find_diacritic_locations,
    parse_dates,
    trim_company,
)

logger = logging.getLogger(__name__)


@dataclass
class StandardizeResult:
    """Output of standardize()."""

    records: list[dict[str, Any]]
    stats: dict[str, int] = field(default_factory=dict)


def standardize(
    records: list[dict[str, Any]],
    config: Optional[StandardizeConfig] = None
) -> StandardizeResult:
    """
    Standardize layoff records.

    Records are modified in place where a rule only rewrites values; the
    returned list is the authoritative result since some rules drop records.
    The internal ``row_num`` column is removed from every returned record.

    Args:
        records: Deduplicated layoff records
        config: Rule settings (defaults reproduce the standard cleanup)

    Returns:
        StandardizeResult with the cleaned records and per-rule counts

    Raises:
        DateParseError: If a date does not parse and the policy is 'abort'
    """
    config = config or StandardizeConfig()
    stats = {'input': len(records)}

    stats['company_trimmed'] = trim_company(records)
    stats['industry_canonicalized'] = canonicalize_industry(
        records, config.industry_prefix, config.industry_canonical
    )
    stats['location_canonicalized'] = canonicalize_location(records, config.location_rules)

    unmatched = find_diacritic_locations(records)
    if unmatched:
        logger.warning(
            "Locations with accented characters not covered by the lookup table",
            extra={'locations': unmatched}
        )

    stats['country_canonicalized'] = canonicalize_country(
        records, config.country_prefix, config.country_canonical
    )

    records, stats['dates_invalid'] = parse_dates(
        records, config.date_format, config.on_invalid_date
    )
    stats['numbers_unparsable'] = coerce_numbers(records)
    stats['industry_backfilled'] = backfill_industry(records)
    records, stats['rows_without_signal'] = drop_rows_without_signal(records)
    stats['total_population_set'] = compute_total_population(records)

    for record in records:
        record.pop('row_num', None)

    stats['output'] = len(records)

    logger.info("Standardization completed", extra=stats)

    return StandardizeResult(records=records, stats=stats)
