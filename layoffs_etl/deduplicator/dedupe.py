"""
Duplicate Removal

Mirrors the ranking approach of the SQL cleanup: every row gets a
``row_num`` equal to its position inside its business-key group (original
order breaks ties), rows numbered 1 survive and the rest are discarded.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .business_key import business_key, key_fingerprint

logger = logging.getLogger(__name__)


@dataclass
class DedupeResult:
    """Output of remove_duplicates()."""

    records: list[dict[str, Any]]
    removed: list[dict[str, Any]] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def assign_row_numbers(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Number each record within its business-key group.

    The input is not modified; each returned record is a shallow copy with a
    ``row_num`` column added.

    Args:
        records: Layoff records in original order

    Returns:
        Copies of the records with 1-based ``row_num``
    """
    seen: dict[tuple, int] = {}
    numbered = []

    for record in records:
        key = business_key(record)
        seen[key] = seen.get(key, 0) + 1
        numbered.append({**record, 'row_num': seen[key]})

    return numbered


def find_duplicates(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return the records that repeat an earlier record's business key."""
    return [record for record in assign_row_numbers(records) if record['row_num'] > 1]


def remove_duplicates(records: list[dict[str, Any]]) -> DedupeResult:
    """
    Keep the first record of every business-key group.

    Survivors keep their original relative order and carry ``row_num`` = 1.

    Args:
        records: Layoff records in original order

    Returns:
        DedupeResult with the surviving records and the discarded ones

    Example:
        >>> row = {'company': 'Acme', 'total_laid_off': 100}
        >>> result = remove_duplicates([row, dict(row)])
        >>> len(result.records), result.removed_count
        (1, 1)
    """
    kept = []
    removed = []

    for record in assign_row_numbers(records):
        if record['row_num'] == 1:
            kept.append(record)
        else:
            removed.append(record)
            logger.debug(
                "Discarding duplicate record",
                extra={
                    'key_fingerprint': key_fingerprint(business_key(record)),
                    'company': record.get('company'),
                    'row_num': record['row_num'],
                }
            )

    logger.info(
        "Duplicate removal completed",
        extra={
            'total': len(kept) + len(removed),
            'kept': len(kept),
            'removed': len(removed),
        }
    )

    return DedupeResult(records=kept, removed=removed)
