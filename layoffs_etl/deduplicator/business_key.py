"""
Business Key for Layoff Deduplication

Two layoff records are duplicates when every business-key column holds the
same value. Unlike SQL's ``NULL <> NULL``, missing values compare equal here,
which is how a ``ROW_NUMBER() OVER (PARTITION BY ...)`` groups rows.

Key Concepts:
- Exact match: no case folding or whitespace cleanup, the key is compared on
  the values as loaded
- Null-equal: two None values in the same column belong to the same group
- Fingerprint: an MD5 of the key, used only to identify a group in logs
"""

import hashlib
from typing import Any

from layoffs_etl.common import BUSINESS_KEY_COLUMNS


def business_key(record: dict[str, Any]) -> tuple:
    """
    Build the business-key tuple for a record.

    Examples:
        >>> business_key({'company': 'Acme', 'location': 'NY'})[:3]
        ('Acme', 'NY', None)

    Args:
        record: Layoff record dictionary

    Returns:
        Tuple of the business-key values in column order (missing keys as None)
    """
    return tuple(record.get(column) for column in BUSINESS_KEY_COLUMNS)


def key_fingerprint(key: tuple) -> str:
    """
    Generate a stable 32-character fingerprint for a business key.

    Values are rendered with ``repr`` so that None and the text "None" do
    not collide, then joined with '|' and hashed.

    Args:
        key: Tuple returned by business_key()

    Returns:
        32-character hexadecimal MD5 hash string
    """
    composite_key = '|'.join(repr(value) for value in key)
    return hashlib.md5(composite_key.encode('utf-8')).hexdigest()
