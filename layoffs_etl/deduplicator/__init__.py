"""
Deduplicator

Partitions layoff records by their full business key and keeps exactly one
representative per group, the first one in original order.
"""

from .business_key import business_key, key_fingerprint
from .dedupe import DedupeResult, assign_row_numbers, find_duplicates, remove_duplicates

__all__ = [
    "DedupeResult",
    "assign_row_numbers",
    "business_key",
    "find_duplicates",
    "key_fingerprint",
    "remove_duplicates",
]
