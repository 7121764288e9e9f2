"""
Loader

Copies the raw layoffs table into a working table, reads records back out
and persists the cleaned result. A CSV reader covers runs without a database.
"""

from .csv_source import read_layoffs_csv
from .db_operations import DatabaseError, LayoffsDB, SetupError

__all__ = [
    "DatabaseError",
    "LayoffsDB",
    "SetupError",
    "read_layoffs_csv",
]
