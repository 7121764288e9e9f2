"""
Layoffs ETL

Batch pipeline that cleans a dataset of company layoff events and produces a
fixed set of exploratory reports over it.

Stages:
- loader: copy the raw source table into a working table (or read a CSV export)
- deduplicator: drop rows that repeat an identical business key
- standardizer: trim, canonicalize, parse dates, backfill and derive columns
- reporter: read-only aggregations over the cleaned records
"""

__version__ = "0.1.0"
