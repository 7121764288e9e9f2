"""
Reporter

Fixed battery of read-only aggregate reports over the cleaned records, plus
CSV export for downstream visualization tools.
"""

from .exporter import export_records_csv, export_report_csv
from .reports import (
    build_report,
    date_range,
    layoffs_by,
    monthly_totals,
    rolling_totals,
    top_companies_by_year,
)

__all__ = [
    "build_report",
    "date_range",
    "export_records_csv",
    "export_report_csv",
    "layoffs_by",
    "monthly_totals",
    "rolling_totals",
    "top_companies_by_year",
]
