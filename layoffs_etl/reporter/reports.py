"""
Layoff Reports

Read-only aggregations over cleaned layoff records. The records are loaded
into a pandas DataFrame, aggregated there, and every report comes back as a
list of row dictionaries with plain Python values, ready to print or export.

Sums follow SQL semantics: missing headcounts are ignored, and a group with
no headcount at all sums to None. Descending orderings put None last.
"""

import logging
from typing import Any, Optional

import pandas as pd

from layoffs_etl.common import CLEAN_COLUMNS

logger = logging.getLogger(__name__)

GROUPED_REPORT_COLUMNS = ('company', 'industry', 'country', 'stage')


def _frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    """Build a DataFrame with numeric headcounts and a ``when`` timestamp column."""
    frame = pd.DataFrame(records, columns=list(CLEAN_COLUMNS))
    frame['total_laid_off'] = pd.to_numeric(frame['total_laid_off'], errors='coerce')
    frame['when'] = pd.to_datetime(frame['date'], errors='coerce')
    return frame


def _dated(frame: pd.DataFrame) -> pd.DataFrame:
    dated = frame.dropna(subset=['when'])
    return dated.assign(year=dated['when'].dt.year, month=dated['when'].dt.month)


def _count(value: Any) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def _label(value: Any) -> Any:
    return None if pd.isna(value) else value


def layoffs_by(records: list[dict[str, Any]], column: str) -> list[dict[str, Any]]:
    """
    Total layoffs grouped by one column, largest first.

    Groups with equal totals keep the order in which they first appear.

    Args:
        records: Cleaned layoff records
        column: One of company, industry, country, stage

    Returns:
        Rows of {column: value, 'total_laid_off': sum}
    """
    if column not in GROUPED_REPORT_COLUMNS:
        raise ValueError(f"Cannot group layoffs by {column!r}")

    totals = (
        _frame(records)
        .groupby(column, sort=False, dropna=False)['total_laid_off']
        .sum(min_count=1)
        .reset_index()
        .sort_values('total_laid_off', ascending=False, na_position='last', kind='stable')
    )

    return [
        {column: _label(key), 'total_laid_off': _count(total)}
        for key, total in zip(totals[column], totals['total_laid_off'])
    ]


def date_range(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Earliest and latest layoff date as a single row."""
    when = _frame(records)['when'].dropna()
    if when.empty:
        return [{'earliest_layoff': None, 'latest_layoff': None}]
    return [{
        'earliest_layoff': when.min().date(),
        'latest_layoff': when.max().date(),
    }]


def _monthly_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    dated = _dated(_frame(records))
    if dated.empty:
        return pd.DataFrame(columns=['year', 'month', 'total_laid_off'])
    return (
        dated.groupby(['year', 'month'])['total_laid_off']
        .sum(min_count=1)
        .reset_index()
    )


def monthly_totals(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Total layoffs per calendar month, oldest first. Undated records are skipped."""
    months = _monthly_frame(records)
    return [
        {'year': int(year), 'month': int(month), 'total_laid_off': _count(total)}
        for year, month, total in months[['year', 'month', 'total_laid_off']].itertuples(index=False)
    ]


def rolling_totals(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Monthly totals with a running cumulative sum in chronological order.

    Months are labelled ``YYYY-MM``. The running sum stays None until the
    first month with a headcount.
    """
    months = _monthly_frame(records)
    if months.empty:
        return []

    totals = months['total_laid_off']
    months['rolling_total'] = totals.fillna(0).cumsum().where(totals.notna().cumsum() > 0)

    return [
        {
            'month': f"{int(year):04d}-{int(month):02d}",
            'total_laid_off': _count(total),
            'rolling_total': _count(running),
        }
        for year, month, total, running in months[
            ['year', 'month', 'total_laid_off', 'rolling_total']
        ].itertuples(index=False)
    ]


def top_companies_by_year(records: list[dict[str, Any]], top_n: int = 5) -> list[dict[str, Any]]:
    """
    Companies with the most layoffs per year, dense-ranked.

    Tied totals share a rank and the next distinct total gets the following
    rank, so a year can return more than ``top_n`` companies. Companies with
    no headcount rank after every company that has one.

    Returns:
        Rows of {'company', 'year', 'total_laid_off', 'rank'} ordered by
        year (latest first) then rank
    """
    dated = _dated(_frame(records))
    if dated.empty:
        return []

    totals = (
        dated.groupby(['year', 'company'], sort=False, dropna=False)['total_laid_off']
        .sum(min_count=1)
        .reset_index()
    )
    totals['rank'] = totals.groupby('year')['total_laid_off'].rank(
        method='dense', ascending=False, na_option='bottom'
    )

    top = (
        totals[totals['rank'] <= top_n]
        .sort_values('rank', kind='stable')
        .sort_values('year', ascending=False, kind='stable')
    )

    return [
        {
            'company': _label(company),
            'year': int(year),
            'total_laid_off': _count(total),
            'rank': int(rank),
        }
        for year, company, total, rank in top[
            ['year', 'company', 'total_laid_off', 'rank']
        ].itertuples(index=False)
    ]


def build_report(records: list[dict[str, Any]], top_n: int = 5) -> dict[str, list[dict[str, Any]]]:
    """
    Run the full report battery.

    Returns:
        Dictionary mapping report name to its rows
    """
    report = {
        'layoffs_by_company': layoffs_by(records, 'company'),
        'layoff_date_range': date_range(records),
        'layoffs_by_industry': layoffs_by(records, 'industry'),
        'layoffs_by_country': layoffs_by(records, 'country'),
        'layoffs_by_stage': layoffs_by(records, 'stage'),
        'monthly_totals': monthly_totals(records),
        'rolling_totals': rolling_totals(records),
        'top_companies_by_year': top_companies_by_year(records, top_n),
    }

    logger.info(
        "Built layoff report",
        extra={'records': len(records), 'reports': len(report)}
    )

    return report
