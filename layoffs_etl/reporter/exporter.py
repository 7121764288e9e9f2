import os
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from layoffs_etl.common import CLEAN_COLUMNS


def _write_rows(path: Path, rows: list[dict[str, Any]], columns: Optional[list[str]] = None) -> str:
    columns = columns or (list(rows[0].keys()) if rows else [])
    # object dtype keeps nullable integer columns from being written as floats
    frame = pd.DataFrame(rows, columns=columns, dtype=object)
    frame.to_csv(path, index=False, header=bool(columns), encoding="utf-8")
    return str(path)


def export_records_csv(records: list[dict[str, Any]], path: str) -> str:
    """
    Write cleaned records to a CSV file.

    Dates are written as ISO strings, missing values as empty cells.

    Returns the path of the written file.
    """
    target = Path(path)
    os.makedirs(target.parent, exist_ok=True)
    return _write_rows(target, records, list(CLEAN_COLUMNS))


def export_report_csv(report: dict[str, list[dict[str, Any]]], output_dir: str = "artifacts") -> list[str]:
    """
    Write each report to ``<output_dir>/<report name>.csv``.

    Notes:
    - Creates output directory if it doesn't exist.
    - An empty report still gets a file, with no header.

    Returns the paths of the created files.
    """
    os.makedirs(output_dir, exist_ok=True)
    return [
        _write_rows(Path(output_dir) / f"{name}.csv", rows)
        for name, rows in report.items()
    ]
