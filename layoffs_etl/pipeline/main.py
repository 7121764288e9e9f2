"""
Layoffs Pipeline - Main Entry Point

This is the command-line interface for the layoffs cleaning pipeline.

Usage:
    python -m layoffs_etl.pipeline.main [OPTIONS]

Options:
    --config TEXT         Path to pipeline.yml configuration file
    --csv PATH            Read raw records from a CSV export instead of the database
    --output-dir DIR      Write the cleaned records and reports as CSV files
    --dry-run            Clean and report without writing anything
    --verbose            Enable debug logging
    --help               Show this message and exit

Examples:
    # Clean the layoffs table in the database from DATABASE_URL:
    python -m layoffs_etl.pipeline.main

    # Clean a CSV export and write the results to ./artifacts:
    python -m layoffs_etl.pipeline.main --csv layoffs.csv --output-dir artifacts

    # Dry run with verbose logging:
    python -m layoffs_etl.pipeline.main --dry-run --verbose

Exit Codes:
    0: Success
    1: Invalid data (a date did not parse under the abort policy)
    2: Fatal error (missing source, database connection, configuration, etc.)
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from layoffs_etl.deduplicator import remove_duplicates
from layoffs_etl.loader import DatabaseError, LayoffsDB, SetupError, read_layoffs_csv
from layoffs_etl.reporter import build_report, export_records_csv, export_report_csv
from layoffs_etl.standardizer import StandardizationError, standardize

from .config_loader import PipelineConfig, load_pipeline_config

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Cleaned records, their report and run statistics."""

    records: list[dict[str, Any]]
    report: dict[str, list[dict[str, Any]]]
    stats: dict[str, Any] = field(default_factory=dict)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Clean the layoffs dataset and report on it',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to pipeline.yml configuration file (default: config/pipeline.yml)'
    )

    parser.add_argument(
        '--csv',
        type=str,
        default=None,
        help='Read raw records from this CSV export instead of the database'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default=None,
        dest='output_dir',
        help='Directory for the cleaned CSV and report CSV files'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Clean and report without writing to the database or disk',
        dest='dry_run'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def run_pipeline(
    config: PipelineConfig,
    db: Optional[LayoffsDB] = None,
    records: Optional[list[dict[str, Any]]] = None,
    output_dir: Optional[str] = None,
    dry_run: bool = False
) -> PipelineResult:
    """
    Main pipeline logic.

    Raw records come from ``records`` when given, otherwise the source table
    is copied into the working table and read back from ``db``.

    Args:
        config: Pipeline configuration
        db: Database interface (required when records is None)
        records: Raw records, e.g. from read_layoffs_csv()
        output_dir: Where to export CSV files (skipped when None)
        dry_run: If True, don't write to database or disk

    Returns:
        PipelineResult with statistics:
        - loaded: Number of raw records
        - duplicates_removed: Exact duplicates dropped before standardizing
        - dates_invalid: Dates that did not parse (non-abort policies)
        - industry_backfilled: Records that received an industry
        - rows_without_signal: Records dropped for missing both layoff figures
        - duplicates_after_standardize: Duplicates created by standardization
        - cleaned: Number of cleaned records
        - written: Rows written to the clean table

    Raises:
        SetupError: If the source is missing or malformed
        DatabaseError: If a database operation fails
        StandardizationError: If a date does not parse under the abort policy
    """
    start_time = datetime.now(timezone.utc)

    logger.info(
        "Starting layoffs pipeline",
        extra={
            'source_table': config.tables.source if records is None else None,
            'dry_run': dry_run,
        }
    )

    if records is None:
        if db is None:
            raise SetupError("No raw records given and no database to load them from")
        db.validate_source_schema(config.tables.source)
        db.copy_source_table(config.tables.source, config.tables.working)
        records = db.fetch_records(config.tables.working)

    stats: dict[str, Any] = {'loaded': len(records)}

    if not records:
        logger.warning("No raw records found to process")

    deduped = remove_duplicates(records)
    stats['duplicates_removed'] = deduped.removed_count

    standardized = standardize(deduped.records, config.standardize)
    stats['dates_invalid'] = standardized.stats['dates_invalid']
    stats['industry_backfilled'] = standardized.stats['industry_backfilled']
    stats['rows_without_signal'] = standardized.stats['rows_without_signal']

    cleaned = standardized.records
    stats['duplicates_after_standardize'] = 0
    if config.final_dedupe:
        final = remove_duplicates(cleaned)
        stats['duplicates_after_standardize'] = final.removed_count
        cleaned = final.records
        for record in cleaned:
            record.pop('row_num', None)

    stats['cleaned'] = len(cleaned)

    report = build_report(cleaned, config.top_n)

    stats['written'] = 0
    if dry_run:
        logger.info(f"DRY RUN: Would write {len(cleaned)} cleaned records")
    else:
        if db is not None:
            stats['written'] = db.write_clean_table(config.tables.clean, cleaned)
        if output_dir:
            export_records_csv(cleaned, str(Path(output_dir) / f"{config.tables.clean}.csv"))
            paths = export_report_csv(report, output_dir)
            logger.info(
                f"Exported {len(paths)} report files",
                extra={'output_dir': output_dir}
            )

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    stats['duration_seconds'] = duration

    logger.info("Layoffs pipeline completed", extra=stats)

    return PipelineResult(records=cleaned, report=report, stats=stats)


def _log_top_companies(report: dict[str, list[dict[str, Any]]]) -> None:
    for row in report.get('top_companies_by_year', []):
        logger.info(
            f"{row['year']} #{row['rank']}: {row['company']} ({row['total_laid_off']})"
        )


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the layoffs pipeline.

    Returns:
        Exit code (0 = success, 1 = invalid data, 2 = fatal error)
    """
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    try:
        config = load_pipeline_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load configuration: {e}")
        return 2

    try:
        db = None
        records = None

        if args.csv:
            records = read_layoffs_csv(args.csv)
        else:
            database_url = os.getenv('DATABASE_URL')
            if not database_url:
                logger.error("DATABASE_URL environment variable must be set (or pass --csv)")
                return 2

            logger.info("Connecting to database")
            db = LayoffsDB(database_url)

        result = run_pipeline(
            config=config,
            db=db,
            records=records,
            output_dir=args.output_dir,
            dry_run=args.dry_run
        )

        _log_top_companies(result.report)

        if result.stats['cleaned'] == 0:
            logger.warning("No records survived cleaning")

        logger.info("Layoffs pipeline finished successfully")
        return 0

    except StandardizationError as e:
        logger.error(f"Invalid data: {e}")
        return 1

    except (SetupError, DatabaseError) as e:
        logger.error(f"Fatal error: {e}")
        return 2

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(
            "Unexpected fatal error",
            extra={
                'error': str(e),
                'error_type': type(e).__name__,
            },
            exc_info=True
        )
        return 2


if __name__ == '__main__':
    sys.exit(main())
