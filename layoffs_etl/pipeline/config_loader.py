"""
Configuration Loader for the Layoffs Pipeline

This module loads and validates the pipeline configuration from pipeline.yml.
Every setting has a default, so an empty file (or ``PipelineConfig()``)
reproduces the standard cleanup of the world layoffs dataset.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

VALID_RULE_KINDS = {'prefix', 'suffix'}
VALID_DATE_POLICIES = {'abort', 'null', 'skip'}
TEXT_SETTINGS = (
    'industry_prefix',
    'industry_canonical',
    'country_prefix',
    'country_canonical',
    'date_format',
)


@dataclass
class LocationRule:
    """One row of the location lookup table."""

    kind: str
    pattern: str
    replacement: str

    def validate(self) -> None:
        """Raise ValueError for an unknown kind or an empty pattern."""
        if self.kind not in VALID_RULE_KINDS:
            raise ValueError(
                f"Invalid location rule kind {self.kind!r}, expected one of {sorted(VALID_RULE_KINDS)}"
            )
        if not self.pattern or not self.replacement:
            raise ValueError("Location rules need a non-empty pattern and replacement")


def default_location_rules() -> list[LocationRule]:
    return [
        LocationRule(kind='prefix', pattern='Florian', replacement='Florianopolis'),
        LocationRule(kind='suffix', pattern='sseldorf', replacement='Dusseldorf'),
        LocationRule(kind='prefix', pattern='malm', replacement='Malmo'),
    ]


@dataclass
class TableConfig:
    """Database tables used by the loader."""

    source: str = 'layoffs'
    working: str = 'layoffs_staging'
    clean: str = 'layoffs_clean'


@dataclass
class StandardizeConfig:
    """Rewrite rules applied by the standardizer."""

    industry_prefix: str = 'crypto'
    industry_canonical: str = 'Crypto'
    country_prefix: str = 'United States'
    country_canonical: str = 'United States'
    date_format: str = '%m/%d/%Y'
    on_invalid_date: str = 'abort'
    location_rules: list[LocationRule] = field(default_factory=default_location_rules)

    def validate(self) -> None:
        """Validate rule values."""
        for name in TEXT_SETTINGS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"standardize.{name} must be a non-empty string, got {value!r}")
        if self.on_invalid_date not in VALID_DATE_POLICIES:
            raise ValueError(
                f"Invalid on_invalid_date {self.on_invalid_date!r}, "
                f"expected one of {sorted(VALID_DATE_POLICIES)}"
            )
        for rule in self.location_rules:
            rule.validate()


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""

    tables: TableConfig = field(default_factory=TableConfig)
    standardize: StandardizeConfig = field(default_factory=StandardizeConfig)
    final_dedupe: bool = True
    top_n: int = 5

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "PipelineConfig":
        """Create PipelineConfig from dictionary."""
        tables_dict = config_dict.get("tables") or {}
        tables = TableConfig(
            source=tables_dict.get("source", "layoffs"),
            working=tables_dict.get("working", "layoffs_staging"),
            clean=tables_dict.get("clean", "layoffs_clean"),
        )

        std_dict = config_dict.get("standardize") or {}
        rules_list = std_dict.get("location_rules")
        if rules_list is None:
            location_rules = default_location_rules()
        else:
            if not isinstance(rules_list, list):
                raise ValueError("standardize.location_rules must be a list")
            location_rules = [
                LocationRule(
                    kind=str(rule.get("kind", "")).lower(),
                    pattern=rule.get("pattern", ""),
                    replacement=rule.get("replacement", ""),
                )
                for rule in rules_list
            ]

        standardize = StandardizeConfig(
            industry_prefix=std_dict.get("industry_prefix", "crypto"),
            industry_canonical=std_dict.get("industry_canonical", "Crypto"),
            country_prefix=std_dict.get("country_prefix", "United States"),
            country_canonical=std_dict.get("country_canonical", "United States"),
            date_format=std_dict.get("date_format", "%m/%d/%Y"),
            on_invalid_date=str(std_dict.get("on_invalid_date", "abort")).lower(),
            location_rules=location_rules,
        )
        standardize.validate()

        report_dict = config_dict.get("report") or {}
        top_n = int(report_dict.get("top_n", 5))
        if top_n < 1:
            raise ValueError("report.top_n must be at least 1")

        return cls(
            tables=tables,
            standardize=standardize,
            final_dedupe=bool(config_dict.get("final_dedupe", True)),
            top_n=top_n,
        )


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent.parent


def load_pipeline_config(config_path: Optional[str] = None) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file.

    Args:
        config_path: Path to pipeline.yml file. If None, uses config/pipeline.yml
            relative to the project root.

    Returns:
        PipelineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid

    Example:
        >>> config = load_pipeline_config('config/pipeline.yml')
        >>> config.standardize.industry_canonical
        'Crypto'
    """
    path = Path(config_path) if config_path else _project_root() / "config" / "pipeline.yml"

    logger.info("Loading pipeline configuration", extra={'config_path': str(path)})

    try:
        with path.open("r", encoding="utf-8") as handle:
            config_dict = yaml.safe_load(handle)

        if not config_dict:
            logger.warning("Empty configuration file, using defaults")
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ValueError("Pipeline configuration must be a mapping")

        config = PipelineConfig.from_dict(config_dict)

        logger.info(
            "Pipeline configuration loaded successfully",
            extra={
                'source_table': config.tables.source,
                'location_rules': len(config.standardize.location_rules),
                'on_invalid_date': config.standardize.on_invalid_date,
            }
        )

        return config

    except FileNotFoundError:
        logger.error(f"Configuration file not found: {path}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise ValueError(f"Failed to load configuration: {e}") from e
