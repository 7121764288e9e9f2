"""
Unit Tests for the Pipeline Configuration Loader
"""

import pytest

from layoffs_etl.pipeline.config_loader import (
    LocationRule,
    PipelineConfig,
    StandardizeConfig,
    load_pipeline_config,
)


class TestFromDict:
    """Tests for building configuration from dictionaries"""

    def test_defaults(self):
        config = PipelineConfig.from_dict({})

        assert config.tables.source == 'layoffs'
        assert config.tables.clean == 'layoffs_clean'
        assert config.standardize.industry_canonical == 'Crypto'
        assert config.standardize.on_invalid_date == 'abort'
        assert [rule.replacement for rule in config.standardize.location_rules] == [
            'Florianopolis', 'Dusseldorf', 'Malmo',
        ]
        assert config.final_dedupe is True
        assert config.top_n == 5

    def test_overrides(self):
        config = PipelineConfig.from_dict({
            'tables': {'source': 'raw.layoffs', 'working': 'work.layoffs'},
            'standardize': {
                'on_invalid_date': 'NULL',
                'location_rules': [{'kind': 'Prefix', 'pattern': 'Zur', 'replacement': 'Zurich'}],
            },
            'final_dedupe': False,
            'report': {'top_n': 10},
        })

        assert config.tables.source == 'raw.layoffs'
        assert config.tables.clean == 'layoffs_clean'
        assert config.standardize.on_invalid_date == 'null'
        assert config.standardize.location_rules == [
            LocationRule(kind='prefix', pattern='Zur', replacement='Zurich')
        ]
        assert config.final_dedupe is False
        assert config.top_n == 10

    @pytest.mark.parametrize("config_dict", [
        {'standardize': {'on_invalid_date': 'ignore'}},
        {'standardize': {'location_rules': [{'kind': 'regex', 'pattern': '.*', 'replacement': 'X'}]}},
        {'standardize': {'location_rules': [{'kind': 'prefix', 'pattern': '', 'replacement': 'X'}]}},
        {'standardize': {'location_rules': 'Malmo'}},
        {'report': {'top_n': 0}},
        {'standardize': {'industry_prefix': None}},
        {'standardize': {'country_canonical': '  '}},
        {'standardize': {'date_format': 5}},
    ])
    def test_invalid(self, config_dict):
        with pytest.raises(ValueError):
            PipelineConfig.from_dict(config_dict)

    def test_standardize_config_validate(self):
        with pytest.raises(ValueError):
            StandardizeConfig(on_invalid_date='retry').validate()


class TestLoadPipelineConfig:
    """Tests for reading pipeline.yml"""

    def test_project_config_matches_defaults(self):
        """The shipped config/pipeline.yml reproduces the built-in defaults"""
        assert load_pipeline_config() == PipelineConfig()

    def test_load_file(self, tmp_path):
        path = tmp_path / "pipeline.yml"
        path.write_text("tables:\n  source: layoffs_raw\nreport:\n  top_n: 3\n", encoding="utf-8")

        config = load_pipeline_config(str(path))

        assert config.tables.source == 'layoffs_raw'
        assert config.top_n == 3

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "pipeline.yml"
        path.write_text("", encoding="utf-8")

        assert load_pipeline_config(str(path)) == PipelineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_pipeline_config(str(tmp_path / "missing.yml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "pipeline.yml"
        path.write_text("tables: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_pipeline_config(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "pipeline.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_pipeline_config(str(path))

    def test_blank_prefix_rejected(self, tmp_path):
        """A key left empty in YAML loads as None and must not reach the rules"""
        path = tmp_path / "pipeline.yml"
        path.write_text("standardize:\n  industry_prefix:\n", encoding="utf-8")

        with pytest.raises(ValueError, match="industry_prefix"):
            load_pipeline_config(str(path))
