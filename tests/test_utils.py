"""
Unit tests for configuration and age helpers.

Tests cover:
- YAML config loading, defaults and threshold checks
- Calendar month arithmetic
- Age group lookup
- Caregiver-facing age formatting
"""

from datetime import date

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from screening import AgeGroup
from utils.config_loader import DEFAULT_CONFIG
from utils import (
    age_group_for_months,
    format_age_equivalency,
    get_nested_config,
    load_config,
    months_between,
)

SCREENING_CONFIG = Path(__file__).parent.parent / 'configs' / 'screening.yaml'


class TestConfigLoader:
    """Test YAML config helpers."""

    def test_load_default_config(self):
        config = load_config(SCREENING_CONFIG)
        assert get_nested_config(config, 'scoring.age_equivalency.mastery_threshold') == 0.8
        assert get_nested_config(config, 'screening.max_age_months') == 60

    def test_blank_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / 'blank.yaml'
        config_file.write_text("")
        assert load_config(config_file) == DEFAULT_CONFIG
        assert load_config() == DEFAULT_CONFIG

    def test_partial_override_keeps_siblings(self, tmp_path):
        config_file = tmp_path / 'partial.yaml'
        config_file.write_text("scoring:\n  development_status:\n    mild_max_delay: 2.0\n")
        config = load_config(config_file)

        assert get_nested_config(config, 'scoring.development_status.mild_max_delay') == 2.0
        assert get_nested_config(config, 'scoring.development_status.moderate_max_delay') == 6.0
        assert get_nested_config(config, 'scoring.age_equivalency.mastery_threshold') == 0.8

    def test_defaults_not_mutated(self, tmp_path):
        config_file = tmp_path / 'partial.yaml'
        config_file.write_text("screening:\n  max_age_months: 36\n")
        load_config(config_file)
        assert DEFAULT_CONFIG['screening']['max_age_months'] == 60

    @pytest.mark.parametrize("body", [
        "scoring:\n  age_equivalency:\n    mastery_threshold: 1.5\n",
        "scoring:\n  development_status:\n    mild_max_delay: 8.0\n",
        "screening:\n  min_age_months: 70\n",
        "- not\n- a mapping\n",
    ])
    def test_bad_values_rejected(self, tmp_path, body):
        config_file = tmp_path / 'bad.yaml'
        config_file.write_text(body)
        with pytest.raises(ValueError):
            load_config(config_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.yaml')

    def test_nested_default(self):
        config = {'scoring': {'development_status': {'mild_max_delay': 2.0}}}
        assert get_nested_config(config, 'scoring.development_status.mild_max_delay') == 2.0
        assert get_nested_config(config, 'scoring.missing.key', default=7) == 7
        assert get_nested_config(config, 'scoring.development_status.mild_max_delay.x') is None


class TestMonthsBetween:
    """Test whole-month age arithmetic."""

    @pytest.mark.parametrize("birthdate,on_date,expected", [
        (date(2024, 3, 2), date(2024, 3, 30), 0),
        (date(2024, 3, 2), date(2025, 5, 1), 14),
        (date(2023, 12, 31), date(2024, 1, 1), 1),
        (date(2021, 6, 15), date(2024, 6, 15), 36),
    ])
    def test_months(self, birthdate, on_date, expected):
        assert months_between(birthdate, on_date) == expected

    def test_future_birthdate(self):
        with pytest.raises(ValueError):
            months_between(date(2030, 1, 1), date(2025, 1, 1))


class TestAgeGroups:
    """Test age group lookup."""

    @pytest.fixture
    def groups(self):
        return [
            AgeGroup(key='0_6m', display_name='0-6 months', min_months=0, max_months=6,
                     display_order=1),
            AgeGroup(key='6_12m', display_name='6-12 months', min_months=6, max_months=12,
                     display_order=2),
        ]

    def test_lower_bound_inclusive(self, groups):
        assert age_group_for_months(6, groups).key == '6_12m'

    def test_inside(self, groups):
        assert age_group_for_months(3.5, groups).key == '0_6m'

    def test_past_last_group(self, groups):
        assert age_group_for_months(30, groups).key == '6_12m'

    def test_no_groups(self):
        assert age_group_for_months(10, []) is None


class TestFormatAge:
    """Test caregiver-facing age text."""

    @pytest.mark.parametrize("months,expected", [
        (0.0, "Less than 1 month"),
        (0.9, "Less than 1 month"),
        (1.0, "1 month"),
        (9.8, "10 months"),
        (12.0, "1 year"),
        (13.0, "1 year, 1 month"),
        (14.5, "1 year, 3 months"),
        (23.6, "2 years"),
        (42.0, "3 years, 6 months"),
    ])
    def test_format(self, months, expected):
        assert format_age_equivalency(months) == expected
