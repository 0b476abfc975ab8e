"""Shared utilities for the motor screening tool."""

from .config_loader import load_config, get_nested_config
from .age_utils import months_between, age_group_for_months, format_age_equivalency

__all__ = [
    'load_config',
    'get_nested_config',
    'months_between',
    'age_group_for_months',
    'format_age_equivalency',
]
