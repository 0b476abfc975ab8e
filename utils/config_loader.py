"""
Screening configuration: YAML loading, defaults and sanity checks.

A config file only needs the keys it wants to change; everything else falls
back to DEFAULT_CONFIG. Threshold values are checked once at load time so a
bad file fails before the first question is asked.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'screening': {
        'min_age_months': 0,
        'max_age_months': 60,
    },
    'scoring': {
        'age_equivalency': {'mastery_threshold': 0.8},
        'development_status': {'mild_max_delay': 3.0, 'moderate_max_delay': 6.0},
    },
    'reporting': {
        'category_bands': {'strong_percent': 80.0, 'emerging_percent': 50.0},
    },
    'logging': {
        'level': 'INFO',
        'file': 'motor_screen.log',
    },
}


def load_config(config_path=None) -> Dict[str, Any]:
    """
    Load screening configuration, layered over DEFAULT_CONFIG.

    Args:
        config_path: Path to YAML configuration file (str or Path);
            None returns the defaults

    Returns:
        Merged configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is not a mapping or a threshold is out of range
        yaml.YAMLError: If config file is malformed
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")
    with open(config_path, 'r', encoding='utf-8') as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(overrides).__name__}")

    _merge(config, overrides)
    _check_thresholds(config)
    return config


def get_nested_config(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get nested configuration value using dot notation.

    Example:
        get_nested_config(config, 'scoring.age_equivalency.mastery_threshold', default=0.8)
    """
    value = config
    for key in key_path.split('.'):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    """Recursively copy overrides into base, section by section."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def _check_thresholds(config: Dict[str, Any]) -> None:
    threshold = get_nested_config(config, 'scoring.age_equivalency.mastery_threshold')
    if not 0 < threshold <= 1:
        raise ValueError(f"mastery_threshold must be in (0, 1], got {threshold}")

    mild = get_nested_config(config, 'scoring.development_status.mild_max_delay')
    moderate = get_nested_config(config, 'scoring.development_status.moderate_max_delay')
    if not 0 <= mild <= moderate:
        raise ValueError(
            f"Delay bands must satisfy 0 <= mild ({mild}) <= moderate ({moderate})"
        )

    min_age = get_nested_config(config, 'screening.min_age_months')
    max_age = get_nested_config(config, 'screening.max_age_months')
    if min_age > max_age:
        raise ValueError(f"min_age_months ({min_age}) exceeds max_age_months ({max_age})")
