"""
Validation Module for kitagawa

Provides fail-fast input checks for the analytic and empirical response
paths, and YAML configuration validation.
"""

from __future__ import annotations

from kitagawa.validation.input_validators import (
    ConfigValidationResult,
    check_conf_level,
    check_freq_units,
    check_overlap,
    check_physical_parameters,
    check_positive_frequencies,
    check_sampling_interval,
    check_taper_count,
    check_time_series_pair,
    validate_config_file,
)

__all__ = [
    "ConfigValidationResult",
    "check_conf_level",
    "check_freq_units",
    "check_overlap",
    "check_physical_parameters",
    "check_positive_frequencies",
    "check_sampling_interval",
    "check_taper_count",
    "check_time_series_pair",
    "validate_config_file",
]
