"""
Input Validators for kitagawa

Provides fail-fast validation for:
- Frequency axes and unit flags
- Physical parameters of the well/aquifer model
- Time series pairs, taper counts and confidence levels
- YAML configuration file parsing

Computational entry points call the ``check_*`` functions, which raise a
named error carrying the offending parameter and value. Configuration files
are validated without raising and return a ``ConfigValidationResult``.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from kitagawa.exceptions import DomainError, InvalidConfigurationError
from kitagawa.physics.constants import DEFAULT_FREQ_UNITS, FREQ_UNIT_MULTIPLIERS


# =============================================================================
# Validation Result Types
# =============================================================================


@dataclass
class ConfigValidationResult:
    """Result of YAML configuration file validation.

    Attributes
    ----------
    is_valid : bool
        True if config loaded and validated successfully.
    config : dict | None
        Loaded configuration (None if load failed).
    file_path : Path | None
        Path to the config file (None if using defaults).
    warnings : list[str]
        Non-fatal warnings (e.g., missing optional fields).
    errors : list[str]
        Fatal errors (e.g., parse failures).
    recovery_suggestions : list[str]
        Actionable suggestions for fixing issues.
    """

    is_valid: bool
    config: dict[str, Any] | None
    file_path: Path | None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recovery_suggestions: list[str] = field(default_factory=list)


# =============================================================================
# Frequency Validation
# =============================================================================


def check_freq_units(freq_units: str | None) -> str:
    """
    Resolve a frequency unit flag.

    Parameters
    ----------
    freq_units : str or None
        "rad_per_sec" or "Hz" (case-sensitive). None selects "rad_per_sec".

    Returns
    -------
    str
        The resolved flag.

    Raises
    ------
    InvalidConfigurationError
        If the flag is not one of the supported units.
    """
    if freq_units is None:
        return DEFAULT_FREQ_UNITS
    if not isinstance(freq_units, str) or freq_units not in FREQ_UNIT_MULTIPLIERS:
        raise InvalidConfigurationError(
            f"freq_units must be one of {sorted(FREQ_UNIT_MULTIPLIERS)}, got {freq_units!r}"
        )
    return freq_units


def check_positive_frequencies(omega: np.ndarray, name: str = "omega") -> np.ndarray:
    """
    Ensure every frequency is finite and strictly positive.

    The whole axis is rejected on the first offending entry.

    Raises
    ------
    DomainError
        If any entry is zero, negative, NaN or infinite.
    """
    omega = np.asarray(omega, dtype=np.float64)

    if omega.ndim != 1:
        raise InvalidConfigurationError(f"{name} must be one-dimensional, got shape {omega.shape}")

    bad = ~np.isfinite(omega) | (omega <= 0.0)
    if np.any(bad):
        idx = int(np.flatnonzero(bad)[0])
        raise DomainError(
            f"{name}[{idx}] = {omega[idx]!r}: frequencies must be finite and > 0 "
            f"({int(np.count_nonzero(bad))} invalid of {omega.size})"
        )
    return omega


# =============================================================================
# Physical Parameter Validation
# =============================================================================


def check_positive_parameter(name: str, value: float) -> float:
    """
    Ensure a scalar physical parameter is a finite positive number.

    Raises
    ------
    DomainError
        If the value is not a real number, is non-finite, or is <= 0.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise DomainError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not np.isfinite(value) or value <= 0.0:
        raise DomainError(f"{name} must be finite and > 0, got {value!r}")
    return value


def check_physical_parameters(**params: float) -> dict[str, float]:
    """
    Validate a set of named physical parameters.

    Examples
    --------
    >>> check_physical_parameters(T=1e-6, S=1e-5)
    {'T': 1e-06, 'S': 1e-05}
    """
    return {name: check_positive_parameter(name, value) for name, value in params.items()}


# =============================================================================
# Spectral Estimation Validation
# =============================================================================


def check_time_series_pair(
    x: np.ndarray,
    y: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Validate an input/output time series pair.

    Returns
    -------
    tuple of np.ndarray
        Both series as float64 arrays.

    Raises
    ------
    InvalidConfigurationError
        If either series is not 1-D, contains non-finite values, or the
        lengths differ.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    if x.ndim != 1 or y.ndim != 1:
        raise InvalidConfigurationError(
            f"time series must be one-dimensional, got shapes {x.shape} and {y.shape}"
        )
    if x.size != y.size:
        raise InvalidConfigurationError(
            f"time series lengths differ: input has {x.size} samples, output has {y.size}"
        )
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise InvalidConfigurationError("time series contain NaN or infinite values")
    return x, y


def check_sampling_interval(sampling_interval: float) -> float:
    """Ensure the sampling interval is finite and positive."""
    if isinstance(sampling_interval, bool) or not isinstance(sampling_interval, numbers.Real):
        raise InvalidConfigurationError(
            f"sampling_interval must be a real number, got {sampling_interval!r}"
        )
    if not np.isfinite(sampling_interval) or sampling_interval <= 0:
        raise InvalidConfigurationError(
            f"sampling_interval must be finite and > 0, got {sampling_interval!r}"
        )
    return float(sampling_interval)


def check_integer_count(name: str, k: int, minimum: int = 1) -> int:
    """Ensure ``k`` is an integer (bools excluded) no smaller than ``minimum``."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidConfigurationError(f"{name} must be an integer, got {k!r}")
    if k < minimum:
        raise InvalidConfigurationError(f"{name} must be >= {minimum}, got {k}")
    return int(k)


def check_taper_count(k: int, n_samples: int) -> int:
    """
    Validate a multitaper count against the series length.

    Raises
    ------
    InvalidConfigurationError
        If ``k`` is not a positive integer or ``k >= n_samples / 2``.
    """
    k = check_integer_count("k", k)
    if 2 * k >= n_samples:
        raise InvalidConfigurationError(
            f"k={k} tapers requires more than {2 * k} samples, series has {n_samples}"
        )
    return k


def check_conf_level(conf_level: float) -> float:
    """Ensure a confidence level lies strictly between 0 and 1."""
    if isinstance(conf_level, bool) or not isinstance(conf_level, numbers.Real):
        raise InvalidConfigurationError(f"conf_level must be a real number, got {conf_level!r}")
    if not 0.0 < conf_level < 1.0:
        raise InvalidConfigurationError(f"conf_level must be in (0, 1), got {conf_level!r}")
    return float(conf_level)


def check_overlap(overlap: float) -> float:
    """Ensure a fractional segment overlap lies in [0, 1)."""
    if isinstance(overlap, bool) or not isinstance(overlap, numbers.Real):
        raise InvalidConfigurationError(f"welch_overlap must be a real number, got {overlap!r}")
    if not 0.0 <= overlap < 1.0:
        raise InvalidConfigurationError(f"welch_overlap must be in [0, 1), got {overlap!r}")
    return float(overlap)


# =============================================================================
# Configuration File Validation
# =============================================================================

# Required sections in config
REQUIRED_CONFIG_SECTIONS = ["fluid", "spectral"]

# Type specifications for validation
CONFIG_TYPE_SPECS = {
    "fluid": {
        "rho_kg_m3": (float, 500.0, 2000.0),
        "kf_pa": (float, 1e8, 1e11),
        "grav_m_s2": (float, 9.7, 9.9),
    },
    "amplification": {
        "avs": (float, 1e-3, 1e3),
        "aw": (float, 1e-3, 1e3),
    },
    "spectral": {
        "conf_level": (float, 0.5, 0.9999),
        "welch_divisor": (int, 1, 1024),
        "welch_overlap": (float, 0.0, 0.95),
    },
    "well": {
        "transmissivity_m2_s": (float, 1e-12, 1e2),
        "storativity": (float, 1e-10, 1.0),
        "volume_m3": (float, 1e-6, 1e4),
        "screen_radius_m": (float, 1e-3, 10.0),
        "undrained_bulk_modulus_pa": (float, 1e6, 1e12),
        "skempton_b": (float, 1e-3, 1.0),
    },
}


def validate_config_file(
    config_path: Path | str | None = None,
    strict: bool = False,
) -> ConfigValidationResult:
    """
    Load and validate YAML configuration file.

    Provides graceful error handling with helpful messages for:
    - Missing files (falls back to defaults)
    - Malformed YAML (syntax errors)
    - Invalid parameter values (type/range checks)

    Parameters
    ----------
    config_path : Path or str, optional
        Path to YAML config file. If None, uses configs/default.yaml.
    strict : bool
        If True, treat warnings as errors. Default False.

    Returns
    -------
    ConfigValidationResult
        Validation result with loaded config and any issues found.

    Examples
    --------
    >>> result = validate_config_file("nonexistent.yaml")
    >>> result.is_valid
    True  # Falls back to defaults
    >>> len(result.warnings) > 0
    True
    """
    from kitagawa.config import DEFAULT_CONFIG_PATH, get_default_config

    warnings = []
    errors = []
    suggestions = []

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    config = None
    file_exists = config_path.exists()

    if not file_exists:
        warnings.append(
            f"CONFIG FILE NOT FOUND: '{config_path}' does not exist. "
            "Using built-in defaults."
        )
        suggestions.append(
            f"Create config file at '{config_path}' or use load_config() without path."
        )
        config = get_default_config()
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            # Empty YAML file loads as None
            if config is None:
                warnings.append(
                    f"CONFIG FILE EMPTY: '{config_path}' contains no data. "
                    "Using built-in defaults."
                )
                config = get_default_config()
        except yaml.YAMLError as e:
            errors.append(f"YAML PARSE ERROR in '{config_path}': {e}")
            suggestions.append(
                "Check YAML syntax: proper indentation (2 spaces), "
                "colons after keys, no tabs."
            )
            config = get_default_config()
        except OSError as e:
            errors.append(f"FILE READ ERROR for '{config_path}': {e}")
            suggestions.append("Check file permissions and path.")
            config = get_default_config()

    if not isinstance(config, dict):
        errors.append(
            f"CONFIG STRUCTURE ERROR: top level of '{config_path}' must be a mapping, "
            f"got {type(config).__name__}."
        )
        config = get_default_config()

    for section in REQUIRED_CONFIG_SECTIONS:
        if section not in config:
            if strict:
                errors.append(f"MISSING REQUIRED SECTION: '{section}' not found in config.")
            else:
                warnings.append(f"MISSING SECTION: '{section}' not found. Using defaults.")
            defaults = get_default_config()
            if section in defaults:
                config[section] = defaults[section]

    for section, specs in CONFIG_TYPE_SPECS.items():
        if not isinstance(config.get(section), dict):
            continue
        for param, (expected_type, min_val, max_val) in specs.items():
            if param not in config[section]:
                continue
            value = config[section][param]

            accepted = (float, int) if expected_type is float else (expected_type,)
            if isinstance(value, bool) or not isinstance(value, accepted):
                if strict:
                    errors.append(
                        f"TYPE ERROR: {section}.{param} should be {expected_type.__name__}, "
                        f"got {type(value).__name__}."
                    )
                    continue
                warnings.append(
                    f"TYPE WARNING: {section}.{param} should be {expected_type.__name__}, "
                    f"got {type(value).__name__}. Attempting conversion."
                )
                try:
                    value = expected_type(value)
                    config[section][param] = value
                except (ValueError, TypeError):
                    errors.append(
                        f"CONVERSION FAILED: Cannot convert {section}.{param} "
                        f"value '{value}' to {expected_type.__name__}."
                    )
                    continue

            if value < min_val or value > max_val:
                warnings.append(
                    f"RANGE WARNING: {section}.{param}={value} is outside "
                    f"expected range [{min_val}, {max_val}]."
                )

    is_valid = len(errors) == 0
    if strict:
        is_valid = is_valid and len(warnings) == 0

    return ConfigValidationResult(
        is_valid=is_valid,
        config=config,
        file_path=config_path if file_exists else None,
        warnings=warnings,
        errors=errors,
        recovery_suggestions=suggestions,
    )
