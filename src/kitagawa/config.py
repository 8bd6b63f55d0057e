"""
Configuration Management for kitagawa

Loads fluid properties, spectral-estimation options and (optionally) a
reference well from YAML config files, with fallback to hardcoded defaults
in physics.constants.

Usage:
    from kitagawa.config import load_config, spectral_options_from_config
    from kitagawa.physics import PhysicalParameters

    cfg = load_config()  # Load default config
    cfg = load_config("configs/custom.yaml")  # Load custom config

    params = PhysicalParameters.from_config(cfg)
    opts = spectral_options_from_config(cfg)  # kwargs for cross_spectrum
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from kitagawa.exceptions import InvalidConfigurationError

# src/kitagawa/config.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "default.yaml"


def get_default_config() -> dict[str, Any]:
    """
    Return hardcoded default configuration.

    Used as fallback when config file is missing. The "well" section
    describes PBO borehole B084.
    """
    # Import here to avoid circular imports
    from kitagawa.physics.constants import (
        B084_CASING_LENGTH_M,
        B084_CASING_RADIUS_M,
        B084_SCREEN_LENGTH_M,
        B084_SCREEN_RADIUS_M,
        B084_SKEMPTON_B,
        B084_STORATIVITY,
        B084_TRANSMISSIVITY_M2_S,
        B084_UNDRAINED_BULK_MODULUS_PA,
        DEFAULT_AVS,
        DEFAULT_AW,
        DEFAULT_CONF_LEVEL,
        GRAVITY_M_S2,
        WATER_BULK_MODULUS_PA,
        WATER_DENSITY_KG_M3,
        WELCH_DIVISOR,
        WELCH_OVERLAP,
    )
    from kitagawa.physics.geometry import sensing_volume

    return {
        "fluid": {
            "rho_kg_m3": WATER_DENSITY_KG_M3,
            "kf_pa": WATER_BULK_MODULUS_PA,
            "grav_m_s2": GRAVITY_M_S2,
        },
        "amplification": {
            "avs": DEFAULT_AVS,
            "aw": DEFAULT_AW,
        },
        "spectral": {
            "conf_level": DEFAULT_CONF_LEVEL,
            "welch_divisor": WELCH_DIVISOR,
            "welch_overlap": WELCH_OVERLAP,
        },
        "well": {
            "transmissivity_m2_s": B084_TRANSMISSIVITY_M2_S,
            "storativity": B084_STORATIVITY,
            "volume_m3": sensing_volume(
                B084_CASING_RADIUS_M,
                B084_CASING_LENGTH_M,
                B084_SCREEN_RADIUS_M,
                B084_SCREEN_LENGTH_M,
            ),
            "screen_radius_m": B084_SCREEN_RADIUS_M,
            "undrained_bulk_modulus_pa": B084_UNDRAINED_BULK_MODULUS_PA,
            "skempton_b": B084_SKEMPTON_B,
        },
    }


def _read_config(config_path: Path) -> dict[str, Any]:
    """Parse a YAML config file into a mapping, raising on any problem."""
    if not config_path.exists():
        raise InvalidConfigurationError(f"Config file not found: {config_path}")
    try:
        config = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(f"YAML parse error in {config_path}: {e}") from e
    except OSError as e:
        raise InvalidConfigurationError(f"Cannot read {config_path}: {e}") from e

    if config is None:
        raise InvalidConfigurationError(f"Config file is empty: {config_path}")
    if not isinstance(config, dict):
        raise InvalidConfigurationError(
            f"Config file {config_path} is not a mapping (got {type(config).__name__})"
        )
    return config


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file with fallback to defaults.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to YAML config file. If None, uses configs/default.yaml.

    Returns
    -------
    dict
        Configuration dictionary. A missing, empty, malformed or non-mapping
        file gives the hardcoded defaults; this function never raises.

    Examples
    --------
    >>> cfg = load_config()
    >>> cfg["fluid"]["rho_kg_m3"]
    1000.0
    """
    config, _ = load_config_safe(config_path)
    return config


def load_config_safe(
    config_path: str | Path | None = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Load configuration, also returning why the defaults were used.

    Returns
    -------
    tuple[dict, list[str]]
        (config, messages). messages is empty when the file was used as is,
        otherwise it holds one message and config is get_default_config().
    """
    path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    try:
        return _read_config(path), []
    except InvalidConfigurationError as e:
        return get_default_config(), [f"{e}. Using defaults."]


def save_config(config: dict[str, Any], config_path: str | Path) -> None:
    """Write a configuration mapping to YAML, creating parent directories."""
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")


def spectral_options_from_config(config: dict[str, Any]) -> dict[str, Any]:
    """
    Keyword arguments for cross_spectrum from the "spectral" section.

    Missing keys fall back to the defaults in physics.constants.

    Examples
    --------
    >>> spectral_options_from_config({"spectral": {"conf_level": 0.95}})["conf_level"]
    0.95
    """
    from kitagawa.physics.constants import DEFAULT_CONF_LEVEL, WELCH_DIVISOR, WELCH_OVERLAP

    spectral = config.get("spectral") or {}
    return {
        "conf_level": float(spectral.get("conf_level", DEFAULT_CONF_LEVEL)),
        "welch_divisor": int(spectral.get("welch_divisor", WELCH_DIVISOR)),
        "welch_overlap": float(spectral.get("welch_overlap", WELCH_OVERLAP)),
    }
