"""
kitagawa - Borehole Strain to Pore-Pressure Response

This package contains:
- Physics: the Kitagawa et al. (2011) closed-form response of water
  pressure in a sealed well to volumetric strain
- Spectral: empirical cross-spectra (multitaper or Welch) with coherence
  significance and admittance standard errors
- Validation: fail-fast input checks and YAML config validation

Usage:
    # After installing with: pip install -e .
    from kitagawa.physics import well_response, sensing_volume
    from kitagawa.spectral import cross_spectrum
    from kitagawa.config import load_config
"""

__version__ = "0.1.0"

# physics must be imported before validation (validation reads physics.constants)
from .physics import (
    PhysicalParameters,
    ResponseSpectrum,
    compute_well_response,
    sensing_volume,
    well_response,
)
from .spectral import CrossSpectrum, SpectralMatrix, cross_spectrum
from .exceptions import (
    DomainError,
    InvalidConfigurationError,
    KitagawaError,
    NumericalInconsistencyError,
    NumericalInconsistencyWarning,
)

__all__ = [
    "physics",
    "spectral",
    "validation",
    "config",
    "PhysicalParameters",
    "ResponseSpectrum",
    "compute_well_response",
    "sensing_volume",
    "well_response",
    "CrossSpectrum",
    "SpectralMatrix",
    "cross_spectrum",
    "DomainError",
    "InvalidConfigurationError",
    "KitagawaError",
    "NumericalInconsistencyError",
    "NumericalInconsistencyWarning",
]
