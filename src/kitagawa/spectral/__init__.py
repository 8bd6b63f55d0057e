"""
Spectral Module

Contains the empirical cross-spectrum estimator (multitaper or Welch),
coherence/admittance/phase derivation, and confidence estimates.
"""

from .tapers import (
    WelchSegmentation,
    sine_tapers,
    welch_segmentation,
)
from .confidence import (
    admittance_standard_error,
    coherence_threshold,
    significance_mask,
)
from .cross_spectrum import (
    CrossSpectrum,
    SpectralMatrix,
    cross_spectrum,
    derive_spectra,
    estimate_spectral_matrix,
)

__all__ = [
    "WelchSegmentation",
    "sine_tapers",
    "welch_segmentation",
    "admittance_standard_error",
    "coherence_threshold",
    "significance_mask",
    "CrossSpectrum",
    "SpectralMatrix",
    "cross_spectrum",
    "derive_spectra",
    "estimate_spectral_matrix",
]
