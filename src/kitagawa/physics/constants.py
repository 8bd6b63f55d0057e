"""
Physical Constants and Defaults for Borehole Response Calculations

All constants include units in their names where they carry units, and
reference literature sources where they come from one.
"""

from __future__ import annotations

import numpy as np

# Fluid Properties (fresh water at ~20 C)
WATER_DENSITY_KG_M3: float = 1000.0
WATER_BULK_MODULUS_PA: float = 2.2e9
GRAVITY_M_S2: float = 9.81

# Strain Amplification - Kitagawa et al. (2011), eqs. 20-21
# Avs: E_kk,obs / E_kk (observed to true volumetric strain)
# Aw:  well volume change per unit E_kk
DEFAULT_AVS: float = 1.0
DEFAULT_AW: float = 1.0

# Frequency Units
# Multiplier that converts each unit to radians per second
FREQ_UNIT_MULTIPLIERS: dict[str, float] = {
    "rad_per_sec": 1.0,
    "Hz": 2.0 * np.pi,
}
DEFAULT_FREQ_UNITS: str = "rad_per_sec"

# Kernel realness tolerance (relative)
REALNESS_RTOL: float = 1e-9

# =============================================================================
# Cross-Spectrum Estimation
# =============================================================================

# Coherence significance level
DEFAULT_CONF_LEVEL: float = 0.995

# Welch segmentation policy (used when no taper count is given)
# nperseg = max(n // WELCH_DIVISOR, WELCH_MIN_SEGMENT), capped at n
WELCH_DIVISOR: int = 4
WELCH_OVERLAP: float = 0.5
WELCH_WINDOW: str = "hann"
WELCH_MIN_SEGMENT: int = 8

# =============================================================================
# Reference Well - PBO borehole B084
# =============================================================================

# Geometry of the water-sensing interval
B084_CASING_RADIUS_M: float = 0.0508  # 2 in
B084_CASING_LENGTH_M: float = 146.9  # 482 ft grouted
B084_SCREEN_RADIUS_M: float = 3 * B084_CASING_RADIUS_M  # 6 in
B084_SCREEN_LENGTH_M: float = 9.14  # 30 ft screened

# Formation properties
B084_TRANSMISSIVITY_M2_S: float = 1e-6
B084_STORATIVITY: float = 1e-5
B084_UNDRAINED_BULK_MODULUS_PA: float = 40e9
B084_SKEMPTON_B: float = 0.2
