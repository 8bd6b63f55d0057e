"""
Physics Module

Contains the closed-form Kitagawa et al. (2011) response model: the
dimensionless aquifer/well kernel, the model constants A1 and A2, and the
amplitude/phase of sealed-well pressure per unit volumetric strain.
"""

from .constants import *
from .kernel import (
    AlphaConstants,
    alpha_constants,
    check_realness,
    kelvin_functions,
    omega_constants,
)
from .transfer_function import (
    PhysicalParameters,
    ResponseSpectrum,
    compute_well_response,
    normalize_frequency,
    well_response,
)
from .geometry import sensing_volume
