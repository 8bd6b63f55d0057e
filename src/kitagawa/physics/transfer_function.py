"""
Transfer Function Module - Pressure Response of a Sealed Well to Strain

Implements the closed-form frequency response of water pressure in a sealed
borehole to volumetric strain (Kitagawa et al., 2011, JGR 116, B08301).

Mathematical Foundation
-----------------------
With A1, A2 from the dimensionless kernel (see kernel.py) and

    TVFRG = 2 * pi * T / (omega * Vw * rho * g)

the amplitude (Kitagawa eq. 20) is

    A(omega) = Kf * Aw / Avs / (rho * g) * sqrt(N / D)
    N = (Ku * B / Aw * TVFRG - A2)^2 + A1^2
    D = (Kf * TVFRG - A2)^2 + A1^2

and the phase (Kitagawa eq. 21) is

    Phi(omega) = atan2(-Y, -X)
    Y = (Kf - Ku * B / Aw) * TVFRG * A1
    X = (Ku * B / Aw * TVFRG - A2) * (Kf * TVFRG - A2) + A1^2

Limits: at low frequency the well follows the aquifer, A -> B * Ku / (Avs * rho * g);
at high frequency it is undrained, A -> Kf * Aw / (Avs * rho * g).

Unit Convention
---------------
- Frequency: rad/s internally; Hz accepted at the API boundary
- All physical parameters: SI, never converted
- Amplitude: meters of water head per unit observed strain
- Phase: radians in (-pi, pi]
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from .constants import (
    DEFAULT_AVS,
    DEFAULT_AW,
    FREQ_UNIT_MULTIPLIERS,
    GRAVITY_M_S2,
    WATER_BULK_MODULUS_PA,
    WATER_DENSITY_KG_M3,
)
from .kernel import alpha_constants, omega_constants
from kitagawa.exceptions import InvalidConfigurationError
from kitagawa.validation.input_validators import (
    check_freq_units,
    check_physical_parameters,
    check_positive_frequencies,
)


@dataclass(frozen=True)
class PhysicalParameters:
    """Aquifer, well and fluid properties for the Kitagawa model.

    Attributes
    ----------
    T : float
        Effective aquifer transmissivity, m^2/s.
    S : float
        Storativity, dimensionless.
    Vw : float
        Well (sensing) volume, m^3.
    Rs : float
        Radius of the screened section, m.
    Ku : float
        Undrained bulk modulus, Pa.
    B : float
        Skempton's coefficient, dimensionless.
    Avs : float
        Amplification of observed volumetric strain, E_kk,obs / E_kk.
    Aw : float
        Amplification of well volume change for E_kk.
    rho : float
        Fluid density, kg/m^3.
    Kf : float
        Fluid bulk modulus, Pa.
    grav : float
        Local gravitational acceleration, m/s^2.
    """

    T: float
    S: float
    Vw: float
    Rs: float
    Ku: float
    B: float
    Avs: float = DEFAULT_AVS
    Aw: float = DEFAULT_AW
    rho: float = WATER_DENSITY_KG_M3
    Kf: float = WATER_BULK_MODULUS_PA
    grav: float = GRAVITY_M_S2

    def __post_init__(self) -> None:
        check_physical_parameters(**asdict(self))

    def as_kwargs(self) -> dict[str, float]:
        """Keyword arguments accepted by well_response."""
        return asdict(self)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "PhysicalParameters":
        """
        Build parameters from a loaded configuration.

        Reads the "well", "fluid" and "amplification" sections. The six
        well/formation values are required.

        Raises
        ------
        InvalidConfigurationError
            If a section is not a mapping, or the "well" section or one of
            its required keys is missing.
        """
        sections = {}
        for name in ("well", "fluid", "amplification"):
            section = config.get(name)
            if section is None:
                section = {}
            if not isinstance(section, dict):
                raise InvalidConfigurationError(
                    f"config section '{name}' must be a mapping, got {type(section).__name__}"
                )
            sections[name] = section
        well, fluid, amp = sections["well"], sections["fluid"], sections["amplification"]

        required = {
            "T": "transmissivity_m2_s",
            "S": "storativity",
            "Vw": "volume_m3",
            "Rs": "screen_radius_m",
            "Ku": "undrained_bulk_modulus_pa",
            "B": "skempton_b",
        }
        missing = [key for key in required.values() if key not in well]
        if missing:
            raise InvalidConfigurationError(
                f"config section 'well' is missing required keys: {missing}"
            )

        return cls(
            **{name: well[key] for name, key in required.items()},
            Avs=amp.get("avs", DEFAULT_AVS),
            Aw=amp.get("aw", DEFAULT_AW),
            rho=fluid.get("rho_kg_m3", WATER_DENSITY_KG_M3),
            Kf=fluid.get("kf_pa", WATER_BULK_MODULUS_PA),
            grav=fluid.get("grav_m_s2", GRAVITY_M_S2),
        )


@dataclass(frozen=True)
class ResponseSpectrum:
    """Amplitude and phase of the well response, one row per frequency."""

    omega: np.ndarray  # rad/s, input order preserved
    amplitude: np.ndarray  # >= 0
    phase: np.ndarray  # radians, (-pi, pi]

    def as_matrix(self) -> np.ndarray:
        """Return the (n, 3) table with columns omega, amplitude, phase."""
        return np.column_stack([self.omega, self.amplitude, self.phase])

    def __len__(self) -> int:
        return self.omega.size


def normalize_frequency(
    omega: np.ndarray,
    freq_units: str | None = "rad_per_sec",
) -> np.ndarray:
    """
    Convert a frequency axis to radians per second.

    Parameters
    ----------
    omega : array_like
        Frequencies in ``freq_units``.
    freq_units : {"rad_per_sec", "Hz"} or None
        Units of ``omega``. None means "rad_per_sec".

    Returns
    -------
    np.ndarray
        Frequencies in rad/s, same length and order.

    Raises
    ------
    InvalidConfigurationError
        If ``freq_units`` is not a supported flag.

    Examples
    --------
    >>> normalize_frequency([0.5, 1.0], "Hz") / np.pi
    array([1., 2.])
    """
    freq_units = check_freq_units(freq_units)
    omega = np.atleast_1d(np.asarray(omega, dtype=np.float64))
    return FREQ_UNIT_MULTIPLIERS[freq_units] * omega


def well_response(
    omega: np.ndarray,
    T: float,
    S: float,
    Vw: float,
    Rs: float,
    Ku: float,
    B: float,
    Avs: float = DEFAULT_AVS,
    Aw: float = DEFAULT_AW,
    rho: float = WATER_DENSITY_KG_M3,
    Kf: float = WATER_BULK_MODULUS_PA,
    grav: float = GRAVITY_M_S2,
    freq_units: str | None = "rad_per_sec",
    strict: bool = False,
) -> ResponseSpectrum:
    """
    Compute the pressure/strain response spectrum of a sealed well.

    Parameters
    ----------
    omega : array_like
        Forcing frequencies, all > 0, in ``freq_units``.
    T, S, Vw, Rs, Ku, B : float
        Transmissivity (m^2/s), storativity, well volume (m^3), screen radius
        (m), undrained bulk modulus (Pa) and Skempton's coefficient.
    Avs, Aw : float, optional
        Strain amplification factors. Default 1.
    rho, Kf, grav : float, optional
        Fluid density (kg/m^3), fluid bulk modulus (Pa) and gravity (m/s^2).
    freq_units : {"rad_per_sec", "Hz"}, optional
        Units of ``omega``. Default "rad_per_sec".
    strict : bool, optional
        Raise instead of warn when the kernel realness check fails.

    Returns
    -------
    ResponseSpectrum
        omega in rad/s, amplitude and phase, in input order.

    Raises
    ------
    InvalidConfigurationError
        If ``freq_units`` is not supported.
    DomainError
        If any frequency is zero, negative or non-finite, or any physical
        parameter is not positive. No partial result is returned.

    Examples
    --------
    >>> rsp = well_response(np.arange(1, 11), T=1, S=1, Vw=1, Rs=1, Ku=1, B=1)
    >>> len(rsp)
    10
    >>> bool(np.all(rsp.amplitude > 0))
    True
    """
    omega = check_positive_frequencies(normalize_frequency(omega, freq_units))
    p = check_physical_parameters(
        T=T, S=S, Vw=Vw, Rs=Rs, Ku=Ku, B=B,
        Avs=Avs, Aw=Aw, rho=rho, Kf=Kf, grav=grav,
    )

    alpha = omega_constants(omega, S=p["S"], T=p["T"], Rs=p["Rs"])
    consts = alpha_constants(alpha, strict=strict)
    A1 = consts.A1
    A2 = consts.A2

    rhog = p["rho"] * p["grav"]
    tvfrg = 2.0 * np.pi * p["T"] / (omega * p["Vw"] * rhog)
    kub = p["Ku"] * p["B"] / p["Aw"]
    kf = p["Kf"]

    num_term = kub * tvfrg - A2
    den_term = kf * tvfrg - A2
    A1_sq = A1 * A1

    # Amplitude, Kitagawa eq. 20
    r_num = num_term * num_term + A1_sq
    r_den = den_term * den_term + A1_sq
    amplitude = kf * p["Aw"] / p["Avs"] / rhog * np.sqrt(r_num / r_den)

    # Phase, Kitagawa eq. 21
    y = (kf - kub) * tvfrg * A1
    x = num_term * den_term + A1_sq
    phase = np.arctan2(-y, -x)
    # atan2 returns [-pi, pi]; fold -pi onto the principal value pi
    phase = np.where(phase <= -np.pi, np.pi, phase)

    return ResponseSpectrum(omega=omega, amplitude=amplitude, phase=phase)


def compute_well_response(
    omega: np.ndarray,
    params: PhysicalParameters,
    freq_units: str | None = "rad_per_sec",
    strict: bool = False,
) -> ResponseSpectrum:
    """
    Compute the well response for a PhysicalParameters record.

    See well_response for the full documentation.
    """
    return well_response(omega, **params.as_kwargs(), freq_units=freq_units, strict=strict)
