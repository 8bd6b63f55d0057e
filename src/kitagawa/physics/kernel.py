"""
Dimensionless Kernel - Oscillatory Flow Between Aquifer and Well

Implements the frequency-dependent coupling between a screened well and a
confined aquifer used by Kitagawa et al. (2011), which builds on the
oscillatory-flow solution of Cooper et al. (1965) and Hsieh et al. (1987).

Mathematical Foundation
-----------------------
Periodic radial flow toward a well of screen radius Rs in an aquifer of
transmissivity T and storativity S depends on one dimensionless number:

    alpha = Rs * sqrt(omega * S / T)

The aquifer head around the well decays as K_0(r * sqrt(i * omega * S / T)),
so the well/aquifer coupling is expressed through Kelvin functions of alpha:

    ker_nu(alpha) + i kei_nu(alpha) = exp(-i nu pi / 2) * K_nu(alpha * exp(i pi / 4))

From these, with D = sqrt(2) * alpha * (ker1^2 + kei1^2):

    Phi = -[ker1 (ker0 - kei0) + kei1 (ker0 + kei0)] / D
    Psi = -[ker1 (ker0 + kei0) - kei1 (ker0 - kei0)] / D

and the model constants are A1 = |Phi|, A2 = |Psi|.

Numerical Notes
---------------
The Kelvin functions are assembled from K_nu(z) and K_nu(conj(z)) using the
reflection K_nu(conj(z)) = conj(K_nu(z)), so Phi and Psi come out as complex
numbers whose imaginary part is a pure rounding residual. That residual is
checked against REALNESS_RTOL before the real part is used.

All Kelvin values share the real scale factor exp(alpha / sqrt(2)) taken from
scipy.special.kve. Phi and Psi are ratios of quadratic forms in these values,
so the factor cancels and nothing underflows at large alpha.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
from scipy.special import kve

from kitagawa.exceptions import NumericalInconsistencyError, NumericalInconsistencyWarning
from kitagawa.physics.constants import REALNESS_RTOL
from kitagawa.validation.input_validators import (
    check_physical_parameters,
    check_positive_frequencies,
)

_SQRT2 = np.sqrt(2.0)


def omega_constants(
    omega: np.ndarray,
    S: float,
    T: float,
    Rs: float,
) -> np.ndarray:
    """
    Compute the dimensionless frequency alpha (Kitagawa eq. 12).

    Parameters
    ----------
    omega : np.ndarray
        Angular frequencies in rad/s, all > 0.
    S : float
        Storativity (dimensionless).
    T : float
        Transmissivity in m^2/s.
    Rs : float
        Radius of the screened section in m.

    Returns
    -------
    np.ndarray
        alpha = Rs * sqrt(omega * S / T), same shape as omega.

    Raises
    ------
    DomainError
        If any frequency or parameter is non-positive.

    Examples
    --------
    >>> omega_constants(np.array([1.0, 4.0]), S=1.0, T=1.0, Rs=1.0)
    array([1., 2.])
    """
    omega = check_positive_frequencies(omega)
    p = check_physical_parameters(S=S, T=T, Rs=Rs)
    return p["Rs"] * np.sqrt(omega * p["S"] / p["T"])


def kelvin_functions(alpha: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Scaled Kelvin functions ker0, kei0, ker1, kei1 of a positive argument.

    Every value is multiplied by exp(alpha / sqrt(2)). The arrays are complex
    with an imaginary part that vanishes up to rounding.

    Parameters
    ----------
    alpha : np.ndarray
        Positive real arguments.

    Returns
    -------
    ker0, kei0, ker1, kei1 : np.ndarray
        Complex arrays with the shape of alpha.
    """
    alpha = np.asarray(alpha, dtype=np.float64)

    z = alpha * np.exp(0.25j * np.pi)
    zc = np.conj(z)

    # kve(nu, z) = K_nu(z) * exp(z); strip the phase so both arguments
    # carry the same real factor exp(Re z)
    k0 = kve(0, z) * np.exp(-1j * z.imag)
    k0c = kve(0, zc) * np.exp(-1j * zc.imag)
    k1 = kve(1, z) * np.exp(-1j * z.imag)
    k1c = kve(1, zc) * np.exp(-1j * zc.imag)

    # ker0 + i kei0 = K0(z)
    ker0 = 0.5 * (k0 + k0c)
    kei0 = -0.5j * (k0 - k0c)
    # ker1 + i kei1 = -i K1(z), so ker1 = Im K1(z), kei1 = -Re K1(z)
    ker1 = -0.5j * (k1 - k1c)
    kei1 = -0.5 * (k1 + k1c)

    return ker0, kei0, ker1, kei1


def check_realness(
    values: np.ndarray,
    name: str,
    rtol: float = REALNESS_RTOL,
    strict: bool = False,
) -> np.ndarray:
    """
    Verify that a complex quantity is real to within a relative tolerance.

    Parameters
    ----------
    values : np.ndarray
        Complex values that should have no imaginary part.
    name : str
        Name used in the diagnostic message.
    rtol : float
        Allowed |imag| relative to |real|.
    strict : bool
        Raise NumericalInconsistencyError instead of warning.

    Returns
    -------
    np.ndarray
        The real part of ``values``.
    """
    values = np.asarray(values)
    real = np.real(values)
    residual = np.abs(np.imag(values))

    bad = residual > rtol * np.abs(real)
    if np.any(bad):
        ratio = np.where(bad, residual / np.maximum(np.abs(real), np.finfo(np.float64).tiny), 0.0)
        worst = int(np.argmax(ratio))
        message = (
            f"{name} has a non-negligible imaginary part in {int(np.count_nonzero(bad))} "
            f"of {values.size} bins (worst index {worst}: {values.flat[worst]!r}, "
            f"relative residual {ratio.flat[worst]:.3g} > {rtol:g})"
        )
        if strict:
            raise NumericalInconsistencyError(message)
        warnings.warn(message, NumericalInconsistencyWarning, stacklevel=3)

    return real


@dataclass(frozen=True)
class AlphaConstants:
    """Intermediate kernel table, one row per frequency.

    Attributes
    ----------
    alpha : np.ndarray
        Dimensionless frequency.
    ker0, kei0, ker1, kei1 : np.ndarray
        Kelvin functions, scaled by exp(alpha / sqrt(2)), complex.
    phi, psi : np.ndarray
        The Phi and Psi quantities, complex with vanishing imaginary part.
    """

    alpha: np.ndarray
    ker0: np.ndarray
    kei0: np.ndarray
    ker1: np.ndarray
    kei1: np.ndarray
    phi: np.ndarray
    psi: np.ndarray

    @property
    def A1(self) -> np.ndarray:
        """Modulus of Phi."""
        return np.abs(np.real(self.phi))

    @property
    def A2(self) -> np.ndarray:
        """Modulus of Psi."""
        return np.abs(np.real(self.psi))

    def as_matrix(self) -> np.ndarray:
        """Return the (n, 7) complex table (alpha, ker0, kei0, ker1, kei1, Phi, Psi)."""
        return np.column_stack([
            self.alpha.astype(np.complex128),
            self.ker0,
            self.kei0,
            self.ker1,
            self.kei1,
            self.phi,
            self.psi,
        ])

    def __len__(self) -> int:
        return self.alpha.size


def alpha_constants(alpha: np.ndarray, strict: bool = False) -> AlphaConstants:
    """
    Compute Phi, Psi and the model constants A1, A2 from alpha.

    Parameters
    ----------
    alpha : np.ndarray
        Dimensionless frequencies from omega_constants, all > 0.
    strict : bool, optional
        If True, a realness violation raises NumericalInconsistencyError.
        Default False emits NumericalInconsistencyWarning instead.

    Returns
    -------
    AlphaConstants
        The intermediate table. A1 and A2 are available as properties.

    Raises
    ------
    DomainError
        If any alpha is zero, negative or non-finite.

    Notes
    -----
    As alpha -> 0, Phi ~ -ln(alpha / 2) - gamma and Psi -> -pi / 4.

    Examples
    --------
    >>> consts = alpha_constants(np.array([1e-4, 1.0, 10.0]))
    >>> bool(np.all(consts.A1 > 0))
    True
    """
    alpha = check_positive_frequencies(alpha, name="alpha")

    ker0, kei0, ker1, kei1 = kelvin_functions(alpha)

    denom = _SQRT2 * alpha * (ker1 * ker1 + kei1 * kei1)
    phi = -(ker1 * (ker0 - kei0) + kei1 * (ker0 + kei0)) / denom
    psi = -(ker1 * (ker0 + kei0) - kei1 * (ker0 - kei0)) / denom

    check_realness(phi, "Phi", strict=strict)
    check_realness(psi, "Psi", strict=strict)

    return AlphaConstants(
        alpha=alpha,
        ker0=ker0,
        kei0=kei0,
        ker1=ker1,
        kei1=kei1,
        phi=phi,
        psi=psi,
    )
