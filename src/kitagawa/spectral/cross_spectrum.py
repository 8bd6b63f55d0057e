"""
Cross-Spectrum Estimation - Empirical Strain to Pressure Response

Estimates the transfer function between an input series x(t) (volumetric
strain) and an output series y(t) (fluid pressure) directly from data.

Pipeline:
1. Spectral matrix: auto-spectra S11, S22 and cross-spectrum S12, by
   multitaper averaging (k sine tapers) or, when k is None, Welch averaging
2. Derived spectra: coherence, admittance (gain) and phase per bin
3. Confidence: coherence significance threshold and admittance standard error

Conventions:
    S12 = <conj(X) * Y>        (same as scipy.signal.csd)
    coherence = |S12|^2 / (S11 * S22), clipped to [0, 1]
    admittance = sqrt(coherence * S22 / S11)
    phase = arg(S12)           (phase of y relative to x)

Spectra are one-sided densities: for dt in seconds and x in units U,
S11 is in U^2/Hz.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import signal

from kitagawa.physics.constants import DEFAULT_CONF_LEVEL, WELCH_DIVISOR, WELCH_OVERLAP
from kitagawa.spectral.confidence import (
    admittance_standard_error,
    coherence_threshold,
    significance_mask,
)
from kitagawa.spectral.tapers import sine_tapers, welch_segmentation
from kitagawa.validation.input_validators import (
    check_sampling_interval,
    check_taper_count,
    check_time_series_pair,
)


@dataclass(frozen=True)
class SpectralMatrix:
    """Per-bin auto- and cross-spectra of an input/output pair."""

    frequency: np.ndarray  # Hz, 0 to Nyquist
    S11: np.ndarray  # input auto-spectrum
    S12: np.ndarray  # cross-spectrum (complex)
    S22: np.ndarray  # output auto-spectrum
    n_averages: int  # tapers or segments averaged
    method: str  # "multitaper" or "welch"


@dataclass(frozen=True)
class CrossSpectrum:
    """Empirical response spectrum with confidence information.

    Attributes
    ----------
    frequency : np.ndarray
        Frequency in Hz, 0 to Nyquist.
    period : np.ndarray
        1 / frequency in seconds (inf at 0 Hz).
    coherence : np.ndarray
        Squared coherence in [0, 1].
    admittance : np.ndarray
        Gain |output| / |input|, >= 0.
    admittance_stderr : np.ndarray
        Standard error of the admittance.
    phase : np.ndarray
        Phase of output relative to input, radians.
    significant : np.ndarray
        True where coherence >= coherence_threshold.
    matrix : SpectralMatrix
        The underlying spectral matrix.
    coherence_threshold : float
        Significance threshold at conf_level.
    conf_level : float
        Confidence level of the threshold.
    k : int
        Tapers or segments used for the confidence estimate.
    """

    frequency: np.ndarray
    period: np.ndarray
    coherence: np.ndarray
    admittance: np.ndarray
    admittance_stderr: np.ndarray
    phase: np.ndarray
    significant: np.ndarray
    matrix: SpectralMatrix
    coherence_threshold: float
    conf_level: float
    k: int

    COLUMNS = ("Frequency", "Period", "Coherence", "Admittance", "AdmittanceStdErr", "Phase")

    def as_matrix(self) -> np.ndarray:
        """Return the (n_bins, 6) table in COLUMNS order."""
        return np.column_stack([
            self.frequency,
            self.period,
            self.coherence,
            self.admittance,
            self.admittance_stderr,
            self.phase,
        ])

    def significant_phase(self, unwrap: bool = False) -> np.ndarray:
        """
        Phase with non-significant bins suppressed.

        Parameters
        ----------
        unwrap : bool, optional
            Unwrap the phase across the significant bins only.

        Returns
        -------
        np.ndarray
            Phase in radians, NaN where the coherence is below threshold.
        """
        phase = np.full(self.phase.shape, np.nan)
        if unwrap:
            phase[self.significant] = np.unwrap(self.phase[self.significant])
        else:
            phase[self.significant] = self.phase[self.significant]
        return phase

    def __len__(self) -> int:
        return self.frequency.size


def _multitaper_matrix(
    x: np.ndarray,
    y: np.ndarray,
    k: int,
    dt: float,
) -> SpectralMatrix:
    n = x.size
    tapers = sine_tapers(n, k)  # (k, n)

    X = np.fft.rfft(tapers * x[np.newaxis, :], axis=1)  # (k, n_bins)
    Y = np.fft.rfft(tapers * y[np.newaxis, :], axis=1)

    # One-sided density: double every bin except DC and (even n) Nyquist
    weight = np.full(X.shape[1], 2.0)
    weight[0] = 1.0
    if n % 2 == 0:
        weight[-1] = 1.0
    weight *= dt

    S11 = weight * np.mean(np.abs(X) ** 2, axis=0)
    S22 = weight * np.mean(np.abs(Y) ** 2, axis=0)
    S12 = weight * np.mean(np.conj(X) * Y, axis=0)

    return SpectralMatrix(
        frequency=np.fft.rfftfreq(n, d=dt),
        S11=S11,
        S12=S12,
        S22=S22,
        n_averages=k,
        method="multitaper",
    )


def _welch_matrix(
    x: np.ndarray,
    y: np.ndarray,
    dt: float,
    divisor: int,
    overlap: float,
) -> SpectralMatrix:
    seg = welch_segmentation(x.size, divisor=divisor, overlap=overlap)
    kwargs = dict(
        fs=1.0 / dt,
        window=seg.window,
        nperseg=seg.nperseg,
        noverlap=seg.noverlap,
        detrend="constant",
        scaling="density",
    )

    f, S11 = signal.welch(x, **kwargs)
    _, S22 = signal.welch(y, **kwargs)
    # scipy.signal.csd(x, y) averages conj(X) * Y
    _, S12 = signal.csd(x, y, **kwargs)

    return SpectralMatrix(
        frequency=f,
        S11=S11,
        S12=S12,
        S22=S22,
        n_averages=seg.n_segments,
        method="welch",
    )


def estimate_spectral_matrix(
    x: np.ndarray,
    y: np.ndarray,
    k: int | None = None,
    sampling_interval: float = 1.0,
    welch_divisor: int = WELCH_DIVISOR,
    welch_overlap: float = WELCH_OVERLAP,
    verbose: bool = False,
) -> SpectralMatrix:
    """
    Estimate the spectral matrix (S11, S12, S22) of an input/output pair.

    Parameters
    ----------
    x : np.ndarray
        Input series (strain), shape (n_samples,).
    y : np.ndarray
        Output series (pressure), shape (n_samples,).
    k : int, optional
        Number of sine tapers, 1 <= k < n_samples / 2. If None, a Welch
        estimate is used instead.
    sampling_interval : float, optional
        Sample spacing in seconds. Default 1.0.
    welch_divisor : int, optional
        Welch segment length is n_samples // welch_divisor. Default 4.
    welch_overlap : float, optional
        Fractional Welch segment overlap in [0, 1). Default 0.5.
    verbose : bool, optional
        Print diagnostic information.

    Returns
    -------
    SpectralMatrix
        One (S11, S12, S22) triple per bin from 0 Hz to Nyquist.

    Raises
    ------
    InvalidConfigurationError
        If the series are mismatched, non-finite or too short for the
        requested estimator, or k is invalid.
    """
    x, y = check_time_series_pair(x, y)
    dt = check_sampling_interval(sampling_interval)
    n = x.size

    # Remove the mean so the DC bin does not leak into low frequencies
    x = x - np.mean(x)
    y = y - np.mean(y)

    if k is not None:
        k = check_taper_count(k, n)
        if verbose:
            print(f"Multitaper cross-spectrum: n={n}, k={k} sine tapers, dt={dt:g} s")
        matrix = _multitaper_matrix(x, y, k, dt)
    else:
        matrix = _welch_matrix(x, y, dt, welch_divisor, welch_overlap)
        if verbose:
            seg = welch_segmentation(n, divisor=welch_divisor, overlap=welch_overlap)
            print(
                f"Welch cross-spectrum: n={n}, nperseg={seg.nperseg}, "
                f"noverlap={seg.noverlap}, {seg.n_segments} segments, dt={dt:g} s"
            )

    if verbose:
        print(f"  {matrix.frequency.size} bins, 0 to {matrix.frequency[-1]:g} Hz")

    return matrix


def derive_spectra(matrix: SpectralMatrix) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute coherence, admittance and phase from a spectral matrix.

    Parameters
    ----------
    matrix : SpectralMatrix
        Output of estimate_spectral_matrix.

    Returns
    -------
    coherence : np.ndarray
        |S12|^2 / (S11 * S22), clipped to [0, 1]; 0 where S11 * S22 == 0.
    admittance : np.ndarray
        sqrt(coherence * S22 / S11); 0 where S11 == 0.
    phase : np.ndarray
        arg(S12) in radians.
    """
    S11 = np.asarray(matrix.S11, dtype=np.float64)
    S22 = np.asarray(matrix.S22, dtype=np.float64)
    S12 = np.asarray(matrix.S12, dtype=np.complex128)

    power = S11 * S22
    cross = np.abs(S12) ** 2

    with np.errstate(divide="ignore", invalid="ignore"):
        coherence = np.where(power > 0, cross / power, 0.0)
        coherence = np.clip(coherence, 0.0, 1.0)
        admittance = np.where(S11 > 0, np.sqrt(coherence * S22 / S11), 0.0)

    phase = np.angle(S12)

    return coherence, admittance, phase


def cross_spectrum(
    x: np.ndarray,
    y: np.ndarray,
    k: int | None = None,
    sampling_interval: float = 1.0,
    conf_level: float = DEFAULT_CONF_LEVEL,
    welch_divisor: int = WELCH_DIVISOR,
    welch_overlap: float = WELCH_OVERLAP,
    verbose: bool = False,
) -> CrossSpectrum:
    """
    Empirical response spectrum of output y to input x.

    Parameters
    ----------
    x : np.ndarray
        Input series (strain), shape (n_samples,).
    y : np.ndarray
        Output series (pressure), shape (n_samples,).
    k : int, optional
        Number of sine tapers. If None, use the Welch estimator; the
        confidence estimate then uses the number of averaged segments.
    sampling_interval : float, optional
        Sample spacing in seconds. Default 1.0.
    conf_level : float, optional
        Confidence level for the coherence threshold. Default 0.995.
    welch_divisor, welch_overlap : optional
        Welch segmentation policy, see estimate_spectral_matrix.
    verbose : bool, optional
        Print diagnostic information.

    Returns
    -------
    CrossSpectrum
        Frequency, period, coherence, admittance, admittance standard error
        and phase, one row per bin from 0 Hz to Nyquist.

    Examples
    --------
    >>> np.random.seed(42)
    >>> x = np.random.randn(1024)
    >>> csp = cross_spectrum(x, 2.0 * x, k=5)
    >>> bool(np.allclose(csp.admittance[1:], 2.0))
    True
    """
    matrix = estimate_spectral_matrix(
        x,
        y,
        k=k,
        sampling_interval=sampling_interval,
        welch_divisor=welch_divisor,
        welch_overlap=welch_overlap,
        verbose=verbose,
    )
    coherence, admittance, phase = derive_spectra(matrix)

    threshold = coherence_threshold(matrix.n_averages, conf_level)
    stderr = admittance_standard_error(coherence, matrix.n_averages)
    significant = significance_mask(coherence, threshold)

    with np.errstate(divide="ignore"):
        period = np.where(matrix.frequency > 0, 1.0 / matrix.frequency, np.inf)

    if verbose:
        n_sig = int(np.count_nonzero(significant))
        print(
            f"  Coherence threshold {threshold:.4f} at {conf_level:g}: "
            f"{n_sig}/{significant.size} bins significant"
        )

    return CrossSpectrum(
        frequency=matrix.frequency,
        period=period,
        coherence=coherence,
        admittance=admittance,
        admittance_stderr=stderr,
        phase=phase,
        significant=significant,
        matrix=matrix,
        coherence_threshold=threshold,
        conf_level=conf_level,
        k=matrix.n_averages,
    )
