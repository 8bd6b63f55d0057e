"""
Tapers and segmentation for cross-spectrum estimation.

Multitaper mode uses the sine tapers of Riedel & Sidorenko (1995):

    v_j[t] = sqrt(2 / (n + 1)) * sin(pi * j * (t + 1) / (n + 1)),   j = 1..k

which are exactly orthonormal and need no eigenvalue solve, so the estimate
is reproducible bit for bit. Welch mode uses a fixed segmentation policy
defined by WELCH_DIVISOR, WELCH_OVERLAP and WELCH_WINDOW.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from kitagawa.exceptions import InvalidConfigurationError
from kitagawa.physics.constants import (
    WELCH_DIVISOR,
    WELCH_MIN_SEGMENT,
    WELCH_OVERLAP,
    WELCH_WINDOW,
)
from kitagawa.validation.input_validators import (
    check_integer_count,
    check_overlap,
    check_taper_count,
)


def sine_tapers(n_samples: int, k: int) -> np.ndarray:
    """
    Generate k orthonormal sine tapers of length n_samples.

    Parameters
    ----------
    n_samples : int
        Series length.
    k : int
        Number of tapers, 1 <= k < n_samples / 2.

    Returns
    -------
    np.ndarray
        Taper bank with shape (k, n_samples). Rows are orthonormal.

    Raises
    ------
    InvalidConfigurationError
        If k is not a positive integer smaller than n_samples / 2.

    Examples
    --------
    >>> v = sine_tapers(64, 3)
    >>> np.allclose(v @ v.T, np.eye(3))
    True
    """
    n_samples = check_integer_count("n_samples", n_samples)
    k = check_taper_count(k, n_samples)

    j = np.arange(1, k + 1)[:, np.newaxis]
    t = np.arange(1, n_samples + 1)[np.newaxis, :]
    return np.sqrt(2.0 / (n_samples + 1)) * np.sin(np.pi * j * t / (n_samples + 1))


@dataclass(frozen=True)
class WelchSegmentation:
    """Segment layout for a Welch estimate."""

    nperseg: int
    noverlap: int
    n_segments: int
    window: str = WELCH_WINDOW


def welch_segmentation(
    n_samples: int,
    divisor: int = WELCH_DIVISOR,
    overlap: float = WELCH_OVERLAP,
) -> WelchSegmentation:
    """
    Resolve the Welch segment layout for a series of n_samples.

    nperseg = max(n_samples // divisor, WELCH_MIN_SEGMENT), capped at
    n_samples; noverlap = int(nperseg * overlap).

    Raises
    ------
    InvalidConfigurationError
        If the series is shorter than WELCH_MIN_SEGMENT, the divisor is not a
        positive integer, or overlap is not a number in [0, 1).

    Examples
    --------
    >>> welch_segmentation(4096)
    WelchSegmentation(nperseg=1024, noverlap=512, n_segments=7, window='hann')
    """
    if n_samples < WELCH_MIN_SEGMENT:
        raise InvalidConfigurationError(
            f"Welch estimate needs at least {WELCH_MIN_SEGMENT} samples, got {n_samples}"
        )
    divisor = check_integer_count("welch_divisor", divisor)
    overlap = check_overlap(overlap)

    nperseg = min(max(n_samples // divisor, WELCH_MIN_SEGMENT), n_samples)
    noverlap = int(nperseg * overlap)
    step = nperseg - noverlap
    n_segments = 1 + (n_samples - nperseg) // step

    return WelchSegmentation(nperseg=nperseg, noverlap=noverlap, n_segments=n_segments)
