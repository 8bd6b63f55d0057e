"""
Confidence estimates for coherence and admittance.

For an estimate averaged over k tapers (or segments), the statistic
2k * c / (1 - c) is taken to follow an F(2, 4k) distribution. Solving for the
coherence at the requested quantile gives the significance threshold

    c = f / (2k + f),    f = F^-1(conf_level; 2, 4k)

Bins with coherence below c are not statistically significant and their
phase and admittance must not be presented as reliable.
"""

from __future__ import annotations

import numpy as np
from scipy import stats

from kitagawa.physics.constants import DEFAULT_CONF_LEVEL
from kitagawa.validation.input_validators import check_conf_level, check_integer_count


def coherence_threshold(k: int, conf_level: float = DEFAULT_CONF_LEVEL) -> float:
    """
    Coherence above which an estimate is significant at conf_level.

    Parameters
    ----------
    k : int
        Number of tapers or averaged segments, >= 1.
    conf_level : float, optional
        Confidence level in (0, 1). Default 0.995.

    Returns
    -------
    float
        Threshold in (0, 1). Strictly decreasing in k.

    Examples
    --------
    >>> coherence_threshold(10) > coherence_threshold(20)
    True
    """
    k = check_integer_count("k", k)
    conf_level = check_conf_level(conf_level)

    f_crit = stats.f.ppf(conf_level, 2, 4 * k)
    return float(f_crit / (2 * k + f_crit))


def admittance_standard_error(coherence: np.ndarray, k: int) -> np.ndarray:
    """
    Standard error of the admittance estimate, sqrt((1 - coherence) / k).

    Parameters
    ----------
    coherence : np.ndarray
        Squared coherence per bin, in [0, 1].
    k : int
        Number of tapers or averaged segments, >= 1.

    Returns
    -------
    np.ndarray
        Standard error per bin.
    """
    k = check_integer_count("k", k)
    coherence = np.clip(np.asarray(coherence, dtype=np.float64), 0.0, 1.0)
    return np.sqrt((1.0 - coherence) / k)


def significance_mask(coherence: np.ndarray, threshold: float) -> np.ndarray:
    """Boolean mask of bins whose coherence reaches the threshold."""
    return np.asarray(coherence) >= threshold
