"""
Spectral Module Unit Tests

Validates the sine tapers, Welch segmentation, cross-spectrum estimator and
the coherence/admittance confidence estimates on synthetic series with a
known transfer function.
"""

from __future__ import annotations

import numpy as np
import pytest

from kitagawa.exceptions import InvalidConfigurationError
from kitagawa.spectral import (
    CrossSpectrum,
    WelchSegmentation,
    admittance_standard_error,
    coherence_threshold,
    cross_spectrum,
    derive_spectra,
    estimate_spectral_matrix,
    sine_tapers,
    welch_segmentation,
)
from kitagawa.spectral.cross_spectrum import SpectralMatrix


@pytest.fixture
def white_noise() -> np.ndarray:
    """4096 samples of unit-variance white noise."""
    np.random.seed(42)
    return np.random.randn(4096)


class TestSineTapers:
    """Test the sine taper bank."""

    def test_shape(self) -> None:
        """Taper bank has one row per taper."""
        assert sine_tapers(128, 5).shape == (5, 128)

    def test_orthonormal(self) -> None:
        """Rows are orthonormal."""
        v = sine_tapers(256, 8)

        np.testing.assert_allclose(v @ v.T, np.eye(8), atol=1e-12)

    def test_first_taper_symmetric_and_positive(self) -> None:
        """The first taper is a positive half-sine, symmetric about the centre."""
        v = sine_tapers(101, 1)[0]

        assert np.all(v > 0)
        np.testing.assert_allclose(v, v[::-1], atol=1e-14)

    @pytest.mark.parametrize("k", [0, -1, 64, 100, 2.5, True])
    def test_invalid_count_rejected(self, k) -> None:
        """k must be an integer with 1 <= k < n / 2."""
        with pytest.raises(InvalidConfigurationError):
            sine_tapers(128, k)


class TestWelchSegmentation:
    """Test the Welch segmentation policy."""

    def test_default_policy(self) -> None:
        """4096 samples split into 7 half-overlapping segments of 1024."""
        seg = welch_segmentation(4096)

        assert seg == WelchSegmentation(nperseg=1024, noverlap=512, n_segments=7)
        assert seg.window == "hann"

    def test_minimum_segment_length(self) -> None:
        """Short series fall back to the minimum segment length."""
        seg = welch_segmentation(20)

        assert seg.nperseg == 8
        assert seg.noverlap == 4
        assert seg.n_segments == 4

    def test_no_overlap(self) -> None:
        """Zero overlap tiles the series."""
        seg = welch_segmentation(1000, divisor=10, overlap=0.0)

        assert (seg.nperseg, seg.noverlap, seg.n_segments) == (100, 0, 10)

    def test_too_short_rejected(self) -> None:
        """Fewer than 8 samples cannot be segmented."""
        with pytest.raises(InvalidConfigurationError, match="at least 8"):
            welch_segmentation(7)

    @pytest.mark.parametrize("overlap", [-0.1, 1.0, 1.5, "half", None])
    def test_invalid_overlap_rejected(self, overlap) -> None:
        """Overlap must be a number in [0, 1)."""
        with pytest.raises(InvalidConfigurationError, match="welch_overlap"):
            welch_segmentation(1024, overlap=overlap)

    def test_invalid_divisor_rejected(self) -> None:
        """Divisor must be a positive integer."""
        with pytest.raises(InvalidConfigurationError, match="welch_divisor"):
            welch_segmentation(1024, divisor=0)


class TestConfidence:
    """Test coherence threshold and admittance standard error."""

    def test_threshold_in_unit_interval(self) -> None:
        """Threshold is a coherence value."""
        for k in (1, 5, 20, 100):
            assert 0.0 < coherence_threshold(k) < 1.0

    def test_threshold_decreasing_in_k(self) -> None:
        """More averaging lowers the significance threshold."""
        thresholds = [coherence_threshold(k) for k in range(1, 40)]

        assert np.all(np.diff(thresholds) < 0)

    def test_threshold_increasing_in_conf_level(self) -> None:
        """Higher confidence demands more coherence."""
        assert coherence_threshold(10, 0.95) < coherence_threshold(10, 0.995)

    @pytest.mark.parametrize("conf_level", [0.0, 1.0, -0.5, 1.5])
    def test_invalid_conf_level_rejected(self, conf_level: float) -> None:
        """conf_level must be strictly between 0 and 1."""
        with pytest.raises(InvalidConfigurationError, match="conf_level"):
            coherence_threshold(10, conf_level)

    def test_stderr_formula(self) -> None:
        """Standard error is sqrt((1 - coherence) / k)."""
        coherence = np.array([0.0, 0.5, 0.96, 1.0])

        stderr = admittance_standard_error(coherence, k=4)

        np.testing.assert_allclose(stderr, [0.5, np.sqrt(0.125), 0.1, 0.0])

    def test_stderr_decreasing_in_k(self) -> None:
        """Standard error shrinks as more tapers are averaged."""
        coherence = np.full(5, 0.7)

        assert np.all(
            admittance_standard_error(coherence, 20) < admittance_standard_error(coherence, 5)
        )


class TestSpectralMatrix:
    """Test the multitaper and Welch spectral matrices."""

    def test_multitaper_frequency_axis(self, white_noise) -> None:
        """Bins run from 0 Hz to Nyquist."""
        matrix = estimate_spectral_matrix(white_noise, white_noise, k=5, sampling_interval=0.5)

        assert matrix.method == "multitaper"
        assert matrix.n_averages == 5
        assert matrix.frequency.size == 4096 // 2 + 1
        assert matrix.frequency[0] == 0.0
        assert matrix.frequency[-1] == pytest.approx(1.0)

    def test_welch_mode_when_k_missing(self, white_noise) -> None:
        """Without k, the Welch estimator averages 7 segments for 4096 samples."""
        matrix = estimate_spectral_matrix(white_noise, white_noise)

        assert matrix.method == "welch"
        assert matrix.n_averages == 7
        assert matrix.frequency.size == 1024 // 2 + 1

    @pytest.mark.parametrize("k", [None, 8])
    def test_white_noise_density(self, white_noise, k) -> None:
        """One-sided density of unit white noise is 2 * dt in both modes."""
        dt = 0.1
        matrix = estimate_spectral_matrix(white_noise, white_noise, k=k, sampling_interval=dt)

        assert np.mean(matrix.S11[1:-1]) == pytest.approx(2 * dt, rel=0.1)

    def test_auto_spectra_non_negative(self, white_noise) -> None:
        """S11 and S22 are real and non-negative."""
        np.random.seed(7)
        y = np.random.randn(white_noise.size)

        matrix = estimate_spectral_matrix(white_noise, y, k=6)

        assert np.all(matrix.S11 >= 0)
        assert np.all(matrix.S22 >= 0)
        assert np.iscomplexobj(matrix.S12)

    def test_mismatched_lengths_rejected(self) -> None:
        """Input and output must have the same number of samples."""
        with pytest.raises(InvalidConfigurationError, match="lengths differ"):
            estimate_spectral_matrix(np.zeros(100), np.zeros(99), k=3)

    def test_non_finite_rejected(self) -> None:
        """NaN samples are rejected."""
        x = np.ones(100)
        x[10] = np.nan

        with pytest.raises(InvalidConfigurationError, match="NaN"):
            estimate_spectral_matrix(x, np.ones(100), k=3)

    def test_taper_count_too_large_rejected(self) -> None:
        """k must leave more than 2k samples."""
        with pytest.raises(InvalidConfigurationError, match="k=50"):
            estimate_spectral_matrix(np.random.randn(100), np.random.randn(100), k=50)

    def test_bad_sampling_interval_rejected(self, white_noise) -> None:
        """Sampling interval must be positive."""
        with pytest.raises(InvalidConfigurationError, match="sampling_interval"):
            estimate_spectral_matrix(white_noise, white_noise, k=3, sampling_interval=0.0)


class TestDeriveSpectra:
    """Test coherence, admittance and phase from a spectral matrix."""

    def test_zero_power_bins(self) -> None:
        """Bins with no input power get zero coherence and admittance."""
        matrix = SpectralMatrix(
            frequency=np.array([0.0, 0.1]),
            S11=np.array([0.0, 1.0]),
            S12=np.array([0.0 + 0.0j, 2.0 + 0.0j]),
            S22=np.array([1.0, 4.0]),
            n_averages=4,
            method="multitaper",
        )

        coherence, admittance, phase = derive_spectra(matrix)

        np.testing.assert_allclose(coherence, [0.0, 1.0])
        np.testing.assert_allclose(admittance, [0.0, 2.0])
        np.testing.assert_allclose(phase, [0.0, 0.0])

    def test_coherence_clipped(self) -> None:
        """Rounding above one is clipped back to one."""
        matrix = SpectralMatrix(
            frequency=np.array([0.1]),
            S11=np.array([1.0]),
            S12=np.array([1.0 + 1e-4j]),
            S22=np.array([1.0]),
            n_averages=4,
            method="multitaper",
        )

        coherence, _, _ = derive_spectra(matrix)

        assert coherence[0] == 1.0


class TestCrossSpectrum:
    """Test the empirical response spectrum on synthetic systems."""

    def test_result_layout(self, white_noise) -> None:
        """Six columns, period = 1 / frequency, inf at DC."""
        csp = cross_spectrum(white_noise, 2.0 * white_noise, k=5, sampling_interval=2.0)

        assert isinstance(csp, CrossSpectrum)
        table = csp.as_matrix()
        assert table.shape == (len(csp), 6)
        assert len(CrossSpectrum.COLUMNS) == 6
        assert np.isinf(csp.period[0])
        np.testing.assert_allclose(csp.period[1:], 1.0 / csp.frequency[1:])

    def test_ranges(self, white_noise) -> None:
        """Coherence in [0, 1], admittance and its error non-negative."""
        np.random.seed(3)
        y = 0.5 * white_noise + np.random.randn(white_noise.size)

        csp = cross_spectrum(white_noise, y, k=8)

        assert np.all((csp.coherence >= 0) & (csp.coherence <= 1))
        assert np.all(csp.admittance >= 0)
        assert np.all(csp.admittance_stderr >= 0)
        assert np.all(np.abs(csp.phase) <= np.pi)

    def test_recovers_gain(self, white_noise) -> None:
        """A scaled copy with a little noise recovers the gain."""
        np.random.seed(11)
        y = 2.5 * white_noise + 0.05 * np.random.randn(white_noise.size)

        csp = cross_spectrum(white_noise, y, k=8)

        assert np.median(csp.admittance[1:]) == pytest.approx(2.5, rel=0.01)
        assert np.median(csp.coherence[1:]) > 0.99
        assert np.mean(csp.significant) > 0.95

    def test_exact_gain_without_noise(self, white_noise) -> None:
        """A noiseless scaled copy has coherence 1 and exact admittance."""
        csp = cross_spectrum(white_noise, 2.0 * white_noise, k=5)

        np.testing.assert_allclose(csp.admittance[1:], 2.0, rtol=1e-10)
        np.testing.assert_allclose(csp.coherence[1:], 1.0, rtol=1e-10)
        np.testing.assert_allclose(csp.phase[1:], 0.0, atol=1e-10)

    def test_sign_inversion_phase(self, white_noise) -> None:
        """y = -x is half a cycle out of phase at every bin."""
        csp = cross_spectrum(white_noise, -white_noise, k=5)

        np.testing.assert_allclose(np.abs(csp.phase[1:]), np.pi, atol=1e-10)

    def test_delay_phase(self, white_noise) -> None:
        """A one-sample delay lags by 2*pi*f*dt."""
        dt = 1.0
        y = np.roll(white_noise, 1)

        csp = cross_spectrum(white_noise, y, k=8, sampling_interval=dt)

        band = (csp.frequency > 0.1) & (csp.frequency < 0.4)
        expected = -2 * np.pi * csp.frequency[band] * dt
        error = np.abs(np.angle(np.exp(1j * (csp.phase[band] - expected))))
        assert np.median(error) < 0.05

    def test_welch_mode_uses_segment_count(self, white_noise) -> None:
        """Without k, confidence uses the number of averaged segments."""
        csp = cross_spectrum(white_noise, white_noise)

        assert csp.k == 7
        assert csp.matrix.method == "welch"
        assert csp.coherence_threshold == pytest.approx(coherence_threshold(7))

    def test_independent_noise_rarely_significant(self, white_noise) -> None:
        """Unrelated series show low coherence at most bins."""
        np.random.seed(99)
        y = np.random.randn(white_noise.size)

        csp = cross_spectrum(white_noise, y, k=8)

        assert np.mean(csp.significant) < 0.3
        assert np.median(csp.coherence) < csp.coherence_threshold

    def test_significant_phase_masks_bins(self, white_noise) -> None:
        """Phase at non-significant bins is replaced by NaN."""
        np.random.seed(5)
        y = np.random.randn(white_noise.size)

        csp = cross_spectrum(white_noise, y, k=8)
        phase = csp.significant_phase()

        assert np.all(np.isnan(phase[~csp.significant]))
        np.testing.assert_array_equal(phase[csp.significant], csp.phase[csp.significant])

    def test_significant_phase_unwrap(self, white_noise) -> None:
        """Unwrapped phase of a three-sample delay falls by 6*pi*f across the band."""
        y = np.roll(white_noise, 3)

        csp = cross_spectrum(white_noise, y, k=8)
        phase = csp.significant_phase(unwrap=True)

        band = csp.significant & (csp.frequency > 0.02) & (csp.frequency < 0.45)
        freq = csp.frequency[band]
        drop = phase[band][-1] - phase[band][0]
        assert drop == pytest.approx(-6 * np.pi * (freq[-1] - freq[0]), abs=0.2)

    def test_conf_level_recorded(self, white_noise) -> None:
        """The requested confidence level sets the threshold."""
        csp = cross_spectrum(white_noise, white_noise, k=4, conf_level=0.95)

        assert csp.conf_level == 0.95
        assert csp.coherence_threshold == pytest.approx(coherence_threshold(4, 0.95))

    def test_invalid_conf_level_rejected(self, white_noise) -> None:
        """conf_level outside (0, 1) is rejected."""
        with pytest.raises(InvalidConfigurationError):
            cross_spectrum(white_noise, white_noise, k=4, conf_level=1.0)

    def test_verbose_output(self, white_noise, capsys) -> None:
        """Verbose mode prints the estimator and the significance summary."""
        cross_spectrum(white_noise, white_noise, k=4, verbose=True)

        out = capsys.readouterr().out
        assert "Multitaper" in out
        assert "Coherence threshold" in out

    def test_verbose_welch_output(self, white_noise, capsys) -> None:
        """Verbose Welch mode reports the segmentation."""
        cross_spectrum(white_noise, white_noise, verbose=True)

        out = capsys.readouterr().out
        assert "Welch" in out
        assert "7 segments" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
