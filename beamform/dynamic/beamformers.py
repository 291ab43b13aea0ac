from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..windows import make_window
from .config import DynamicBeamformingConfig, element_positions, scanline_param

logger = logging.getLogger(__name__)

_FRAC_TOL = 1e-12


def sample_row_linear(matrix: np.ndarray, element_index: int, sample_index: float) -> float:
    """Linearly interpolated value of one element's trace at a fractional sample index.

    - floor index outside [0, samples) -> 0
    - fractional part <= 1e-12, or upper neighbor out of range -> lower sample
    - otherwise m[s0]*(1-frac) + m[s0+1]*frac
    """
    m = np.asarray(matrix)
    s0 = math.floor(sample_index)
    frac = sample_index - s0
    n = m.shape[0]
    if s0 < 0 or s0 >= n:
        return 0.0
    v0 = float(m[s0, element_index])
    if frac <= _FRAC_TOL or s0 + 1 >= n:
        return v0
    return v0 * (1.0 - frac) + float(m[s0 + 1, element_index]) * frac


def _interpolate_shifted(matrix: np.ndarray, shifts: np.ndarray) -> np.ndarray:
    """(samples, elements) matrix of element traces read at s + shifts[e].

    Vectorized form of `sample_row_linear` over all samples and elements.
    """
    n, n_elem = matrix.shape
    pos = np.arange(n, dtype=np.float64)[:, None] + shifts[None, :]
    s0f = np.floor(pos)
    frac = pos - s0f
    s0 = s0f.astype(np.int64)
    valid = (s0 >= 0) & (s0 < n)
    cols = np.arange(n_elem)[None, :]
    v0 = matrix[np.clip(s0, 0, n - 1), cols]
    v1 = matrix[np.clip(s0 + 1, 0, n - 1), cols]
    blend = (frac > _FRAC_TOL) & (s0 + 1 < n)
    vals = np.where(blend, v0 * (1.0 - frac) + v1 * frac, v0)
    return np.where(valid, vals, 0.0)


def _check_matrix(matrix: np.ndarray, config: DynamicBeamformingConfig) -> np.ndarray:
    m = np.asarray(matrix, dtype=np.float64)
    expected = (config.scanning.samples, config.array.elements)
    if m.shape != expected:
        raise ValueError(f"matrix must have shape (samples, elements) = {expected}, got {m.shape}")
    return m


def steering_shifts(scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
    """(elements,) fractional sample shifts -(x_e sin θ / c) / dt for a phased scanline."""
    theta = math.radians(scanline_param(config, scanline_index))
    tau = element_positions(config.array) * math.sin(theta) / config.propagation_speed
    return -tau / config.time_step


@dataclass(frozen=True)
class SumBeamformer:
    """Plain sum across elements, no delays or apodization."""

    def beamform(self, matrix: np.ndarray, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        return _check_matrix(matrix, config).sum(axis=1)


@dataclass(frozen=True)
class DelayAndSumBeamformer:
    """Delay-and-sum along the scanline angle (phased scans only).

    Linear scans are logged as an error and reduced with a plain sum.
    """

    logger: Optional[logging.Logger] = field(default=None, repr=False, compare=False)

    def beamform(self, matrix: np.ndarray, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        m = _check_matrix(matrix, config)
        if not config.is_phased:
            (self.logger or logger).error(
                "DelayAndSum: only 'phased' scanning is supported; falling back to plain sum"
            )
            return m.sum(axis=1)
        shifted = _interpolate_shifted(m, steering_shifts(scanline_index, config))
        return shifted.sum(axis=1)


@dataclass(frozen=True)
class DelayAndSumApodizedBeamformer:
    """Delay-and-sum with per-element window weights (phased scans only).

    Linear scans are logged as an error and reduced with an apodized sum
    without delays.

    Weights come straight from `make_window`. The Chebyshev window is rescaled
    to unit peak after its mirror averaging, so Chebyshev-apodized outputs are
    larger than with the unrescaled construction (about 1.4x for N=5 at 40 dB).
    Hamming and triangular windows of even length peak below 1.
    """

    window_type: str = "hamming"
    chebyshev_sidelobe_db: float = 30.0
    logger: Optional[logging.Logger] = field(default=None, repr=False, compare=False)

    def weights(self, elements: int) -> np.ndarray:
        return make_window(self.window_type, elements, self.chebyshev_sidelobe_db)

    def beamform(self, matrix: np.ndarray, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        m = _check_matrix(matrix, config)
        w = self.weights(config.array.elements)
        if not config.is_phased:
            (self.logger or logger).error(
                "DelayAndSumApodized: only 'phased' scanning is supported; falling back to apodized sum"
            )
            return m @ w
        shifted = _interpolate_shifted(m, steering_shifts(scanline_index, config))
        return shifted @ w


def create_sum_beamformer() -> SumBeamformer:
    return SumBeamformer()


def create_delay_and_sum_beamformer(logger: Optional[logging.Logger] = None) -> DelayAndSumBeamformer:
    return DelayAndSumBeamformer(logger=logger)


def create_delay_and_sum_apodized_beamformer(
    window_type: Optional[str] = None,
    chebyshev_sidelobe_db: Optional[float] = None,
    logger: Optional[logging.Logger] = None,
) -> DelayAndSumApodizedBeamformer:
    """Apodized delay-and-sum; window defaults to Hamming, Chebyshev level to 30 dB."""
    return DelayAndSumApodizedBeamformer(
        window_type=window_type or "hamming",
        chebyshev_sidelobe_db=30.0 if chebyshev_sidelobe_db is None else float(chebyshev_sidelobe_db),
        logger=logger,
    )
