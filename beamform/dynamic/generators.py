"""Synthetic per-element echo data from an ideal moving point reflector.

The reflector sits at depth z(t) = z0 + speed*t and lateral position
x(t) = z(t) tan(offset) for phased scans (offset in degrees) or x = offset for
linear scans (offset in meters). No attenuation, constant reflectivity.

Two delay models are provided:
- PointSourceGenerator: receive time of flight doubled as the round trip,
  sample = A cos(ω(t - 2 r_e/c) + φ0).
- TxRxPointSourceGenerator: transmit from the array center plus per-element
  receive, sample = A cos(ω(t - (r_0 + r_e)/c) + φ0).

Generated matrices do not depend on the scanline index.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..geometry import _require_finite, _require_positive
from .config import DynamicBeamformingConfig, element_positions

Z0_M = 1e-3  # initial reflector depth, keeps r > 0 at t = 0


@dataclass(frozen=True)
class PointSourceParams:
    """Reflector trajectory and continuous-wave parameters.

    - offset: bearing in degrees (phased) or lateral position in meters (linear).
    - speed: radial speed away from the array (m/s).
    - frequency_hz: continuous-wave frequency (Hz).
    - amplitude: echo amplitude.
    - phase0: phase offset at t = 0 (rad).
    """

    offset: float
    speed: float
    frequency_hz: float
    amplitude: float = 1.0
    phase0: float = 0.0

    def __post_init__(self):
        _require_finite(self.offset, "offset")
        _require_finite(self.speed, "speed")
        _require_positive(self.frequency_hz, "frequency_hz")
        _require_finite(self.amplitude, "amplitude")
        _require_finite(self.phase0, "phase0")


def _source_track(params: PointSourceParams, config: DynamicBeamformingConfig) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (t, x_center, z), each (samples,)."""
    t = np.arange(config.scanning.samples, dtype=np.float64) * config.time_step
    z = Z0_M + params.speed * t
    if config.is_phased:
        x_center = z * math.tan(math.radians(params.offset))
    else:
        x_center = np.full_like(z, float(params.offset))
    return t, x_center, z


def _ranges(x_elem: np.ndarray, x_center: np.ndarray, z: np.ndarray) -> np.ndarray:
    # (samples, elements) distance from each element to the reflector
    return np.sqrt((x_elem[None, :] - x_center[:, None]) ** 2 + (z * z)[:, None])


@dataclass(frozen=True)
class PointSourceGenerator:
    """Receive-path model: one-way time of flight doubled for the round trip."""

    params: PointSourceParams

    def generate_scanline(self, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        p = self.params
        t, x_center, z = _source_track(p, config)
        r = _ranges(element_positions(config.array), x_center, z)
        tau = r / config.propagation_speed
        omega = 2.0 * np.pi * p.frequency_hz
        return p.amplitude * np.cos(omega * (t[:, None] - 2.0 * tau) + p.phase0)


@dataclass(frozen=True)
class TxRxPointSourceGenerator:
    """Explicit transmit (from the array center) plus per-element receive delay."""

    params: PointSourceParams

    def generate_scanline(self, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        p = self.params
        t, x_center, z = _source_track(p, config)
        c = config.propagation_speed
        tau_tx = np.sqrt(x_center * x_center + z * z) / c
        tau_rx = _ranges(element_positions(config.array), x_center, z) / c
        omega = 2.0 * np.pi * p.frequency_hz
        return p.amplitude * np.cos(omega * (t[:, None] - (tau_tx[:, None] + tau_rx)) + p.phase0)


def create_point_source_generator(params: PointSourceParams) -> PointSourceGenerator:
    return PointSourceGenerator(params)


def create_txrx_point_source_generator(params: PointSourceParams) -> TxRxPointSourceGenerator:
    return TxRxPointSourceGenerator(params)
