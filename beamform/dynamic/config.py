from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Protocol, Tuple

import numpy as np

from ..geometry import _require_positive, _require_positive_int, ula_positions

ScanType = Literal["linear", "phased"]
SCAN_TYPES = ("linear", "phased")


@dataclass(frozen=True)
class ScanningConfig:
    """Scan parameterization of one frame.

    - num_scan_lines: scanlines per frame (>= 1).
    - scan_type: "phased" (range in degrees) or "linear" (range in meters).
    - scan_range: inclusive (min, max) of the scan dimension.
    - samples: temporal samples per scanline (>= 1).
    """

    num_scan_lines: int
    scan_type: ScanType
    scan_range: Tuple[float, float]
    samples: int

    def __post_init__(self):
        _require_positive_int(self.num_scan_lines, "num_scan_lines")
        _require_positive_int(self.samples, "samples")
        if self.scan_type not in SCAN_TYPES:
            raise ValueError(f"scan_type must be one of {SCAN_TYPES}")
        rng = tuple(float(v) for v in self.scan_range)
        if len(rng) != 2 or not all(math.isfinite(v) for v in rng):
            raise ValueError("scan_range must be a finite (min, max) pair")
        object.__setattr__(self, "scan_range", rng)


@dataclass(frozen=True)
class ArrayConfig:
    elements: int
    element_spacing: float  # meters

    def __post_init__(self):
        _require_positive_int(self.elements, "elements")
        _require_positive(self.element_spacing, "element_spacing")


@dataclass(frozen=True)
class DynamicBeamformingConfig:
    time_step: float  # seconds between samples
    propagation_speed: float  # m/s
    scanning: ScanningConfig
    array: ArrayConfig

    def __post_init__(self):
        _require_positive(self.time_step, "time_step")
        _require_positive(self.propagation_speed, "propagation_speed")
        if not isinstance(self.scanning, ScanningConfig):
            raise ValueError("scanning must be a ScanningConfig")
        if not isinstance(self.array, ArrayConfig):
            raise ValueError("array must be an ArrayConfig")

    @property
    def is_phased(self) -> bool:
        return self.scanning.scan_type == "phased"


class ScanlineGenerator(Protocol):
    def generate_scanline(self, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        """Return the (samples, elements) raw matrix for one scanline."""
        ...


class DynamicBeamformer(Protocol):
    def beamform(self, matrix: np.ndarray, scanline_index: int, config: DynamicBeamformingConfig) -> np.ndarray:
        """Reduce a (samples, elements) matrix to a (samples,) scanline."""
        ...


def element_position_meters(index: int, array: ArrayConfig) -> float:
    """x-position (m) of element `index`: (index - (N-1)/2) * spacing."""
    return (index - (array.elements - 1) / 2.0) * array.element_spacing


def element_positions(array: ArrayConfig) -> np.ndarray:
    """(elements,) x-positions in meters, centered at origin."""
    return ula_positions(array.elements, array.element_spacing)


def scanline_param(config: DynamicBeamformingConfig, scanline_index: int) -> float:
    """Scan value of a scanline: degrees for phased scans, meters for linear ones.

    Linear interpolation of the scan range over [0, num_scan_lines - 1]; a
    single-line frame uses the range midpoint.
    """
    lo, hi = config.scanning.scan_range
    n = config.scanning.num_scan_lines
    if n <= 1:
        return (lo + hi) / 2.0
    t = scanline_index / (n - 1)
    return lo + t * (hi - lo)


def scanline_params(config: DynamicBeamformingConfig) -> np.ndarray:
    return np.asarray(
        [scanline_param(config, i) for i in range(config.scanning.num_scan_lines)],
        dtype=np.float64,
    )
