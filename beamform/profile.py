from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Literal, NamedTuple, Optional, Tuple

import numpy as np

from .geometry import _require_finite, _require_positive, _require_positive_int, ula_positions
from .windows import WINDOW_TYPES, WindowType, make_window

SpacingUnit = Literal["wavelength", "meters"]
SPACING_UNITS = ("wavelength", "meters")
DEFAULT_CHEBYSHEV_SIDELOBE_DB = 30.0


@dataclass(frozen=True)
class ProfileConfig:
    """Per-computation parameters of a static beam profile.

    Attributes
    - elements: array size N (>= 1).
    - spacing: element pitch, in wavelengths or meters per `spacing_unit`.
    - spacing_unit: "wavelength" | "meters".
    - frequency_hz: operating frequency (Hz).
    - wave_speed: propagation speed (m/s).
    - steer_angle_deg: steering angle from broadside (deg).
    - window_type: apodization window name.
    - chebyshev_sidelobe_db: sidelobe level for "chebyshev" (default 30 dB when None).
    - focus_depth: focal range (m); None or 0 selects angle-only steering.
    - custom_weights: explicit weights for "custom". A missing or wrong-length
      vector falls back to a Hamming window when weights are computed.
    """

    elements: int
    spacing: float
    spacing_unit: SpacingUnit = "wavelength"
    frequency_hz: float = 1.0
    wave_speed: float = 1540.0
    steer_angle_deg: float = 0.0
    window_type: WindowType = "rectangular"
    chebyshev_sidelobe_db: Optional[float] = None
    focus_depth: Optional[float] = None
    custom_weights: Optional[Tuple[float, ...]] = None

    def __post_init__(self):
        _require_positive_int(self.elements, "elements")
        _require_positive(self.spacing, "spacing")
        _require_positive(self.frequency_hz, "frequency_hz")
        _require_positive(self.wave_speed, "wave_speed")
        _require_finite(self.steer_angle_deg, "steer_angle_deg")
        if self.spacing_unit not in SPACING_UNITS:
            raise ValueError(f"spacing_unit must be one of {SPACING_UNITS}")
        if self.window_type not in WINDOW_TYPES:
            raise ValueError(f"window_type must be one of {WINDOW_TYPES}")
        if self.focus_depth is not None:
            fd = float(self.focus_depth)
            if not math.isfinite(fd) or fd < 0:
                raise ValueError("focus_depth must be >= 0 and finite")
        if self.custom_weights is not None:
            object.__setattr__(
                self, "custom_weights", tuple(float(v) for v in np.asarray(self.custom_weights).ravel())
            )

    @property
    def wavelength(self) -> float:
        return self.wave_speed / self.frequency_hz

    @property
    def sidelobe_db(self) -> float:
        if self.chebyshev_sidelobe_db is None:
            return DEFAULT_CHEBYSHEV_SIDELOBE_DB
        return float(self.chebyshev_sidelobe_db)


@dataclass(frozen=True)
class PerElementDelays:
    """Per-element steering: time delays (s) and phases (rad) at `frequency_hz`."""

    time_delays: np.ndarray
    phase_radians: np.ndarray


@dataclass(frozen=True)
class ProfileSnapshot:
    weights: np.ndarray  # (N,), max |w| == 1
    delays: PerElementDelays


class PatternPoint(NamedTuple):
    """Beam pattern sample; intensity_db is -inf where intensity_lin == 0."""

    angle_deg: float
    intensity_lin: float
    intensity_db: float


@dataclass(frozen=True)
class BeamformFullProfile:
    config: ProfileConfig
    snapshot: ProfileSnapshot
    pattern: List[PatternPoint]


def spacing_meters(config: ProfileConfig) -> float:
    """Element spacing in meters (wavelength units scale by λ = c/f)."""
    if config.spacing_unit == "wavelength":
        return config.spacing * config.wavelength
    return float(config.spacing)


def compute_weights(config: ProfileConfig) -> np.ndarray:
    """Return (N,) apodization weights normalized to max |w| = 1.

    "custom" uses `config.custom_weights` when its length equals `elements`,
    otherwise a Hamming window. An all-zero vector is returned unscaled.
    """
    n = config.elements
    if config.window_type == "custom":
        cw = config.custom_weights
        if cw is not None and len(cw) == n:
            w = np.asarray(cw, dtype=np.float64).copy()
        else:
            w = make_window("hamming", n, config.sidelobe_db)
    else:
        w = make_window(config.window_type, n, config.sidelobe_db)

    peak = float(np.max(np.abs(w))) if w.size else 0.0
    if peak > 0:
        w = w / peak
    return w


def compute_delays(config: ProfileConfig) -> PerElementDelays:
    """Per-element delays for angle-only or focused steering.

    Angle-only (focus_depth None or 0)
    - τ_i = x_i sin(θ0) / c

    Focused (focus_depth F > 0)
    - focal point (x_F, z_F) = (F sin θ0, F cos θ0)
    - τ_i = (||(x_i,0) - (x_F,z_F)|| - ||(0,0) - (x_F,z_F)||) / c

    Phases are φ_i = 2π f τ_i. The center element has zero delay when focused.
    """
    x = ula_positions(config.elements, spacing_meters(config))
    c = config.wave_speed
    theta0 = math.radians(config.steer_angle_deg)

    if config.focus_depth is None or config.focus_depth == 0:
        tau = x * math.sin(theta0) / c
    else:
        depth = float(config.focus_depth)
        x_f = depth * math.sin(theta0)
        z_f = depth * math.cos(theta0)
        r_ref = math.sqrt(x_f * x_f + z_f * z_f)
        r = np.sqrt((x - x_f) ** 2 + z_f * z_f)
        tau = (r - r_ref) / c

    phase = 2.0 * np.pi * config.frequency_hz * tau
    return PerElementDelays(time_delays=tau.astype(np.float64), phase_radians=phase.astype(np.float64))


def compute_profile(config: ProfileConfig) -> ProfileSnapshot:
    """Weights and delays for `config`."""
    return ProfileSnapshot(weights=compute_weights(config), delays=compute_delays(config))
