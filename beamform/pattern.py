from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .profile import (
    BeamformFullProfile,
    PatternPoint,
    ProfileConfig,
    compute_profile,
    compute_weights,
    spacing_meters,
)


def default_angles(start: float = -90.0, end: float = 90.0, step: float = 0.25) -> List[float]:
    """Inclusive angle sweep (deg) from start to end, each value rounded to 6 decimals.

    The end point is included within a 1e-9 tolerance of the accumulated steps.
    """
    if not math.isfinite(step) or step <= 0:
        raise ValueError("step must be positive")
    out: List[float] = []
    a = float(start)
    while a <= end + 1e-9:
        out.append(round(a, 6))
        a += step
    return out


def compute_pattern(
    config: ProfileConfig,
    angles_deg: Optional[Sequence[float]] = None,
    normalized: bool = True,
) -> List[PatternPoint]:
    """Far-field array-factor intensity over an angle sweep.

    Equation
    - ψ_i(θ) = (i - (N-1)/2) k d (sin θ - sin θ0), k = 2π/λ, λ = c/f
    - AF(θ) = Σ_i w_i exp(j ψ_i(θ)), I(θ) = |AF(θ)|²

    Parameters
    - config: profile configuration (weights come from `compute_weights`).
    - angles_deg: sweep in degrees; defaults to `default_angles()`.
    - normalized: divide by the sweep maximum so the peak is 1 (0 dB).

    Returns
    - list of PatternPoint(angle_deg, intensity_lin, intensity_db), in sweep order.
    """
    angles = np.asarray(default_angles() if angles_deg is None else angles_deg, dtype=np.float64).ravel()
    if not np.isfinite(angles).all():
        raise ValueError("angles_deg contains NaN/inf")

    n = config.elements
    w = compute_weights(config)
    kd = (2.0 * math.pi / config.wavelength) * spacing_meters(config)
    offsets = np.arange(n, dtype=np.float64) - (n - 1) / 2.0
    s0 = math.sin(math.radians(config.steer_angle_deg))
    s = np.sin(np.deg2rad(angles))

    psi = np.outer(s - s0, offsets * kd)  # (A, N)
    re = np.cos(psi) @ w
    im = np.sin(psi) @ w
    intensity = re * re + im * im

    if normalized:
        peak = float(np.max(intensity)) if intensity.size else 0.0
        lin = intensity / peak if peak > 0 else np.zeros_like(intensity)
    else:
        lin = intensity

    with np.errstate(divide="ignore"):
        db = np.where(lin > 0, 10.0 * np.log10(np.where(lin > 0, lin, 1.0)), -np.inf)

    return [PatternPoint(float(a), float(v), float(d)) for a, v, d in zip(angles, lin, db)]


def pattern_arrays(points: Sequence[PatternPoint]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split pattern points into (angle_deg, intensity_lin, intensity_db) arrays."""
    if len(points) == 0:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty.copy(), empty.copy()
    arr = np.asarray([tuple(p) for p in points], dtype=np.float64)
    return arr[:, 0], arr[:, 1], arr[:, 2]


def compute_full_profile(
    config: ProfileConfig,
    angles_deg: Optional[Sequence[float]] = None,
    normalized: bool = True,
) -> BeamformFullProfile:
    """Config, per-element snapshot and pattern bundled for export."""
    return BeamformFullProfile(
        config=config,
        snapshot=compute_profile(config),
        pattern=compute_pattern(config, angles_deg, normalized),
    )
