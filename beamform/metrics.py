from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .profile import PatternPoint

_MASK_TOL = 1e-12


@dataclass(frozen=True)
class PatternStats:
    """Pattern quality figures; None means "not computable", never zero.

    - psl_db: peak sidelobe level relative to the main peak (dB), -inf if no sidelobe energy.
    - psl_lin: peak sidelobe intensity (linear).
    - islr_db: 10 log10(sidelobe energy / main-lobe energy).
    - fwhm_deg: main-lobe width between the boundaries used for the mask (deg).
    - main_lobe_area, total_area: trapezoidal integrals over angle (linear).
    """

    psl_db: Optional[float]
    psl_lin: Optional[float]
    islr_db: Optional[float]
    fwhm_deg: Optional[float]
    main_lobe_area: Optional[float] = None
    total_area: Optional[float] = None


EMPTY_STATS = PatternStats(None, None, None, None)


def _trapezoid(x: np.ndarray, y: np.ndarray) -> float:
    if x.size != y.size or x.size == 0:
        return 0.0
    return float(np.sum(0.5 * (y[:-1] + y[1:]) * np.diff(x)))


def _find_null(vals: List[float], start: int, step: int) -> Optional[int]:
    """Index of the first local minimum strictly beyond `start` in direction `step`."""
    i = start + step
    while 0 < i < len(vals) - 1:
        if vals[i] <= vals[i - 1] and vals[i] <= vals[i + 1]:
            return i
        i += step
    return None


def _half_power_crossing(angles: List[float], vals: List[float], start: int, step: int, half: float) -> float:
    i = start
    while 0 <= i + step < len(vals) and vals[i] >= half:
        i += step
    j = i  # first index outside (or the edge)
    k = i - step  # last index inside
    if k < 0 or k >= len(vals):
        return angles[j]
    xk, xj = angles[k], angles[j]
    yk, yj = vals[k], vals[j]
    if yk == yj:
        return xk
    t = (half - yk) / (yj - yk)
    return xk + t * (xj - xk)


def compute_pattern_stats(points: Sequence[PatternPoint]) -> PatternStats:
    """Peak sidelobe level, integrated sidelobe ratio and main-lobe width.

    Main-lobe boundaries
    - Prefer the nearest local minima (nulls) left and right of the peak.
    - Otherwise use the half-power crossings, linearly interpolated; a peak at
      the edge of the sweep uses the edge angle on that side.

    PSL is the largest intensity outside the main-lobe mask; ISLR integrates the
    pattern with the trapezoidal rule over angle. Empty input or a zero peak
    yields all-None fields.
    """
    if points is None or len(points) == 0:
        return EMPTY_STATS

    pts = sorted(points, key=lambda p: p.angle_deg)
    angles = [float(p.angle_deg) for p in pts]
    vals = [float(p.intensity_lin) if math.isfinite(p.intensity_lin) else 0.0 for p in pts]

    peak_idx = int(np.argmax(vals))
    peak = vals[peak_idx]
    if peak <= 0:
        return EMPTY_STATS

    half = peak * 0.5
    last = len(vals) - 1
    left_null = _find_null(vals, peak_idx, -1)
    right_null = _find_null(vals, peak_idx, 1)
    if (
        left_null is not None
        and right_null is not None
        and angles[left_null] < angles[peak_idx]
        and angles[right_null] > angles[peak_idx]
    ):
        left, right = angles[left_null], angles[right_null]
    else:
        left = angles[0] if peak_idx == 0 else _half_power_crossing(angles, vals, peak_idx, -1, half)
        right = angles[last] if peak_idx == last else _half_power_crossing(angles, vals, peak_idx, 1, half)

    fwhm = max(0.0, right - left) if math.isfinite(left) and math.isfinite(right) else None

    a = np.asarray(angles, dtype=np.float64)
    v = np.asarray(vals, dtype=np.float64)
    main_mask = (a >= left - _MASK_TOL) & (a <= right + _MASK_TOL)

    total_area = _trapezoid(a, v)
    main_area = _trapezoid(a[main_mask], v[main_mask])

    side = v[~main_mask]
    psl_lin = float(np.max(side)) if side.size and float(np.max(side)) > 0 else 0.0
    psl_db = 10.0 * math.log10(psl_lin / peak) if psl_lin > 0 else -math.inf

    islr_db: Optional[float] = None
    if main_area > 0:
        ratio = max(0.0, total_area - main_area) / main_area
        if ratio == 0 or math.isnan(ratio):
            ratio = float(np.finfo(np.float64).eps)
        if math.isfinite(ratio):
            islr_db = 10.0 * math.log10(ratio)

    return PatternStats(
        psl_db=psl_db,
        psl_lin=psl_lin,
        islr_db=islr_db,
        fwhm_deg=fwhm,
        main_lobe_area=main_area,
        total_area=total_area,
    )
