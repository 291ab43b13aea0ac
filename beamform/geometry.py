from __future__ import annotations

import math

import numpy as np


def _require_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise ValueError(f"{name} must be a positive integer")
    return int(value)


def _require_positive(value, name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None
    if not math.isfinite(v) or v <= 0:
        raise ValueError(f"{name} must be positive and finite")
    return v


def _require_finite(value, name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite")
    return v


def ula_positions(num_elements: int, spacing_m: float) -> np.ndarray:
    """Return (N,) element x-positions (meters) of a linear array centered at origin.

    Equation
    - x_i = (i - (N-1)/2) * d, i = 0..N-1

    Parameters
    - num_elements: number of elements N (>= 1).
    - spacing_m: center-to-center spacing d in meters (> 0).

    Returns
    - xs: (N,) float64 positions; the (possibly fractional) center index sits at x=0.
    """
    n = _require_positive_int(num_elements, "num_elements")
    d = _require_positive(spacing_m, "spacing_m")
    return (np.arange(n, dtype=np.float64) - (n - 1) / 2.0) * d
