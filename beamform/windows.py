from __future__ import annotations

import math
from typing import Literal

import numpy as np

WindowType = Literal["rectangular", "hamming", "triangular", "chebyshev", "custom"]
WINDOW_TYPES = ("rectangular", "hamming", "triangular", "chebyshev", "custom")


def _validate_length(n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError("window length must be a positive integer")
    return int(n)


def rectangular_window(n: int) -> np.ndarray:
    """All-ones window of length n."""
    return np.ones(_validate_length(n), dtype=np.float64)


def hamming_window(n: int) -> np.ndarray:
    """Symmetric Hamming window w[k] = 0.54 - 0.46 cos(2πk/(N-1))."""
    n = _validate_length(n)
    if n <= 1:
        return np.ones(1, dtype=np.float64)
    a0 = 0.54
    a1 = 1.0 - a0
    k = np.arange(n, dtype=np.float64)
    return a0 - a1 * np.cos(2.0 * np.pi * k / (n - 1))


def triangular_window(n: int) -> np.ndarray:
    """Triangular (Bartlett) window reaching zero at both ends."""
    n = _validate_length(n)
    if n <= 1:
        return np.ones(1, dtype=np.float64)
    m = n - 1
    k = np.arange(n, dtype=np.float64)
    return 1.0 - np.abs((k - m / 2.0) / (m / 2.0))


def _chebyshev_poly(order: int, x: np.ndarray) -> np.ndarray:
    # T_order(x): cos form inside [-1, 1], cosh form outside with odd-order sign flip
    x = np.asarray(x, dtype=np.float64)
    out = np.empty_like(x)
    inside = np.abs(x) <= 1.0 + 1e-12
    out[inside] = np.cos(order * np.arccos(np.clip(x[inside], -1.0, 1.0)))
    xo = x[~inside]
    base = np.cosh(order * np.arccosh(np.maximum(1.0 + 1e-15, np.abs(xo))))
    if order % 2 == 1:
        base = np.where(xo < 0, -base, base)
    out[~inside] = base
    return out


def chebyshev_window(n: int, sidelobe_db: float = 30.0) -> np.ndarray:
    """Dolph-Chebyshev window with sidelobes `sidelobe_db` below the main lobe.

    Construction
    - A = 10^(sidelobe_db/20); A <= 1 or non-finite gives the rectangular window.
    - β = cosh(acosh(A)/(N-1)).
    - Y[k] = T_{N-1}(β cos(πk/N)) / T_{N-1}(β), k = 0..N-1.
    - Inverse real cosine series (direct O(N²) summation) gives the zero-phase
      window, which is normalized to unit max, clamped at 0, circularly shifted
      by floor(N/2) and symmetrized by averaging mirrored pairs.

    Returns
    - w: (N,) float64, symmetric, max(|w|) == 1.
    """
    n = _validate_length(n)
    if n <= 1:
        return np.ones(1, dtype=np.float64)

    m = n - 1
    with np.errstate(over="ignore", invalid="ignore"):
        a = float(np.power(10.0, float(sidelobe_db) / 20.0))
    if not math.isfinite(a) or a <= 1.0:
        return np.ones(n, dtype=np.float64)

    beta = math.cosh(math.acosh(a) / m)
    t_beta = math.cosh(m * math.acosh(beta))

    k = np.arange(n, dtype=np.float64)
    y = _chebyshev_poly(m, beta * np.cos(np.pi * k / n)) / t_beta

    half = n // 2
    nn = np.arange(n, dtype=np.float64)
    kk = np.arange(1, half, dtype=np.float64)
    basis = np.cos(2.0 * np.pi * np.outer(nn, kk) / n)  # (N, half-1)
    w = y[0] + 2.0 * (basis @ y[1:half])
    if n % 2 == 0:
        w = w + y[half] * np.cos(np.pi * nn)
    w = w / n

    peak = float(np.max(np.abs(w)))
    if peak > 0:
        w = w / peak
    w = np.maximum(w, 0.0)

    wc = np.roll(w, -half)
    wc = 0.5 * (wc + wc[::-1])

    # Mirror averaging can pull the peak below 1
    peak = float(np.max(np.abs(wc)))
    if peak > 0:
        wc = wc / peak
    return wc


def make_window(window_type: str, n: int, chebyshev_sidelobe_db: float = 30.0) -> np.ndarray:
    """Return the (N,) apodization window named by `window_type`.

    "custom" carries its weights on the profile config, so here it maps to the
    rectangular window.
    """
    kind = str(window_type).lower()
    if kind == "rectangular" or kind == "custom":
        return rectangular_window(n)
    if kind == "hamming":
        return hamming_window(n)
    if kind == "triangular":
        return triangular_window(n)
    if kind == "chebyshev":
        return chebyshev_window(n, chebyshev_sidelobe_db)
    raise ValueError(f"window_type must be one of {WINDOW_TYPES}")
