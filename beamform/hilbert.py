"""Analytic signal and envelope detection via a radix-2 FFT.

The input is zero-padded to the next power of two M >= N, transformed with an
iterative Cooley-Tukey FFT, multiplied by the Hilbert mask

    H[0] = 1, H[k] = 2 for 1 <= k < M/2, H[M/2] = 1, H[k] = 0 for k > M/2

and transformed back. The forward pass uses positive twiddle exponents
(e^{+j2πkn/M}) and the inverse negative ones, so the first N samples of the
result are x - j·H{x}, the conjugate of the textbook analytic signal. The
envelope, its magnitude, does not depend on the convention.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class AnalyticSignal(NamedTuple):
    real: np.ndarray
    imag: np.ndarray
    envelope: np.ndarray


def _bit_reverse_indices(m: int) -> np.ndarray:
    bits = m.bit_length() - 1
    idx = np.arange(m)
    rev = np.zeros(m, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def fft_radix2(x: np.ndarray, inverse: bool = False) -> np.ndarray:
    """Iterative radix-2 Cooley-Tukey FFT.

    Parameters
    - x: complex or real (M,) array, M a power of two.
    - inverse: negative twiddle exponents and scale by 1/M.

    Returns
    - (M,) complex128. Forward equals M * numpy.fft.ifft(x); inverse equals
      numpy.fft.fft(x) / M.
    """
    a = np.asarray(x, dtype=np.complex128).ravel()
    m = a.shape[0]
    if m < 1 or (m & (m - 1)) != 0:
        raise ValueError("fft_radix2 length must be a power of two")
    a = a[_bit_reverse_indices(m)].copy()
    sign = -1.0 if inverse else 1.0
    size = 2
    while size <= m:
        half = size // 2
        tw = np.exp(sign * 2j * np.pi * np.arange(half) / size)
        blocks = a.reshape(-1, size)
        even = blocks[:, :half].copy()
        odd = blocks[:, half:] * tw[None, :]
        blocks[:, :half] = even + odd
        blocks[:, half:] = even - odd
        size *= 2
    if inverse:
        a /= m
    return a


def hilbert_analytic(x: np.ndarray) -> AnalyticSignal:
    """Analytic signal of a real 1D sequence.

    Returns
    - AnalyticSignal(real, imag, envelope), each (N,) float64.
    """
    sig = np.asarray(x, dtype=np.float64).ravel()
    n = sig.shape[0]
    if n == 0:
        empty = np.zeros(0, dtype=np.float64)
        return AnalyticSignal(empty, empty.copy(), empty.copy())
    m = 1 << (n - 1).bit_length()
    padded = np.zeros(m, dtype=np.complex128)
    padded[:n] = sig
    spec = fft_radix2(padded)

    h = np.zeros(m, dtype=np.float64)
    h[0] = 1.0
    if m > 1:
        h[1 : m // 2] = 2.0
        h[m // 2] = 1.0
    analytic = fft_radix2(spec * h, inverse=True)[:n]
    re = analytic.real.copy()
    im = analytic.imag.copy()
    return AnalyticSignal(re, im, np.hypot(re, im))


def envelope(x: np.ndarray) -> np.ndarray:
    return hilbert_analytic(x).envelope


def frame_envelope(frame: np.ndarray) -> np.ndarray:
    """Envelope of every scanline (row) of an (L, S) frame."""
    f = np.asarray(frame, dtype=np.float64)
    if f.ndim != 2:
        raise ValueError("frame must be 2D (scanlines, samples)")
    out = np.empty_like(f)
    for i in range(f.shape[0]):
        out[i] = envelope(f[i])
    return out
