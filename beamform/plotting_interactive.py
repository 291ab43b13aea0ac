"""Interactive Plotly helpers with lazy import.

These functions return Plotly Figure objects if plotly is installed. Import is
performed lazily so the core package does not depend on plotly.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .pattern import pattern_arrays
from .profile import PatternPoint


def _go():  # pragma: no cover - import helper
    import plotly.graph_objects as go  # type: ignore
    return go


def _db_image(frame: np.ndarray, db_range: float) -> np.ndarray:
    f = np.abs(np.asarray(frame, dtype=np.float64))
    if f.ndim != 2:
        raise ValueError("frame must be 2D (scanlines, samples)")
    if db_range <= 0:
        raise ValueError("db_range must be positive")
    peak = float(f.max()) if f.size else 0.0
    if peak <= 0:
        return np.full(f.shape, -float(db_range))
    with np.errstate(divide="ignore"):
        db = 20.0 * np.log10(f / peak)
    return np.clip(db, -float(db_range), 0.0)


def pattern_figure(points: Sequence[PatternPoint], title: str) -> "go.Figure":
    angles, _, db = pattern_arrays(points)
    # plotly drops -inf; show nulls as gaps
    y = np.where(np.isfinite(db), db, np.nan)
    go = _go()
    fig = go.Figure(
        data=go.Scatter(
            x=angles,
            y=y,
            mode="lines",
            hovertemplate="angle=%{x:.2f}°<br>I=%{y:.2f} dB<extra></extra>",
            name="Pattern",
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="angle (deg)",
        yaxis_title="intensity (dB)",
        template="plotly_white",
    )
    return fig


def frame_heatmap(
    frame: np.ndarray,
    title: str,
    db_range: float = 60.0,
    scan_params: Optional[np.ndarray] = None,
) -> "go.Figure":
    """Scanline x sample image of a frame in normalized log magnitude.

    Parameters
    - frame: (L, S) beamformed or envelope frame.
    - title: figure title.
    - db_range: dynamic range shown below the frame peak (dB).
    - scan_params: optional (L,) x-axis values; scanline indices otherwise.
    """
    Z = _db_image(frame, db_range)
    n_lines, n_samples = Z.shape
    x = np.arange(n_lines) if scan_params is None else np.asarray(scan_params).reshape(-1)
    if x.shape[0] != n_lines:
        raise ValueError("scan_params length must match the number of scanlines")
    go = _go()
    fig = go.Figure(
        data=go.Heatmap(
            x=x,
            y=np.arange(n_samples),
            z=Z.T,
            zmin=-float(db_range),
            zmax=0.0,
            colorscale="Gray",
            colorbar=dict(title="dB"),
            hovertemplate="line=%{x}<br>sample=%{y}<br>%{z:.1f} dB<extra></extra>",
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="scanline",
        yaxis_title="sample",
        yaxis_autorange="reversed",
        template="plotly_white",
    )
    return fig
