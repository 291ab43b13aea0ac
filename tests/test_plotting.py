import numpy as np
import pytest

from beamform.pattern import compute_pattern, default_angles
from beamform.profile import ProfileConfig


def test_pattern_figure():
    pytest.importorskip("plotly")
    from beamform.plotting_interactive import pattern_figure

    pts = compute_pattern(ProfileConfig(elements=2, spacing=0.5), default_angles(-90.0, 90.0, 10.0))
    fig = pattern_figure(pts, "two elements")
    assert len(fig.data) == 1
    y = np.asarray(fig.data[0].y, dtype=float)
    assert y.shape == (19,)
    assert np.nanmax(y) == pytest.approx(0.0)


def test_frame_heatmap():
    pytest.importorskip("plotly")
    from beamform.plotting_interactive import frame_heatmap

    frame = np.random.default_rng(0).standard_normal((4, 32))
    fig = frame_heatmap(frame, "frame", db_range=40.0, scan_params=np.linspace(-10, 10, 4))
    z = np.asarray(fig.data[0].z, dtype=float)
    assert z.shape == (32, 4)
    assert z.max() == pytest.approx(0.0)
    assert z.min() >= -40.0
    with pytest.raises(ValueError):
        frame_heatmap(frame, "bad", scan_params=np.zeros(3))


def test_frame_heatmap_all_zero():
    pytest.importorskip("plotly")
    from beamform.plotting_interactive import frame_heatmap

    fig = frame_heatmap(np.zeros((2, 8)), "zeros", db_range=30.0)
    assert np.allclose(np.asarray(fig.data[0].z, dtype=float), -30.0)
