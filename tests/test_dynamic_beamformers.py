import logging

import numpy as np
import pytest

from beamform.dynamic.beamformers import (
    create_delay_and_sum_apodized_beamformer,
    create_delay_and_sum_beamformer,
    create_sum_beamformer,
    sample_row_linear,
    steering_shifts,
)
from beamform.dynamic.config import ArrayConfig, DynamicBeamformingConfig, ScanningConfig
from beamform.windows import chebyshev_window, hamming_window, triangular_window


def _config(scan_type="phased", lines=5, samples=32, elements=8, spacing=3e-4):
    rng = (-20.0, 20.0) if scan_type == "phased" else (-1e-3, 1e-3)
    return DynamicBeamformingConfig(
        time_step=1e-7,
        propagation_speed=1540.0,
        scanning=ScanningConfig(num_scan_lines=lines, scan_type=scan_type, scan_range=rng, samples=samples),
        array=ArrayConfig(elements=elements, element_spacing=spacing),
    )


def test_sum_beamformer_zero_input():
    cfg = _config(samples=8, elements=16)
    out = create_sum_beamformer().beamform(np.zeros((8, 16)), 0, cfg)
    assert out.shape == (8,)
    assert np.all(out == 0.0)


def test_sum_beamformer_adds_elements():
    cfg = _config(samples=4, elements=3)
    m = np.arange(12, dtype=np.float64).reshape(4, 3)
    assert np.allclose(create_sum_beamformer().beamform(m, 2, cfg), m.sum(axis=1))


def test_sample_row_linear_rules():
    m = np.arange(12, dtype=np.float64).reshape(4, 3)
    # exact integer index returns the stored value
    assert sample_row_linear(m, 1, 2.0) == m[2, 1]
    # right neighbor out of bounds returns the last stored value
    assert sample_row_linear(m, 2, 3.5) == m[3, 2]
    # floor outside [0, samples) is zero
    assert sample_row_linear(m, 0, -0.5) == 0.0
    assert sample_row_linear(m, 0, 4.0) == 0.0
    # interior linear interpolation
    assert sample_row_linear(m, 0, 1.25) == pytest.approx(0.75 * m[1, 0] + 0.25 * m[2, 0])


def test_delay_and_sum_at_broadside_equals_plain_sum():
    cfg = _config(lines=1)  # single line sits at the range midpoint, 0 deg
    rng = np.random.default_rng(0)
    m = rng.standard_normal((32, 8))
    out = create_delay_and_sum_beamformer().beamform(m, 0, cfg)
    assert np.allclose(out, m.sum(axis=1))


@pytest.mark.parametrize("line", [0, 1, 3, 4])
def test_delay_and_sum_matches_scalar_interpolation(line):
    cfg = _config()
    rng = np.random.default_rng(line)
    m = rng.standard_normal((cfg.scanning.samples, cfg.array.elements))
    shifts = steering_shifts(line, cfg)
    expected = np.array(
        [sum(sample_row_linear(m, e, s + shifts[e]) for e in range(cfg.array.elements)) for s in range(cfg.scanning.samples)]
    )
    out = create_delay_and_sum_beamformer().beamform(m, line, cfg)
    assert np.allclose(out, expected)

    w = hamming_window(cfg.array.elements)
    expected_apod = np.array(
        [
            sum(w[e] * sample_row_linear(m, e, s + shifts[e]) for e in range(cfg.array.elements))
            for s in range(cfg.scanning.samples)
        ]
    )
    out_apod = create_delay_and_sum_apodized_beamformer().beamform(m, line, cfg)
    assert np.allclose(out_apod, expected_apod)


def test_steering_shifts_sign():
    cfg = _config()
    # positive angle: elements at positive x are advanced
    s = steering_shifts(4, cfg)
    assert s[-1] < 0 < s[0]
    assert np.allclose(s, -s[::-1])


def test_delay_and_sum_focuses_steered_plane_wave():
    cfg = _config(lines=3, samples=200, elements=16, spacing=1e-4)
    # Gaussian pulse arriving from the +20 deg scanline: element e sees it shifted by -shift_e
    shifts = steering_shifts(2, cfg)
    t0, sigma = 100, 3.0
    s = np.arange(cfg.scanning.samples, dtype=np.float64)[:, None]
    m = np.exp(-((s - shifts[None, :] - t0) ** 2) / (2 * sigma**2))
    bf = create_delay_and_sum_beamformer()
    on = bf.beamform(m, 2, cfg)
    off = bf.beamform(m, 0, cfg)
    assert on[t0] == pytest.approx(cfg.array.elements, rel=0.05)
    assert np.argmax(on) == t0
    assert np.max(np.abs(off)) < on[t0]


def test_linear_scan_falls_back_with_error_log(caplog):
    cfg = _config(scan_type="linear")
    m = np.random.default_rng(1).standard_normal((32, 8))
    with caplog.at_level(logging.ERROR):
        out = create_delay_and_sum_beamformer().beamform(m, 0, cfg)
    assert np.allclose(out, m.sum(axis=1))
    assert any(r.levelno == logging.ERROR and "phased" in r.getMessage() for r in caplog.records)


def test_apodized_fallback_uses_injected_logger(caplog):
    cfg = _config(scan_type="linear")
    m = np.random.default_rng(2).standard_normal((32, 8))
    log = logging.getLogger("tests.beamformer")
    bf = create_delay_and_sum_apodized_beamformer(window_type="triangular", logger=log)
    with caplog.at_level(logging.ERROR, logger="tests.beamformer"):
        out = bf.beamform(m, 1, cfg)
    assert np.allclose(out, m @ triangular_window(8))
    assert [r.name for r in caplog.records] == ["tests.beamformer"]


def test_apodized_defaults():
    bf = create_delay_and_sum_apodized_beamformer()
    assert bf.window_type == "hamming"
    assert bf.chebyshev_sidelobe_db == 30.0
    assert np.allclose(bf.weights(9), hamming_window(9))


@pytest.mark.parametrize(
    "factory", [create_sum_beamformer, create_delay_and_sum_beamformer, create_delay_and_sum_apodized_beamformer]
)
def test_shape_mismatch_raises(factory):
    cfg = _config()
    with pytest.raises(ValueError):
        factory().beamform(np.zeros((8, 32)), 0, cfg)


def test_chebyshev_apodization_uses_unit_peak_window():
    cfg = _config(lines=1, elements=5)
    m = np.random.default_rng(3).standard_normal((cfg.scanning.samples, 5))
    bf = create_delay_and_sum_apodized_beamformer(window_type="chebyshev", chebyshev_sidelobe_db=40.0)
    w = bf.weights(5)
    assert np.isclose(np.max(w), 1.0)
    assert np.allclose(w, chebyshev_window(5, 40.0))
    # broadside line: no delays, plain weighted sum
    assert np.allclose(bf.beamform(m, 0, cfg), m @ w)
