import math

import numpy as np
import pytest

from beamform.profile import (
    ProfileConfig,
    compute_delays,
    compute_profile,
    compute_weights,
    spacing_meters,
)
from beamform.windows import hamming_window


def test_spacing_units():
    cfg = ProfileConfig(elements=4, spacing=0.5, frequency_hz=5e6, wave_speed=1540.0)
    assert cfg.wavelength == pytest.approx(1540.0 / 5e6)
    assert spacing_meters(cfg) == pytest.approx(0.5 * 1540.0 / 5e6)
    cfg_m = ProfileConfig(elements=4, spacing=3e-4, spacing_unit="meters")
    assert spacing_meters(cfg_m) == pytest.approx(3e-4)


@pytest.mark.parametrize("n", [4, 7, 16])
def test_broadside_delays_antisymmetric(n):
    cfg = ProfileConfig(elements=n, spacing=0.5, frequency_hz=5e6)
    d = compute_delays(cfg)
    assert np.allclose(d.time_delays, -d.time_delays[::-1])
    assert np.allclose(d.time_delays, 0.0)
    if n % 2 == 1:
        assert d.time_delays[n // 2] == 0.0


def test_steered_delays_linear_in_position():
    cfg = ProfileConfig(elements=8, spacing=0.5, frequency_hz=5e6, steer_angle_deg=30.0)
    d = compute_delays(cfg)
    pitch = spacing_meters(cfg)
    step = pitch * math.sin(math.radians(30.0)) / cfg.wave_speed
    assert np.allclose(np.diff(d.time_delays), step)
    assert np.allclose(d.time_delays, -d.time_delays[::-1])
    assert np.allclose(d.phase_radians, 2 * np.pi * cfg.frequency_hz * d.time_delays)


@pytest.mark.parametrize("steer", [0.0, 15.0, -40.0])
def test_focused_center_element_zero(steer):
    cfg = ProfileConfig(elements=9, spacing=0.5, frequency_hz=5e6, steer_angle_deg=steer, focus_depth=0.02)
    d = compute_delays(cfg)
    assert abs(d.time_delays[4]) < 1e-18


def test_focused_broadside_edges_lead():
    cfg = ProfileConfig(elements=9, spacing=0.5, frequency_hz=5e6, focus_depth=0.02)
    d = compute_delays(cfg)
    # outer elements are farther from an on-axis focus
    assert np.all(d.time_delays >= 0.0)
    assert d.time_delays[0] == pytest.approx(d.time_delays[-1])
    assert d.time_delays[0] > d.time_delays[2]


def test_zero_focus_depth_is_angle_only():
    a = compute_delays(ProfileConfig(elements=8, spacing=0.5, steer_angle_deg=10.0, focus_depth=0.0))
    b = compute_delays(ProfileConfig(elements=8, spacing=0.5, steer_angle_deg=10.0))
    assert np.allclose(a.time_delays, b.time_delays)


def test_custom_weights_used_and_normalized():
    cfg = ProfileConfig(elements=4, spacing=0.5, window_type="custom", custom_weights=[1.0, 2.0, 4.0, 2.0])
    assert np.allclose(compute_weights(cfg), [0.25, 0.5, 1.0, 0.5])


def test_custom_weights_wrong_length_fall_back_to_hamming():
    cfg = ProfileConfig(elements=5, spacing=0.5, window_type="custom", custom_weights=[1.0, 1.0])
    assert np.allclose(compute_weights(cfg), hamming_window(5))
    cfg_none = ProfileConfig(elements=5, spacing=0.5, window_type="custom")
    assert np.allclose(compute_weights(cfg_none), hamming_window(5))


def test_compute_profile_bundles_weights_and_delays():
    cfg = ProfileConfig(elements=6, spacing=0.5, window_type="hamming", steer_angle_deg=5.0)
    snap = compute_profile(cfg)
    assert snap.weights.shape == (6,)
    assert snap.delays.time_delays.shape == (6,)
    assert snap.delays.phase_radians.shape == (6,)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(elements=0, spacing=0.5),
        dict(elements=2.5, spacing=0.5),
        dict(elements=4, spacing=0.0),
        dict(elements=4, spacing=0.5, frequency_hz=-1.0),
        dict(elements=4, spacing=0.5, wave_speed=float("inf")),
        dict(elements=4, spacing=0.5, steer_angle_deg=float("nan")),
        dict(elements=4, spacing=0.5, spacing_unit="feet"),
        dict(elements=4, spacing=0.5, window_type="kaiser"),
        dict(elements=4, spacing=0.5, focus_depth=-0.01),
    ],
)
def test_profile_config_validation(kwargs):
    with pytest.raises(ValueError):
        ProfileConfig(**kwargs)
