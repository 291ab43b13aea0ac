import numpy as np

from beamform.cli import main
from beamform.profile_io import load_frame_h5, parse_csv_config


def test_profiles_compute_writes_csv(tmp_path, capsys):
    out = tmp_path / "profiles" / "rect.csv"
    rc = main(
        [
            "profiles",
            "compute",
            "--preset",
            "rectangular_small",
            "--config-dir",
            str(tmp_path),
            "--elements",
            "6",
            "--angles=-45,45,0.5",
            "--out",
            str(out),
        ]
    )
    assert rc == 0
    text = capsys.readouterr().out
    assert "PSL:" in text and "FWHM:" in text
    parsed = parse_csv_config(out.read_text())
    assert parsed.config.elements == 6
    assert parsed.config.window_type == "rectangular"


def test_profiles_compute_from_csv_overlay(tmp_path, capsys):
    src = tmp_path / "src.csv"
    assert main(["profiles", "compute", "--config-dir", str(tmp_path), "--window", "chebyshev", "--cheb-sll", "35", "--out", str(src)]) == 0
    dst = tmp_path / "dst.csv"
    assert main(["profiles", "compute", "--from-csv", str(src), "--steer", "10", "--out", str(dst)]) == 0
    cfg = parse_csv_config(dst.read_text()).config
    assert cfg.window_type == "chebyshev"
    assert cfg.chebyshev_sidelobe_db == 35.0
    assert cfg.steer_angle_deg == 10.0
    capsys.readouterr()


def test_profiles_compute_missing_csv_exits_1(tmp_path, capsys):
    assert main(["profiles", "compute", "--from-csv", str(tmp_path / "missing.csv")]) == 1
    assert "cannot load" in capsys.readouterr().err


def test_dynamic_simulate_writes_h5(tmp_path, capsys):
    path = tmp_path / "frame.h5"
    rc = main(
        [
            "dynamic",
            "simulate",
            "--config-dir",
            str(tmp_path),
            "--scan-lines",
            "5",
            "--samples",
            "64",
            "--elements",
            "8",
            "--bf",
            "delay-apod",
            "--generator",
            "txrx",
            "--envelope",
            "--jobs",
            "2",
            "--h5",
            str(path),
        ]
    )
    assert rc == 0
    assert "5 scanlines x 64 samples" in capsys.readouterr().out
    obj = load_frame_h5(str(path))
    assert obj["beamformed"].shape == (5, 64)
    assert np.all(obj["beamformed"] >= 0.0)
    assert obj["config"].array.elements == 8
    assert obj["attrs"]["generator"] == "txrx"


def test_dynamic_simulate_linear_sum(tmp_path, capsys):
    rc = main(
        [
            "dynamic",
            "simulate",
            "--preset",
            "linear_small",
            "--config-dir",
            str(tmp_path),
            "--bf",
            "sum",
            "--range=-0.001,0.001",
        ]
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert "(linear)" in out
    assert " m" in out


def test_profiles_compute_unreadable_csv_exits_1(tmp_path, capsys):
    assert main(["profiles", "compute", "--from-csv", str(tmp_path)]) == 1
    bad = tmp_path / "bad.csv"
    bad.write_bytes(b"\xff\xfe\xfa")
    assert main(["profiles", "compute", "--from-csv", str(bad)]) == 1
    assert "cannot load" in capsys.readouterr().err
