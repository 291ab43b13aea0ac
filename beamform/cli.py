"""Command-line entry point: static beam profiles and dynamic frame simulation."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Sequence

import numpy as np

from .config_loader import ConfigManager
from .dynamic.beamformers import (
    create_delay_and_sum_apodized_beamformer,
    create_delay_and_sum_beamformer,
    create_sum_beamformer,
)
from .dynamic.config import DynamicBeamformingConfig
from .dynamic.generators import create_point_source_generator, create_txrx_point_source_generator
from .dynamic.runner import run_frame
from .hilbert import frame_envelope
from .metrics import compute_pattern_stats
from .pattern import compute_full_profile, default_angles
from .profile import ProfileConfig
from .profile_io import parse_csv_config, save_frame_h5, to_csv
from .storage import FileStorage
from .windows import WINDOW_TYPES

logger = logging.getLogger(__name__)


def _float_list(text: str, count: int, name: str) -> List[float]:
    try:
        vals = [float(v) for v in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"{name} must be {count} comma-separated numbers") from None
    if len(vals) != count:
        raise argparse.ArgumentTypeError(f"{name} must be {count} comma-separated numbers")
    return vals


def _angles_arg(text: str) -> List[float]:
    return _float_list(text, 3, "--angles")


def _range_arg(text: str) -> List[float]:
    return _float_list(text, 2, "--range")


def _fmt_db(v: Optional[float]) -> str:
    return "n/a" if v is None else f"{v:.2f}"


def _overlay_profile(base: ProfileConfig, args: argparse.Namespace) -> ProfileConfig:
    changes = {
        "elements": args.elements,
        "spacing": args.spacing,
        "spacing_unit": args.spacing_unit,
        "frequency_hz": args.frequency,
        "wave_speed": args.wavespeed,
        "steer_angle_deg": args.steer,
        "window_type": args.window,
        "chebyshev_sidelobe_db": args.cheb_sll,
        "focus_depth": args.focus,
    }
    return replace(base, **{k: v for k, v in changes.items() if v is not None})


def _overlay_dynamic(base: DynamicBeamformingConfig, args: argparse.Namespace) -> DynamicBeamformingConfig:
    scan_changes = {
        "scan_type": args.scan_type,
        "num_scan_lines": args.scan_lines,
        "scan_range": tuple(args.range) if args.range is not None else None,
        "samples": args.samples,
    }
    array_changes = {"elements": args.elements, "element_spacing": args.spacing}
    scanning = replace(base.scanning, **{k: v for k, v in scan_changes.items() if v is not None})
    array = replace(base.array, **{k: v for k, v in array_changes.items() if v is not None})
    return replace(
        base,
        time_step=args.dt if args.dt is not None else base.time_step,
        propagation_speed=args.c if args.c is not None else base.propagation_speed,
        scanning=scanning,
        array=array,
    )


def cmd_profiles_compute(args: argparse.Namespace) -> int:
    storage = FileStorage()
    manager = ConfigManager(args.config_dir)
    if args.from_csv:
        text = storage.load_text(args.from_csv)
        if text is None:
            print(f"error: cannot load {args.from_csv}", file=sys.stderr)
            return 1
        try:
            base = parse_csv_config(text).config
        except ValueError as e:
            print(f"error: {args.from_csv}: {e}", file=sys.stderr)
            return 1
    else:
        base = manager.get_profile_config(args.preset)
    config = _overlay_profile(base, args)

    angles = default_angles(*args.angles) if args.angles is not None else None
    profile = compute_full_profile(config, angles)
    stats = compute_pattern_stats(profile.pattern)
    logger.debug("computed %d pattern points for %s", len(profile.pattern), config)

    print(f"elements={config.elements} window={config.window_type} steer={config.steer_angle_deg:g} deg")
    print(f"PSL:  {_fmt_db(stats.psl_db)} dB")
    print(f"ISLR: {_fmt_db(stats.islr_db)} dB")
    print(f"FWHM: {_fmt_db(stats.fwhm_deg)} deg")

    if args.out:
        storage.save_text(args.out, to_csv(profile))
        print(f"Profile written to {args.out}")
    if args.html:
        from .plotting_interactive import pattern_figure

        pattern_figure(profile.pattern, f"{config.elements}-element {config.window_type} pattern").write_html(args.html)
        print(f"Pattern figure written to {args.html}")
    return 0


def cmd_dynamic_simulate(args: argparse.Namespace) -> int:
    manager = ConfigManager(args.config_dir)
    config = _overlay_dynamic(manager.get_dynamic_config(args.preset), args)
    source = manager.get_point_source_params(args.preset)
    source = replace(
        source,
        offset=args.offset if args.offset is not None else source.offset,
        speed=args.speed if args.speed is not None else source.speed,
        frequency_hz=args.freq if args.freq is not None else source.frequency_hz,
    )

    if args.generator == "txrx":
        generator = create_txrx_point_source_generator(source)
    else:
        generator = create_point_source_generator(source)

    if args.bf == "sum":
        beamformer = create_sum_beamformer()
    elif args.bf == "delay":
        beamformer = create_delay_and_sum_beamformer()
    else:
        beamformer = create_delay_and_sum_apodized_beamformer(args.window, args.cheb_sll)

    result = run_frame(config, generator, beamformer, n_jobs=args.jobs)
    frame = frame_envelope(result.beamformed) if args.envelope else result.beamformed

    unit = "deg" if config.is_phased else "m"
    line, sample = np.unravel_index(int(np.argmax(np.abs(frame))), frame.shape)
    print(f"frame: {frame.shape[0]} scanlines x {frame.shape[1]} samples ({config.scanning.scan_type})")
    print(f"scan: {result.scan_params[0]:g} .. {result.scan_params[-1]:g} {unit}")
    print(f"peak |value| {float(np.abs(frame[line, sample])):.4g} at line {line} "
          f"({result.scan_params[line]:g} {unit}), sample {sample}")

    if args.h5:
        save_frame_h5(args.h5, frame, result.scan_params, config,
                      attrs={"envelope": bool(args.envelope), "beamformer": args.bf, "generator": args.generator})
        print(f"Frame written to {args.h5}")
    if args.html:
        from .plotting_interactive import frame_heatmap

        frame_heatmap(frame, f"{args.bf} frame", scan_params=result.scan_params).write_html(args.html)
        print(f"Frame figure written to {args.html}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="beamform", description="Linear-array beam profiles and dynamic frames")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="group", required=True)

    profiles = sub.add_parser("profiles", help="Static beam profiles")
    psub = profiles.add_subparsers(dest="command", required=True)
    pc = psub.add_parser("compute", help="Compute weights, delays, pattern and statistics")
    pc.add_argument("--preset", default="default", help="Profile preset name")
    pc.add_argument("--config-dir", default="config", help="Directory holding profiles.json")
    pc.add_argument("--from-csv", help="Start from a saved profile CSV")
    pc.add_argument("--elements", type=int)
    pc.add_argument("--spacing", type=float)
    pc.add_argument("--spacing-unit", choices=["wavelength", "meters"])
    pc.add_argument("--frequency", type=float, help="Hz")
    pc.add_argument("--wavespeed", type=float, help="m/s")
    pc.add_argument("--steer", type=float, help="Steering angle (deg)")
    pc.add_argument("--window", choices=list(WINDOW_TYPES))
    pc.add_argument("--cheb-sll", type=float, help="Chebyshev sidelobe level (dB)")
    pc.add_argument("--focus", type=float, help="Focal depth (m)")
    pc.add_argument("--angles", type=_angles_arg, help="start,end,step in degrees (use --angles=-90,90,0.25 for negative starts)")
    pc.add_argument("--out", help="Write the profile CSV here")
    pc.add_argument("--html", help="Write an interactive pattern figure here")
    pc.set_defaults(func=cmd_profiles_compute)

    dynamic = sub.add_parser("dynamic", help="Dynamic scanline simulation")
    dsub = dynamic.add_subparsers(dest="command", required=True)
    ds = dsub.add_parser("simulate", help="Simulate and beamform one frame")
    ds.add_argument("--preset", default="default", help="Dynamic preset name")
    ds.add_argument("--config-dir", default="config", help="Directory holding dynamic.json")
    ds.add_argument("--scan-type", choices=["phased", "linear"])
    ds.add_argument("--scan-lines", type=int)
    ds.add_argument("--range", type=_range_arg, help="min,max, deg for phased or m for linear (use --range=-10,10)")
    ds.add_argument("--samples", type=int)
    ds.add_argument("--elements", type=int)
    ds.add_argument("--spacing", type=float, help="Element spacing (m)")
    ds.add_argument("--dt", type=float, help="Sample interval (s)")
    ds.add_argument("--c", type=float, help="Propagation speed (m/s)")
    ds.add_argument("--freq", type=float, help="Source frequency (Hz)")
    ds.add_argument("--offset", type=float, help="Source bearing (deg) or lateral offset (m)")
    ds.add_argument("--speed", type=float, help="Source radial speed (m/s)")
    ds.add_argument("--bf", choices=["sum", "delay", "delay-apod"], default="delay")
    ds.add_argument("--generator", choices=["rx", "txrx"], default="rx")
    ds.add_argument("--window", choices=list(WINDOW_TYPES), default="hamming")
    ds.add_argument("--cheb-sll", type=float, default=30.0)
    ds.add_argument("--envelope", action="store_true", help="Envelope-detect each scanline")
    ds.add_argument("--jobs", type=int, default=1, help="Parallel scanline jobs (-1 = all CPUs)")
    ds.add_argument("--h5", help="Write the frame to an HDF5 file")
    ds.add_argument("--html", help="Write an interactive frame heatmap here")
    ds.set_defaults(func=cmd_dynamic_simulate)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        return args.func(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
